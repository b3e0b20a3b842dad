import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from personal_library import models  # noqa: F401  (registers tables on Base.metadata)
from personal_library.api.v1 import api_router
from personal_library.api.v1.error_handlers import ProblemMapper, register_exception_handlers
from personal_library.config.settings import Settings, get_settings
from personal_library.core.logging import RequestIDMiddleware, setup_logging
from personal_library.database.base import Base
from personal_library.database.session import engine

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings: Settings = app.state.settings
    if settings.AUTO_CREATE_SCHEMA:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        logger.info("startup.schema.ready", extra={"dialect": engine.dialect.name})
    yield
    await engine.dispose()
    logger.info("shutdown.complete")


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    setup_logging(settings)

    app = FastAPI(title="Personal Library API", lifespan=lifespan)
    app.state.settings = settings

    # Middleware added later wraps earlier ones: request id is outermost so error logs carry it.
    register_exception_handlers(app, ProblemMapper(diagnostic_mode=settings.IS_DIAGNOSTIC))
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGIN_LIST,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(RequestIDMiddleware)

    app.include_router(api_router)

    logger.info(
        "app.created",
        extra={"env": settings.ENV, "diagnostic_mode": settings.IS_DIAGNOSTIC},
    )
    return app


app = create_app()
