"""
Turn every exception raised while handling a request into a ProblemResponse.

How it fits together:
    - Domain exceptions (exceptions/base.py) carry a FaultCategory.
    - Framework and persistence exceptions are tagged by `ProblemMapper.classify`.
    - The category picks status and title; `_DETAIL_BUILDERS` picks the detail text.
    - `register_exception_handlers(app, mapper)` wires the known exception types into
      FastAPI and installs UnhandledExceptionMiddleware for everything else, so no
      fault reaches the ASGI server.

A mapper never reads settings itself; diagnostic mode is passed in by create_app().
"""

import logging
from typing import Callable

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware

from personal_library.exceptions.base import FaultCategory, LibraryError, ValidationFailedError
from personal_library.schemas.problem import ProblemResponse

logger = logging.getLogger(__name__)

PROBLEM_MEDIA_TYPE = "application/problem+json"

VALIDATION_DETAIL = "One or more validation errors occurred"
PERSISTENCE_DETAIL = "A database error occurred while processing your request"
UNEXPECTED_DETAIL = "An unexpected error occurred"


def _exception_message(exc: Exception) -> str:
    if isinstance(exc, LibraryError):
        return exc.message
    if isinstance(exc, StarletteHTTPException):
        return str(exc.detail)
    return str(exc)


# category -> detail builder(exc, diagnostic_mode)
_DETAIL_BUILDERS: dict[FaultCategory, Callable[[Exception, bool], str]] = {
    FaultCategory.NOT_FOUND: lambda exc, diagnostic: _exception_message(exc),
    FaultCategory.BAD_REQUEST: lambda exc, diagnostic: _exception_message(exc),
    FaultCategory.BUSINESS_RULE: lambda exc, diagnostic: _exception_message(exc),
    FaultCategory.VALIDATION: lambda exc, diagnostic: VALIDATION_DETAIL,
    # Raw DB text never reaches clients, diagnostic mode or not
    FaultCategory.PERSISTENCE_CONFLICT: lambda exc, diagnostic: PERSISTENCE_DETAIL,
    FaultCategory.UNCLASSIFIED: lambda exc, diagnostic: (
        (str(exc) or type(exc).__name__) if diagnostic else UNEXPECTED_DETAIL
    ),
}

_missing = set(FaultCategory) - set(_DETAIL_BUILDERS)
if _missing:
    raise RuntimeError(f"No detail builder for fault categories: {sorted(c.name for c in _missing)}")


def _error_key(loc) -> str:
    # Malformed JSON reports a character offset last: ("body", 12)
    for part in reversed(loc or ()):
        if isinstance(part, str):
            return part
    return "body"


def request_validation_errors(exc: RequestValidationError) -> dict[str, list[str]]:
    """Group FastAPI/pydantic errors by the field name at the end of their location."""
    errors: dict[str, list[str]] = {}
    for err in exc.errors():
        errors.setdefault(_error_key(err.get("loc")), []).append(err.get("msg", "Invalid value"))
    return errors


class ProblemMapper:
    """
    Build one ProblemResponse per fault and log the fault exactly once.

    Args:
        diagnostic_mode: when True, 500 responses carry the exception message
                         instead of the generic text.
    """

    def __init__(self, diagnostic_mode: bool = False):
        self.diagnostic_mode = diagnostic_mode

    @staticmethod
    def classify(exc: Exception) -> FaultCategory:
        if isinstance(exc, LibraryError):
            return exc.category
        if isinstance(exc, RequestValidationError):
            return FaultCategory.VALIDATION
        if isinstance(exc, IntegrityError):
            return FaultCategory.PERSISTENCE_CONFLICT
        if isinstance(exc, StarletteHTTPException):
            # Unknown routes are 404; other framework rejections (405, ...) count as bad requests
            return FaultCategory.NOT_FOUND if exc.status_code == 404 else FaultCategory.BAD_REQUEST
        return FaultCategory.UNCLASSIFIED

    def build(self, exc: Exception, instance: str, category: FaultCategory | None = None) -> ProblemResponse:
        if category is None:
            category = self.classify(exc)

        errors = None
        if isinstance(exc, ValidationFailedError):
            errors = exc.violations
        elif isinstance(exc, RequestValidationError):
            errors = request_validation_errors(exc)

        return ProblemResponse(
            status=category.status,
            title=category.title,
            detail=_DETAIL_BUILDERS[category](exc, self.diagnostic_mode),
            instance=instance,
            errors=errors,
        )

    def log(self, request: Request, exc: Exception, category: FaultCategory) -> None:
        extra = {
            "category": category.name,
            "status_code": category.status,
            "method": request.method,
            "path": request.url.path,
            "exception_type": type(exc).__name__,
        }
        if category is FaultCategory.UNCLASSIFIED:
            logger.error("request.unhandled_exception: %s", exc, exc_info=exc, extra=extra)
        else:
            logger.warning("request.failed: %s", exc, exc_info=exc, extra=extra)

    async def handle(self, request: Request, exc: Exception) -> JSONResponse:
        category = self.classify(exc)
        self.log(request, exc, category)
        problem = self.build(exc, request.url.path, category)
        return JSONResponse(
            status_code=problem.status,
            content=problem.model_dump(exclude_none=True),
            media_type=PROBLEM_MEDIA_TYPE,
            headers=getattr(exc, "headers", None),
        )


class UnhandledExceptionMiddleware(BaseHTTPMiddleware):
    """
    Catch anything FastAPI's own exception handlers did not (plain Exceptions)
    and answer with the mapper's 500 problem response.
    """

    def __init__(self, app, mapper: ProblemMapper):
        super().__init__(app)
        self.mapper = mapper

    async def dispatch(self, request: Request, call_next):
        try:
            return await call_next(request)
        except Exception as exc:
            return await self.mapper.handle(request, exc)


def register_exception_handlers(app: FastAPI, mapper: ProblemMapper) -> None:
    """Call this from the app factory before adding outer middleware (CORS, request id)."""
    app.add_exception_handler(LibraryError, mapper.handle)
    app.add_exception_handler(RequestValidationError, mapper.handle)
    app.add_exception_handler(IntegrityError, mapper.handle)
    app.add_exception_handler(StarletteHTTPException, mapper.handle)
    app.add_middleware(UnhandledExceptionMiddleware, mapper=mapper)
