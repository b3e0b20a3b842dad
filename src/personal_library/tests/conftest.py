"""
Core pytest configuration for the whole suite.

Every test gets its own in-memory SQLite database (aiosqlite + StaticPool, so all
sessions of a test share one connection). Set TEST_DATABASE_URL to run the suite
against another database, e.g. a throwaway Postgres in CI.

Domain fixtures (book/loan factories, repositories, services) live in
tests/test_fixtures/library_fixtures.py and are registered at the bottom of this module.
"""

from __future__ import annotations

import logging
from typing import AsyncGenerator

# -------------------------------
# Early logging tuning
# -------------------------------
# Silence noisy third-party loggers before the app modules import them.
NOISY_LOGGERS = (
    "faker",
    "faker.factory",
    "sqlalchemy",
    "sqlalchemy.engine",
    "sqlalchemy.engine.Engine",
    "asyncio",
    "httpx",
    "aiosqlite",
)
for _name in NOISY_LOGGERS:
    logging.getLogger(_name).setLevel(logging.WARNING)

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool

from personal_library import models  # noqa: F401  (registers tables on Base.metadata)
from personal_library.config.settings import Settings
from personal_library.database.base import Base
from personal_library.database.session import build_engine, get_async_session
from personal_library.main import create_app
from .test_fixtures.app_settings import TEST_DATABASE_URL, make_test_settings

def _engine_kwargs(url: str) -> dict:
    if url.startswith("sqlite"):
        # one shared connection, otherwise every new connection is a fresh empty :memory: db
        return {"poolclass": StaticPool, "connect_args": {"check_same_thread": False}}
    return {"pool_pre_ping": True}


# ------------------------------------------------------------------------------------------------
# DATABASE FIXTURES
# ------------------------------------------------------------------------------------------------


@pytest.fixture()
async def async_engine() -> AsyncGenerator[AsyncEngine, None]:
    engine = build_engine(TEST_DATABASE_URL, **_engine_kwargs(TEST_DATABASE_URL))

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture()
def session_maker(async_engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(bind=async_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture()
async def db_session(session_maker) -> AsyncGenerator[AsyncSession, None]:
    """A session for repository and service tests. Services commit through it normally."""
    async with session_maker() as session:
        yield session


# ------------------------------------------------------------------------------------------------
# APP / HTTP FIXTURES
# ------------------------------------------------------------------------------------------------


@pytest.fixture()
def test_settings() -> Settings:
    return make_test_settings()


@pytest.fixture()
def app(test_settings: Settings) -> FastAPI:
    return create_app(test_settings)


@pytest.fixture()
async def client(app: FastAPI, session_maker) -> AsyncGenerator[AsyncClient, None]:
    """
    httpx client talking to the app in-process. Each request gets its own session
    bound to the per-test database.
    """
    async def _override_session() -> AsyncGenerator[AsyncSession, None]:
        async with session_maker() as session:
            yield session

    app.dependency_overrides[get_async_session] = _override_session
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


# Domain fixtures
from .test_fixtures.library_fixtures import (  # noqa: E402
    book_payload,
    book_repository,
    loan_repository,
    rating_repository,
    reading_status_repository,
    create_book,
    created_book,
    book_service,
    loan_service,
    rating_service,
    reading_status_service,
)
