"""
Core pytest configuration for the entire test suite.

Only the pieces every kind of test needs live here: quiet third-party loggers,
the application logging config and the database engine/session fixtures.
Domain fixtures live in tests/test_fixtures/ and are imported at the bottom of
this module so they are available everywhere.
"""

from __future__ import annotations

import os
import logging
from urllib.parse import urlparse
from typing import AsyncGenerator

# -------------------------------
# Early logging tuning
# -------------------------------
# Silence noisy third-party loggers before anything imports them.
NOISY_LOGGERS = (
    "faker",
    "faker.factory",
    "sqlalchemy",
    "sqlalchemy.engine",
    "sqlalchemy.engine.Engine",
    "aiosqlite",
    "asyncio",
    "httpx",
)
for _name in NOISY_LOGGERS:
    logging.getLogger(_name).setLevel(logging.WARNING)

import pytest
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from todo_service.core.logging.builder import setup_logging
from todo_service.database.base import Base
from todo_service.models import task  # noqa: F401 - registers the tasks table on Base.metadata

from .test_fixtures.settings import make_test_settings

logger = logging.getLogger(__name__)

IN_MEMORY_SQLITE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture(scope="session", autouse=True)
def configure_logging():
    """
    Install the application's dictConfig once for the whole session.

    pytest re-adds its capture handler to the root logger for every test phase,
    so `caplog` keeps working after dictConfig replaced the root handlers.
    """
    setup_logging(make_test_settings())
    yield


# ------------------------------------------------------------------------------------------------
# Test database URL
# ------------------------------------------------------------------------------------------------


def safe_log_db_url(db_url: str) -> str:
    """Return the URL without credentials, for logging."""
    parsed = urlparse(db_url)
    return f"{parsed.scheme}://{parsed.hostname or ''}:{parsed.port or ''}/{parsed.path.lstrip('/')}"


def get_test_database_url() -> str:
    """
    1. `TEST_DATABASE_URL` environment variable (CI override)
    2. in-memory SQLite through aiosqlite
    """
    return os.getenv("TEST_DATABASE_URL") or IN_MEMORY_SQLITE_URL


TEST_DATABASE_URL = get_test_database_url()
logger.info(f"Using test DB: {safe_log_db_url(TEST_DATABASE_URL)}")


# ------------------------------------------------------------------------------------------------
# DATABASE FIXTURES
# ------------------------------------------------------------------------------------------------


@pytest.fixture()
async def async_engine() -> AsyncGenerator[AsyncEngine, None]:
    """
    A fresh schema per test.

    The in-memory SQLite database lives as long as its connection, so a
    StaticPool hands the same connection to every session of the test.
    """
    if TEST_DATABASE_URL.startswith("sqlite"):
        engine = create_async_engine(
            TEST_DATABASE_URL,
            poolclass=StaticPool,
            connect_args={"check_same_thread": False},
        )
    else:
        engine = create_async_engine(TEST_DATABASE_URL, pool_pre_ping=True)

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
    """
    A session for repository tests. Repositories only flush, so nothing is
    committed; the schema is dropped with the engine anyway.
    """
    async with session_maker() as session:
        yield session
        await session.rollback()


# Shared fixtures
from .test_fixtures.repository_fixtures import (  # noqa: E402,F401
    task_repository,
    sample_task_data,
    create_task,
    created_task,
    multiple_tasks,
)
from .test_fixtures.service_fixtures import (  # noqa: E402,F401
    mock_task_repository,
    task_service,
)
from .test_fixtures.api_fixtures import (  # noqa: E402,F401
    app,
    client,
)
