"""
Engine and session wiring for the async record store.

The engine (and its connection pool) is the only resource shared between
requests. It is built lazily, once per process, from the settings and disposed
on application shutdown. Each request gets its own `AsyncSession` through the
`get_async_session` dependency, which commits when the request handler returns
and rolls back when it raises. Routes declare it with `scope="function"` so the
commit finishes before the response is sent; a failed commit surfaces as a
RepositoryError and is answered with a problem body instead of a success.
"""

import logging
from functools import lru_cache
from pathlib import Path
from typing import AsyncGenerator

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from ..config import get_settings
from ..exceptions.mapper import db_error_handler
from .base import Base

logger = logging.getLogger(__name__)


@lru_cache()
def get_engine() -> AsyncEngine:
    """Create (once) the AsyncEngine for the configured DATABASE_URL."""
    settings = get_settings()
    url = make_url(settings.DATABASE_URL)

    # SQLite files live under a directory that may not exist yet
    if url.get_backend_name() == "sqlite" and url.database and url.database != ":memory:":
        Path(url.database).parent.mkdir(parents=True, exist_ok=True)

    logger.info(
        "db.engine.create",
        extra={"backend": url.get_backend_name(), "driver": url.get_driver_name()},
    )
    return create_async_engine(
        url,
        echo=settings.SQLALCHEMY_ECHO,
        pool_pre_ping=True,  # Enables connection health checks
    )


@lru_cache()
def get_sessionmaker() -> async_sessionmaker[AsyncSession]:
    # expire_on_commit=False keeps returned entities readable after the request commits
    return async_sessionmaker(
        bind=get_engine(),
        class_=AsyncSession,
        expire_on_commit=False,
    )


async def get_async_session() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency. One session (unit of work) per request.

    Usage:
        async def endpoint(db: AsyncSession = Depends(get_async_session, scope="function")):
            await db.execute(...)
    """
    async with get_sessionmaker()() as session:
        try:
            yield session
            async with db_error_handler(session):
                await session.commit()
        except Exception:
            await session.rollback()
            raise


async def init_models(engine: AsyncEngine | None = None) -> None:
    """Create every table registered on Base.metadata (no migrations)."""
    engine = engine or get_engine()

    # Import models so they register with Base.metadata
    from .. import models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("db.schema.created", extra={"tables": sorted(Base.metadata.tables)})


async def dispose_engine() -> None:
    """Close pooled connections and forget the cached engine/sessionmaker."""
    if get_engine.cache_info().currsize:
        await get_engine().dispose()
    get_sessionmaker.cache_clear()
    get_engine.cache_clear()
