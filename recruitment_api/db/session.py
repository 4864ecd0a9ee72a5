from __future__ import annotations

import logging
from typing import Any, Optional

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.pool import StaticPool

from .base import Base
from .config import Settings, get_settings

logger = logging.getLogger(__name__)


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:  # noqa: ARG001
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


# PUBLIC_INTERFACE
def create_engine_from_settings(settings: Optional[Settings] = None) -> AsyncEngine:
    """
    Build the AsyncEngine (connection pool) for the configured database.

    The caller owns the engine: the application creates it in its lifespan
    and disposes it at shutdown. SQLite in-memory databases use a single
    shared connection so every session sees the same data, and foreign keys
    are switched on for every SQLite connection.
    """
    settings = settings or get_settings()
    url = settings.async_database_url
    kwargs: dict[str, Any] = {"echo": settings.SQL_ECHO}

    if url.startswith("sqlite"):
        if ":memory:" in url or url.rstrip("/").endswith("sqlite+aiosqlite:"):
            kwargs.update(poolclass=StaticPool, connect_args={"check_same_thread": False})
        engine = create_async_engine(url, **kwargs)
        event.listen(engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
    else:
        kwargs.update(
            pool_size=settings.DB_POOL_SIZE,
            max_overflow=settings.DB_MAX_OVERFLOW,
            pool_pre_ping=True,
        )
        engine = create_async_engine(url, **kwargs)

    logger.info("Database engine created for dialect %s", engine.dialect.name)
    return engine


# PUBLIC_INTERFACE
def dialect_of(engine: AsyncEngine) -> str:
    """Backend name of an engine ('mysql' or 'sqlite'); MariaDB reports as mysql."""
    name = engine.dialect.name
    return "mysql" if name in ("mysql", "mariadb") else name


# PUBLIC_INTERFACE
async def create_schema(engine: AsyncEngine) -> None:
    """Create any missing tables from the model metadata (development and tests)."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


# PUBLIC_INTERFACE
async def drop_schema(engine: AsyncEngine) -> None:
    """Drop every table known to the model metadata."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
