"""Database session management with the psycopg3 async driver."""

from __future__ import annotations

import logging
import time
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any

from sqlalchemy import event, text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from taskflow_service.core.settings import get_app_settings, get_db_settings
from taskflow_service.infra.metrics.prometheus import database_connections_active
from taskflow_service.infra.metrics.tracking import track_query

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

logger = logging.getLogger(__name__)

db_settings = get_db_settings()
app_settings = get_app_settings()

# Falls back to a local SQLite file when PostgreSQL is disabled
engine = create_async_engine(
    db_settings.get_sqlalchemy_url(),
    **{
        **db_settings.sqlalchemy_engine_kwargs(),
        "echo": db_settings.echo or app_settings.debug,
    },
)

AsyncSessionLocal = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)


# ============================================================================
# Database Metrics Instrumentation
# ============================================================================


@event.listens_for(engine.sync_engine.pool, "connect")
def _receive_connect(dbapi_conn: Any, connection_record: Any) -> None:
    """Increment active connections when a new connection is established."""
    _ = dbapi_conn, connection_record
    database_connections_active.inc()


@event.listens_for(engine.sync_engine.pool, "close")
def _receive_close(dbapi_conn: Any, connection_record: Any) -> None:
    """Decrement active connections when a connection is closed."""
    _ = dbapi_conn, connection_record
    database_connections_active.dec()


@event.listens_for(engine.sync_engine, "before_cursor_execute")
def _before_cursor_execute(
    conn: Any, cursor: Any, statement: str, parameters: Any, context: Any, executemany: Any,
) -> None:
    _ = conn, cursor, statement, parameters, executemany
    context._query_start_time = time.perf_counter()


@event.listens_for(engine.sync_engine, "after_cursor_execute")
def _after_cursor_execute(
    conn: Any, cursor: Any, statement: str, parameters: Any, context: Any, executemany: Any,
) -> None:
    _ = conn, cursor, parameters, executemany
    duration = time.perf_counter() - context._query_start_time
    operation = statement.strip().split(None, 1)[0].upper() if statement else "UNKNOWN"
    track_query(operation, duration)


@asynccontextmanager
async def get_async_session() -> AsyncGenerator[AsyncSession]:
    """Get async database session.

    Yields:
        Database session that is automatically closed.

    Example:
        ```python
        async with get_async_session() as session:
            result = await session.execute(select(Task))
            tasks = result.scalars().all()
        ```
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
        finally:
            await session.close()


async def init_database() -> None:
    """Verify the database is reachable.

    Raises:
        Exception: Propagated from the driver when the connection fails.
    """
    logger.info(
        "Initializing database connection",
        extra={"configured": db_settings.is_configured, "host": db_settings.host},
    )
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception as e:
        logger.error(
            "Failed to connect to database",
            extra={"host": db_settings.host, "error": str(e)},
        )
        raise
    logger.info("Database connection established successfully")


async def check_database() -> bool:
    """Return True if a trivial query succeeds."""
    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except Exception as e:
        logger.warning("Database health check failed", extra={"error": str(e)})
        return False
    return True


async def create_tables() -> None:
    """Create the schema directly from the models.

    Only meant for the local SQLite fallback; PostgreSQL is migrated with Alembic.
    """
    from taskflow_service.core.database import Base
    from taskflow_service.core.models import Task, TaskTag  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Created tables on fallback database", extra={"url": db_settings.get_sqlalchemy_url()})


async def close_database() -> None:
    """Dispose of the engine's connection pool.

    This should be called during application shutdown.
    """
    logger.info("Closing database connection")
    await engine.dispose()


__all__ = [
    "AsyncSessionLocal",
    "check_database",
    "close_database",
    "create_tables",
    "engine",
    "get_async_session",
    "init_database",
]
