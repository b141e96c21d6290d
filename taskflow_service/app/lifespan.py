"""Application lifespan: startup and shutdown of shared resources."""

from __future__ import annotations

from contextlib import asynccontextmanager
import logging
from typing import TYPE_CHECKING

from taskflow_service.core.settings import (
    get_app_settings,
    get_db_settings,
    get_logging_settings,
    get_redis_settings,
)
from taskflow_service.infra.cache import start_cache, stop_cache
from taskflow_service.infra.logging import setup_logging
from taskflow_service.infra.metrics.prometheus import application_info

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from fastapi import FastAPI

logger = logging.getLogger(__name__)


async def _startup_core() -> None:
    """Configure logging and publish the application info metric."""
    app = get_app_settings()
    setup_logging(log_settings=get_logging_settings(), force=True, service_name=app.service_name)
    logger.info(
        "Application starting",
        extra={"service": app.service_name, "environment": app.environment},
    )

    application_info.labels(
        version=app.version,
        service=app.service_name,
        environment=app.environment,
    ).set(1)


async def _startup_database() -> None:
    from taskflow_service.infra.database.session import create_tables, init_database

    db = get_db_settings()

    if not db.is_configured:
        logger.warning("PostgreSQL not configured, using local SQLite database")
        await create_tables()
        return

    try:
        await init_database()
    except Exception as e:
        if db.startup_require_db:
            logger.exception(
                "Database required but unavailable, failing startup",
                extra={"error": str(e), "startup_require_db": True},
            )
            raise
        logger.warning(
            "Database unavailable, continuing in degraded mode",
            extra={"error": str(e), "startup_require_db": False},
        )


async def _startup_cache() -> None:
    redis = get_redis_settings()

    if not redis.is_configured:
        logger.info("Redis not configured, analytics caching disabled")
        return

    try:
        await start_cache()
    except Exception as e:
        if redis.startup_require_cache:
            logger.exception(
                "Redis required but unavailable, failing startup",
                extra={"error": str(e), "startup_require_cache": True},
            )
            raise
        logger.warning(
            "Redis unavailable, continuing without cache",
            extra={"error": str(e), "startup_require_cache": False},
        )


async def _shutdown() -> None:
    from taskflow_service.infra.database.session import close_database

    await stop_cache()
    await close_database()
    logger.info("Application shutdown complete")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Manage application lifecycle.

    Startup order is logging and metrics, then the database, then Redis.
    Shutdown runs in reverse.
    """
    _ = app

    await _startup_core()
    await _startup_database()
    await _startup_cache()

    app_settings = get_app_settings()
    logger.info(
        "Application startup complete - listening on %s:%s",
        app_settings.host,
        app_settings.port,
        extra={"service": app_settings.service_name, "environment": app_settings.environment},
    )

    try:
        yield
    finally:
        await _shutdown()
