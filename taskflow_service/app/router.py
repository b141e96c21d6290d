"""Router registry and setup."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from taskflow_service.core.settings import get_app_settings
from taskflow_service.features.analytics.router import router as analytics_router
from taskflow_service.features.health.router import router as health_router
from taskflow_service.features.metrics.router import router as metrics_router
from taskflow_service.features.tasks.router import router as tasks_router

if TYPE_CHECKING:
    from fastapi import FastAPI

    from taskflow_service.core.settings.app import AppSettings

logger = logging.getLogger(__name__)


def setup_routers(app: FastAPI, app_settings: AppSettings | None = None) -> None:
    """Register all feature routers with the application.

    Args:
        app: FastAPI application instance.
        app_settings: Optional override for the API prefix.
    """
    app_settings = app_settings or get_app_settings()
    api_prefix = app_settings.api_prefix

    # /metrics stays unprefixed for scrapers
    app.include_router(metrics_router)

    app.include_router(health_router, prefix=api_prefix)
    app.include_router(analytics_router, prefix=api_prefix)
    app.include_router(tasks_router, prefix=api_prefix)

    logger.info("Routers registered", extra={"api_prefix": api_prefix})
