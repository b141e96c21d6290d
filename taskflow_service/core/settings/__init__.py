"""Modular settings for taskflow-service.

Each concern has its own settings class with a dedicated environment prefix
and an LRU-cached loader:

    APP_*        AppSettings
    DB_*         PostgresSettings (DATABASE_URL for a full DSN)
    REDIS_*      RedisSettings (REDIS_URL for a full URL)
    AUTH_*       AuthSettings
    LOG_*        LoggingSettings
    ANALYTICS_*  AnalyticsSettings
"""

from __future__ import annotations

from .analytics import AnalyticsSettings
from .app import AppSettings
from .auth import AuthSettings
from .loader import (
    Settings,
    clear_all_caches,
    get_analytics_settings,
    get_app_settings,
    get_auth_settings,
    get_db_settings,
    get_logging_settings,
    get_redis_settings,
    get_settings,
)
from .logs import LoggingSettings
from .postgres import PostgresSettings
from .redis import RedisSettings

__all__ = [
    "AnalyticsSettings",
    "AppSettings",
    "AuthSettings",
    "LoggingSettings",
    "PostgresSettings",
    "RedisSettings",
    "Settings",
    "clear_all_caches",
    "get_analytics_settings",
    "get_app_settings",
    "get_auth_settings",
    "get_db_settings",
    "get_logging_settings",
    "get_redis_settings",
    "get_settings",
]
