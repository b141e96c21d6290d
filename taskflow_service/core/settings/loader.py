"""LRU-cached settings loaders.

Settings are loaded and validated once, then cached for the lifetime of the process.

Usage:
    from taskflow_service.core.settings.loader import get_app_settings

    settings = get_app_settings()  # First call: loads and validates
    settings = get_app_settings()  # Subsequent calls: returns cached instance

Testing:
    In tests, clear the caches to force reload:
    clear_all_caches()
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache

from .analytics import AnalyticsSettings
from .app import AppSettings
from .auth import AuthSettings
from .logs import LoggingSettings
from .postgres import PostgresSettings
from .redis import RedisSettings


@dataclass(frozen=True)
class Settings:
    """All settings sections bundled together."""

    app: AppSettings
    db: PostgresSettings
    redis: RedisSettings
    auth: AuthSettings
    logging: LoggingSettings
    analytics: AnalyticsSettings


@lru_cache(maxsize=1)
def get_app_settings() -> AppSettings:
    """Get cached application settings.

    Returns:
        Validated and frozen AppSettings instance.
    """
    return AppSettings()


@lru_cache(maxsize=1)
def get_db_settings() -> PostgresSettings:
    """Get cached database settings.

    Returns:
        Validated and frozen PostgresSettings instance.
    """
    return PostgresSettings()


@lru_cache(maxsize=1)
def get_redis_settings() -> RedisSettings:
    """Get cached Redis settings."""
    return RedisSettings()


@lru_cache(maxsize=1)
def get_auth_settings() -> AuthSettings:
    """Get cached authentication settings."""
    return AuthSettings()


@lru_cache(maxsize=1)
def get_logging_settings() -> LoggingSettings:
    """Get cached logging settings."""
    return LoggingSettings()


@lru_cache(maxsize=1)
def get_analytics_settings() -> AnalyticsSettings:
    """Get cached analytics settings."""
    return AnalyticsSettings()


def get_settings() -> Settings:
    """Get every settings section in one object."""
    return Settings(
        app=get_app_settings(),
        db=get_db_settings(),
        redis=get_redis_settings(),
        auth=get_auth_settings(),
        logging=get_logging_settings(),
        analytics=get_analytics_settings(),
    )


def clear_all_caches() -> None:
    """Clear all settings caches.

    Useful for testing or when environment variables change at runtime.
    """
    get_app_settings.cache_clear()
    get_db_settings.cache_clear()
    get_redis_settings.cache_clear()
    get_auth_settings.cache_clear()
    get_logging_settings.cache_clear()
    get_analytics_settings.cache_clear()
