"""Analytics aggregation settings."""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AnalyticsSettings(BaseSettings):
    """Tuning knobs for the task analytics report.

    Environment variables use ANALYTICS_ prefix.
    Example: ANALYTICS_BULK_ENABLED=false, ANALYTICS_RATE_LIMIT_REQUESTS=10
    """

    # Strategy selection
    bulk_enabled: bool = Field(
        default=True,
        description="Try the database-side aggregation before the sampled fallback",
    )
    sample_size: int = Field(
        default=1000,
        ge=1,
        le=100_000,
        description="Most recent tasks loaded by the fallback strategy",
    )

    # Report shape
    top_tags_limit: int = Field(
        default=20, ge=1, le=1000, description="Maximum number of tags in tasksByTag",
    )
    trend_months: int = Field(
        default=6, ge=1, le=36, description="Calendar months in monthlyTrends",
    )
    deadline_days: int = Field(
        default=7, ge=1, le=365, description="Look-ahead window for upcomingDeadlines",
    )
    deadline_limit: int = Field(
        default=10, ge=1, le=100, description="Maximum entries in upcomingDeadlines",
    )
    average_completion_time: int = Field(
        default=24,
        ge=0,
        description="Reported averageCompletionTime (placeholder, not computed)",
    )

    # Report cache
    cache_enabled: bool = Field(default=True, description="Cache reports in Redis when available")
    cache_ttl: int = Field(default=300, ge=1, le=86400, description="Report cache TTL in seconds")

    # Per-user rate limiting
    rate_limit_requests: int = Field(
        default=5, ge=1, le=10_000, description="Requests allowed per window per user",
    )
    rate_limit_window: float = Field(
        default=60.0, gt=0, le=86400, description="Sliding window length in seconds",
    )
    rate_limit_max_keys: int = Field(
        default=10_000,
        ge=1,
        description="Tracked identities before an eviction sweep runs",
    )

    model_config = SettingsConfigDict(
        env_prefix="ANALYTICS_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
        extra="ignore",
        env_ignore_empty=True,
    )
