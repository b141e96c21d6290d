"""Helper functions for tracking business and operational metrics."""

from __future__ import annotations

import logging
from typing import Any

from taskflow_service.infra.metrics import prometheus

logger = logging.getLogger(__name__)


# ============================================================================
# Error Tracking
# ============================================================================


def track_error(
    error_type: str,
    endpoint: str,
    status_code: int,
    extra: dict[str, Any] | None = None,
) -> None:
    """Track an error occurrence.

    Args:
        error_type: Type of error (e.g., 'bad-request', 'rate-limit-exceeded')
        endpoint: API endpoint where error occurred
        status_code: HTTP status code
        extra: Additional context for logging

    Example:
        ```python
        track_error("rate-limit-exceeded", "/api/v1/analytics/tasks", 429)
        ```
    """
    prometheus.errors_total.labels(
        error_type=error_type,
        endpoint=endpoint,
        status_code=str(status_code),
    ).inc()

    logger.debug(
        "Tracked error: %s",
        error_type,
        extra={"endpoint": endpoint, "status_code": status_code, **(extra or {})},
    )


# ============================================================================
# Rate Limiting
# ============================================================================


def track_rate_limit_check(endpoint: str, allowed: bool) -> None:
    """Track a rate limit decision."""
    result = "allowed" if allowed else "denied"
    prometheus.rate_limit_checks_total.labels(endpoint=endpoint, result=result).inc()
    if not allowed:
        prometheus.rate_limit_hits_total.labels(endpoint=endpoint).inc()


def update_rate_limit_tracked_keys(count: int) -> None:
    """Record how many identities the limiter currently holds."""
    prometheus.rate_limit_tracked_keys.set(count)


# ============================================================================
# Analytics
# ============================================================================


def track_analytics_report(strategy: str, duration: float) -> None:
    """Track a successfully generated analytics report.

    Args:
        strategy: Name of the strategy that produced the report ('bulk', 'fallback')
        duration: Seconds spent computing the report
    """
    prometheus.analytics_reports_total.labels(strategy=strategy).inc()
    prometheus.analytics_report_duration_seconds.labels(strategy=strategy).observe(duration)


def track_analytics_strategy_failure(strategy: str) -> None:
    """Track a strategy that raised while computing a report."""
    prometheus.analytics_strategy_failures_total.labels(strategy=strategy).inc()


def track_analytics_cache(is_hit: bool) -> None:
    """Track an analytics report cache lookup."""
    prometheus.analytics_cache_requests_total.labels(result="hit" if is_hit else "miss").inc()


# ============================================================================
# Database
# ============================================================================


def track_query(operation: str, duration: float) -> None:
    """Record a query duration and log slow queries."""
    prometheus.database_query_duration_seconds.labels(operation=operation).observe(duration)
    if duration > 1.0:
        logger.warning(
            "Slow database query",
            extra={"operation": operation, "duration": round(duration, 3)},
        )
