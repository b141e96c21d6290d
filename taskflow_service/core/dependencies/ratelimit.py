"""Rate limiting dependencies for FastAPI routes."""

from __future__ import annotations

from functools import lru_cache
from typing import Annotated

from fastapi import Depends

from taskflow_service.core.settings import get_analytics_settings
from taskflow_service.infra.ratelimit.limiter import SlidingWindowRateLimiter


@lru_cache(maxsize=1)
def get_analytics_rate_limiter() -> SlidingWindowRateLimiter:
    """Get the shared per-user limiter for analytics reports.

    The limiter lives in process memory, so its state is per worker.
    """
    settings = get_analytics_settings()
    return SlidingWindowRateLimiter(
        limit=settings.rate_limit_requests,
        window=settings.rate_limit_window,
        max_keys=settings.rate_limit_max_keys,
    )


AnalyticsRateLimiterDep = Annotated[SlidingWindowRateLimiter, Depends(get_analytics_rate_limiter)]
