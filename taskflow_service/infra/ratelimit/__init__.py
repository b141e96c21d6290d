"""Rate limiting."""

from taskflow_service.infra.ratelimit.limiter import SlidingWindowRateLimiter, check_rate_limit

__all__ = ["SlidingWindowRateLimiter", "check_rate_limit"]
