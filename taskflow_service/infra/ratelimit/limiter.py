"""In-memory rate limiting using a sliding window log."""

from __future__ import annotations

import asyncio
import logging
import math
import time
from collections import deque
from typing import TYPE_CHECKING, Any

from taskflow_service.core.exceptions import RateLimitException
from taskflow_service.infra.metrics.tracking import (
    track_rate_limit_check,
    update_rate_limit_tracked_keys,
)

if TYPE_CHECKING:
    from collections.abc import Callable

logger = logging.getLogger(__name__)


class SlidingWindowRateLimiter:
    """Per-identity sliding window rate limiter held in process memory.

    Each identity maps to an ordered log of request timestamps. Timestamps
    older than the window are pruned on every check, and a request is
    allowed while fewer than ``limit`` remain. When more than ``max_keys``
    identities are tracked, a sweep drops every identity whose newest
    request is older than twice the window, which keeps the map bounded.

    All access to the map goes through one asyncio.Lock, so concurrent
    requests from the same identity are serialized.

    Example:
        ```python
        limiter = SlidingWindowRateLimiter(limit=5, window=60)

        allowed, meta = await limiter.check_limit("user-123")
        if not allowed:
            print(f"retry in {meta['retry_after']}s")
        ```
    """

    def __init__(
        self,
        limit: int = 5,
        window: float = 60.0,
        max_keys: int = 10_000,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize rate limiter.

        Args:
            limit: Requests allowed per identity within one window.
            window: Window length in seconds.
            max_keys: Tracked identities above which an eviction sweep runs.
            clock: Monotonic time source in seconds (injectable for tests).
        """
        if limit < 1:
            msg = "limit must be at least 1"
            raise ValueError(msg)
        if window <= 0:
            msg = "window must be positive"
            raise ValueError(msg)

        self.limit = limit
        self.window = window
        self.max_keys = max_keys
        self._clock = clock
        self._requests: dict[str, deque[float]] = {}
        self._lock = asyncio.Lock()

    def __len__(self) -> int:
        return len(self._requests)

    async def check_limit(self, key: str, endpoint: str = "unknown") -> tuple[bool, dict[str, Any]]:
        """Record a request for ``key`` if it fits in the current window.

        Args:
            key: Identity being limited (user id).
            endpoint: Endpoint label for metrics and logs.

        Returns:
            Tuple of (allowed, metadata) where metadata holds limit, remaining,
            window and retry_after (seconds, 0 when allowed).
        """
        async with self._lock:
            now = self._clock()

            if len(self._requests) > self.max_keys:
                self._evict_stale(now)

            timestamps = self._requests.get(key)
            if timestamps is None:
                timestamps = deque()
                self._requests[key] = timestamps

            window_start = now - self.window
            while timestamps and timestamps[0] <= window_start:
                timestamps.popleft()

            if len(timestamps) >= self.limit:
                retry_after = max(1, math.ceil(timestamps[0] + self.window - now))
                allowed = False
            else:
                timestamps.append(now)
                retry_after = 0
                allowed = True

            remaining = max(0, self.limit - len(timestamps))
            tracked = len(self._requests)

        track_rate_limit_check(endpoint, allowed)
        update_rate_limit_tracked_keys(tracked)

        metadata = {
            "limit": self.limit,
            "remaining": remaining,
            "window": self.window,
            "retry_after": retry_after,
        }

        if not allowed:
            logger.warning(
                "Rate limit exceeded",
                extra={"key": key, "endpoint": endpoint, **metadata},
            )

        return allowed, metadata

    async def reset(self, key: str | None = None) -> None:
        """Forget one identity, or every identity when key is None."""
        async with self._lock:
            if key is None:
                self._requests.clear()
            else:
                self._requests.pop(key, None)

    def _evict_stale(self, now: float) -> None:
        """Drop identities with no request in the last two windows.

        Caller must hold the lock.
        """
        cutoff = now - 2 * self.window
        stale = [
            key
            for key, timestamps in self._requests.items()
            if not timestamps or timestamps[-1] <= cutoff
        ]
        for key in stale:
            del self._requests[key]

        logger.info(
            "Rate limiter eviction sweep",
            extra={"evicted": len(stale), "remaining_keys": len(self._requests)},
        )


async def check_rate_limit(
    limiter: SlidingWindowRateLimiter,
    key: str,
    endpoint: str = "unknown",
) -> dict[str, Any]:
    """Check rate limit and raise exception if exceeded.

    Args:
        limiter: SlidingWindowRateLimiter instance.
        key: Unique identifier for rate limiting.
        endpoint: API endpoint being rate limited.

    Returns:
        Metadata dict containing limit, remaining, window and retry_after.

    Raises:
        RateLimitException: If rate limit is exceeded.
    """
    allowed, metadata = await limiter.check_limit(key, endpoint)

    if not allowed:
        raise RateLimitException(
            detail=f"Rate limit exceeded. Try again in {metadata['retry_after']} seconds",
            extra=metadata,
        )

    return metadata
