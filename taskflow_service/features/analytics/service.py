"""Service layer for task analytics."""

from __future__ import annotations

from datetime import UTC, datetime
import logging
import re
import time
from typing import TYPE_CHECKING, Annotated, Any, Protocol

from fastapi import Depends
from redis.exceptions import RedisError

from taskflow_service.core.dependencies.database import SessionDep
from taskflow_service.core.dependencies.ratelimit import AnalyticsRateLimiterDep
from taskflow_service.core.exceptions import BadRequestException, InternalServerException
from taskflow_service.core.services.base import BaseService
from taskflow_service.core.settings import AnalyticsSettings, get_analytics_settings
from taskflow_service.features.analytics.aggregator import ReportWindow
from taskflow_service.features.analytics.schemas import AnalyticsReport
from taskflow_service.features.analytics.strategies import AnalyticsStrategy, default_strategies
from taskflow_service.infra.cache import get_cache_instance
from taskflow_service.infra.logging import set_log_context
from taskflow_service.infra.metrics.tracking import (
    track_analytics_cache,
    track_analytics_report,
    track_analytics_strategy_failure,
)
from taskflow_service.infra.ratelimit import SlidingWindowRateLimiter, check_rate_limit

if TYPE_CHECKING:
    from collections.abc import Sequence

    from sqlalchemy.ext.asyncio import AsyncSession

logger = logging.getLogger(__name__)

ANALYTICS_ENDPOINT = "/analytics/tasks"

USER_ID_PATTERN = re.compile(
    r"[0-9a-f]{8}-[0-9a-f]{4}-4[0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}",
    re.IGNORECASE,
)

_CACHE_ERRORS = (RedisError, RuntimeError, ValueError)


class ReportCache(Protocol):
    async def get(self, key: str) -> Any | None: ...

    async def set(self, key: str, value: Any, ttl: int | None = None) -> bool: ...

    async def delete(self, key: str) -> bool: ...


def report_cache_key(user_id: str) -> str:
    return f"analytics:report:{user_id.lower()}"


def validate_user_id(user_id: str) -> str:
    """Return ``user_id`` if it is a UUID v4 string, else raise a 400."""
    if not isinstance(user_id, str) or not USER_ID_PATTERN.fullmatch(user_id):
        raise BadRequestException(detail="Invalid user ID format", type="invalid-user-id")
    return user_id


async def invalidate_cached_report(cache: ReportCache | None, user_id: str) -> None:
    """Drop a user's cached report after their tasks change."""
    if cache is None:
        return
    try:
        await cache.delete(report_cache_key(user_id))
    except _CACHE_ERRORS as e:
        # entries still expire after cache_ttl
        logger.warning(
            "Failed to invalidate analytics cache",
            extra={"user_id": user_id, "error": str(e)},
        )


class AnalyticsService(BaseService):
    """Builds productivity reports for the authenticated user.

    Strategies are tried in order. Any failure of a non-final strategy is
    logged, counted and recovered by rolling back the session and moving on
    to the next one. Only a failure of the last strategy reaches the caller,
    as a generic 500.
    """

    def __init__(
        self,
        session: AsyncSession,
        rate_limiter: SlidingWindowRateLimiter,
        *,
        settings: AnalyticsSettings | None = None,
        cache: ReportCache | None = None,
        strategies: Sequence[AnalyticsStrategy] | None = None,
    ) -> None:
        super().__init__()
        self.session = session
        self.rate_limiter = rate_limiter
        self.settings = settings or get_analytics_settings()
        self.cache = cache if self.settings.cache_enabled else None
        self.strategies = list(strategies) if strategies is not None else default_strategies(self.settings)
        if not self.strategies:
            raise ValueError("At least one analytics strategy is required")

    async def get_report(self, user_id: str, now: datetime | None = None) -> AnalyticsReport:
        """Validate, rate limit, then serve a cached or freshly computed report.

        Raises:
            BadRequestException: ``user_id`` is not a UUID v4.
            RateLimitException: The user exceeded the request budget.
            InternalServerException: Every strategy failed.
        """
        user_id = validate_user_id(user_id)
        set_log_context(user_id=user_id)
        await check_rate_limit(self.rate_limiter, user_id, endpoint=ANALYTICS_ENDPOINT)

        cached = await self._get_cached(user_id)
        if cached is not None:
            return cached

        window = ReportWindow.at(
            now or datetime.now(UTC),
            deadline_days=self.settings.deadline_days,
            trend_months=self.settings.trend_months,
        )
        report = await self.compute_report(user_id, window)
        await self._store_cached(user_id, report)
        return report

    async def compute_report(self, owner_id: str, window: ReportWindow) -> AnalyticsReport:
        """Run the strategies in order, falling through on failure."""
        *preferred, last = self.strategies

        for strategy in preferred:
            try:
                return await self._run(strategy, owner_id, window)
            except Exception:
                self.logger.warning(
                    "Analytics strategy failed, falling back",
                    exc_info=True,
                    extra={"strategy": strategy.name, "user_id": owner_id},
                )
                track_analytics_strategy_failure(strategy.name)
                await self.session.rollback()

        try:
            return await self._run(last, owner_id, window)
        except Exception as e:
            track_analytics_strategy_failure(last.name)
            self.logger.exception(
                "Failed to generate analytics",
                extra={"strategy": last.name, "user_id": owner_id},
            )
            raise InternalServerException() from e

    async def _run(self, strategy: AnalyticsStrategy, owner_id: str, window: ReportWindow) -> AnalyticsReport:
        self._lazy.debug(lambda: f"Computing analytics for {owner_id} with {strategy.name}")
        start = time.perf_counter()
        report = await strategy.compute(self.session, owner_id, window)
        duration = time.perf_counter() - start

        track_analytics_report(strategy.name, duration)
        self.logger.info(
            "Analytics report generated",
            extra={
                "strategy": strategy.name,
                "exact": strategy.exact,
                "total_tasks": report.total_tasks,
                "duration_ms": round(duration * 1000, 2),
            },
        )
        return report

    async def _get_cached(self, user_id: str) -> AnalyticsReport | None:
        if self.cache is None:
            return None
        try:
            payload = await self.cache.get(report_cache_key(user_id))
            report = AnalyticsReport.model_validate(payload) if payload is not None else None
        except _CACHE_ERRORS as e:
            self.logger.warning("Analytics cache read failed", extra={"error": str(e)})
            return None

        track_analytics_cache(is_hit=report is not None)
        return report

    async def _store_cached(self, user_id: str, report: AnalyticsReport) -> None:
        if self.cache is None:
            return
        try:
            await self.cache.set(
                report_cache_key(user_id),
                report.model_dump(by_alias=True, mode="json"),
                ttl=self.settings.cache_ttl,
            )
        except _CACHE_ERRORS as e:
            self.logger.warning("Analytics cache write failed", extra={"error": str(e)})


def get_analytics_service(
    session: SessionDep,
    rate_limiter: AnalyticsRateLimiterDep,
) -> AnalyticsService:
    """FastAPI dependency that builds an :class:`AnalyticsService` per request."""
    return AnalyticsService(session, rate_limiter, cache=get_cache_instance())


AnalyticsServiceDep = Annotated[AnalyticsService, Depends(get_analytics_service)]
