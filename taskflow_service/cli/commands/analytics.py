"""Analytics commands."""

from __future__ import annotations

import sys

import click

from taskflow_service.cli.utils import coro, error, info
from taskflow_service.core.exceptions import AppException
from taskflow_service.core.settings import get_analytics_settings


@click.group(name="analytics")
def analytics() -> None:
    """Task analytics reports."""


@analytics.command()
@click.argument("user_id")
@click.option("--fallback", is_flag=True, help="Skip the bulk strategy and aggregate in memory")
@click.option("--now", "now_text", default=None, help="Reference instant as ISO-8601 (default: current time)")
@coro
async def report(user_id: str, fallback: bool, now_text: str | None) -> None:
    """Print the analytics report for USER_ID as JSON.

    Uses the same strategies as the API but bypasses the rate limit and cache.
    """
    from datetime import UTC, datetime

    from taskflow_service.core.dependencies.ratelimit import get_analytics_rate_limiter
    from taskflow_service.features.analytics.aggregator import ReportWindow
    from taskflow_service.features.analytics.service import AnalyticsService, validate_user_id
    from taskflow_service.features.analytics.strategies import (
        FallbackAnalyticsStrategy,
        default_strategies,
    )
    from taskflow_service.infra.database.session import close_database, get_async_session

    settings = get_analytics_settings()

    try:
        window = ReportWindow.at(
            now_text or datetime.now(UTC),
            deadline_days=settings.deadline_days,
            trend_months=settings.trend_months,
        )
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="--now") from e

    strategies = [FallbackAnalyticsStrategy(settings)] if fallback else default_strategies(settings)
    info(f"Strategies: {', '.join(s.name for s in strategies)}")

    try:
        owner_id = validate_user_id(user_id)
        async with get_async_session() as session:
            service = AnalyticsService(
                session,
                get_analytics_rate_limiter(),
                settings=settings,
                strategies=strategies,
            )
            result = await service.compute_report(owner_id, window)
    except AppException as e:
        error(e.detail)
        sys.exit(1)
    finally:
        await close_database()

    click.echo(result.model_dump_json(by_alias=True, indent=2))
