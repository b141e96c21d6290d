"""Tests for the bulk and fallback analytics strategies against SQLite."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta, timezone

import pytest

from taskflow_service.core.settings import AnalyticsSettings
from taskflow_service.features.analytics.aggregator import ReportWindow
from taskflow_service.features.analytics.strategies import (
    AnalyticsStrategy,
    BulkAnalyticsStrategy,
    FallbackAnalyticsStrategy,
    default_strategies,
)
from tests.conftest import ALICE_ID, BOB_ID, REFERENCE_NOW

pytestmark = pytest.mark.asyncio


@pytest.fixture
def window() -> ReportWindow:
    return ReportWindow.at(REFERENCE_NOW)


@pytest.fixture
def settings() -> AnalyticsSettings:
    return AnalyticsSettings()


@pytest.fixture
async def mixed_tasks(task_factory):
    """A varied data set spanning statuses, priorities, months and due dates."""
    now = REFERENCE_NOW
    await task_factory(status="done", priority="high", tags=["work", "q4"], created_at=now - timedelta(days=2))
    await task_factory(status="done", priority="low", tags=["home"], created_at=datetime(2026, 7, 3, tzinfo=UTC))
    await task_factory(
        status="in-progress",
        priority="bogus",
        tags=["work", "work"],
        due_date=now + timedelta(days=2),
        created_at=datetime(2026, 9, 30, 23, 0, tzinfo=UTC),
    )
    await task_factory(status="pending", due_date=now - timedelta(days=1), tags=["home", "Errand"])
    await task_factory(status="pending", due_date=now + timedelta(hours=5), priority="high")
    await task_factory(status="done", due_date=now + timedelta(days=1), created_at=datetime(2026, 5, 1, tzinfo=UTC))
    await task_factory(status="pending", due_date=now + timedelta(days=9), created_at=datetime(2025, 12, 24, tzinfo=UTC))
    await task_factory(owner_id=BOB_ID, status="done", tags=["work"], due_date=now + timedelta(days=1))


def test_strategies_satisfy_protocol(settings):
    assert isinstance(BulkAnalyticsStrategy(settings), AnalyticsStrategy)
    assert isinstance(FallbackAnalyticsStrategy(settings), AnalyticsStrategy)
    assert BulkAnalyticsStrategy.exact is True
    assert FallbackAnalyticsStrategy.exact is False


def test_default_strategies_respect_bulk_flag():
    assert [s.name for s in default_strategies(AnalyticsSettings())] == ["bulk", "fallback"]
    assert [s.name for s in default_strategies(AnalyticsSettings(bulk_enabled=False))] == ["fallback"]


async def test_bulk_and_fallback_agree(db_session, mixed_tasks, window, settings):
    bulk = await BulkAnalyticsStrategy(settings).compute(db_session, ALICE_ID, window)
    fallback = await FallbackAnalyticsStrategy(settings).compute(db_session, ALICE_ID, window)

    assert bulk == fallback


async def test_bulk_report_values(db_session, mixed_tasks, window, settings):
    report = await BulkAnalyticsStrategy(settings).compute(db_session, ALICE_ID, window)

    assert report.total_tasks == 7
    assert report.completed_tasks == 3
    assert report.pending_tasks == 3
    assert report.in_progress_tasks == 1
    assert report.overdue_tasks == 1
    assert report.tasks_by_priority.model_dump() == {"high": 2, "medium": 4, "low": 1}
    assert list(report.tasks_by_tag.items()) == [("work", 3), ("home", 2), ("Errand", 1), ("q4", 1)]

    trends = {t.month: (t.created, t.completed) for t in report.monthly_trends}
    assert trends == {
        "2026-05": (1, 1),
        "2026-06": (0, 0),
        "2026-07": (1, 1),
        "2026-08": (0, 0),
        "2026-09": (1, 0),
        "2026-10": (3, 1),
    }

    assert [d.title for d in report.upcoming_deadlines] == ["Task", "Task"]
    assert [d.priority for d in report.upcoming_deadlines] == ["high", "medium"]


async def test_bulk_caps_tags_at_twenty(db_session, task_factory, window, settings):
    for i in range(25):
        await task_factory(title=f"Task {i}", tags=[f"tag-{i:02d}"])

    report = await BulkAnalyticsStrategy(settings).compute(db_session, ALICE_ID, window)

    assert len(report.tasks_by_tag) == 20
    assert list(report.tasks_by_tag) == [f"tag-{i:02d}" for i in range(20)]


@pytest.mark.parametrize("strategy_cls", [BulkAnalyticsStrategy, FallbackAnalyticsStrategy])
async def test_reports_are_scoped_to_owner(db_session, mixed_tasks, window, settings, strategy_cls):
    report = await strategy_cls(settings).compute(db_session, BOB_ID, window)

    assert report.total_tasks == 1
    assert report.completed_tasks == 1
    assert report.tasks_by_tag == {"work": 1}
    assert report.upcoming_deadlines == []


@pytest.mark.parametrize("strategy_cls", [BulkAnalyticsStrategy, FallbackAnalyticsStrategy])
async def test_owner_without_tasks(db_session, window, settings, strategy_cls):
    report = await strategy_cls(settings).compute(db_session, ALICE_ID, window)

    assert report.total_tasks == 0
    assert report.productivity_score == 0
    assert len(report.monthly_trends) == 6


async def test_fallback_samples_distributions_but_counts_exactly(db_session, task_factory, window):
    for day in range(5):
        await task_factory(
            status="done" if day % 2 else "pending",
            priority="high",
            tags=["old"] if day < 3 else ["new"],
            created_at=REFERENCE_NOW - timedelta(days=day + 1),
        )
    settings = AnalyticsSettings(sample_size=2)

    report = await FallbackAnalyticsStrategy(settings).compute(db_session, ALICE_ID, window)

    assert report.total_tasks == 5
    assert report.completed_tasks == 2
    # only the two most recent tasks are sampled
    assert report.tasks_by_priority.high == 2
    assert report.tasks_by_tag == {"old": 2}


@pytest.fixture
async def deadline_edges(task_factory, window):
    """Due dates on and just outside both ends of the deadline window."""
    second = timedelta(seconds=1)
    await task_factory(title="before now", due_date=window.now - second)
    await task_factory(title="at now", due_date=window.now)
    await task_factory(title="at horizon", due_date=window.horizon)
    await task_factory(title="after horizon", due_date=window.horizon + second)


@pytest.mark.parametrize("strategy_cls", [BulkAnalyticsStrategy, FallbackAnalyticsStrategy])
async def test_deadline_window_is_inclusive(db_session, deadline_edges, window, settings, strategy_cls):
    report = await strategy_cls(settings).compute(db_session, ALICE_ID, window)

    assert [d.title for d in report.upcoming_deadlines] == ["at now", "at horizon"]
    assert report.overdue_tasks == 1


async def test_deadline_edges_agree(db_session, deadline_edges, window, settings):
    bulk = await BulkAnalyticsStrategy(settings).compute(db_session, ALICE_ID, window)
    fallback = await FallbackAnalyticsStrategy(settings).compute(db_session, ALICE_ID, window)

    assert bulk == fallback


@pytest.fixture
async def crowded_deadlines(task_factory, window):
    """Twelve unfinished tasks due inside the window, two sharing a due date."""
    for hour in range(11):
        await task_factory(title=f"due +{hour + 1}h", due_date=window.now + timedelta(hours=hour + 1))
    await task_factory(title="due +1h again", due_date=window.now + timedelta(hours=1))
    await task_factory(title="finished", status="done", due_date=window.now + timedelta(minutes=5))


async def test_deadlines_are_limited_and_agree(db_session, crowded_deadlines, window, settings):
    bulk = await BulkAnalyticsStrategy(settings).compute(db_session, ALICE_ID, window)
    fallback = await FallbackAnalyticsStrategy(settings).compute(db_session, ALICE_ID, window)

    assert bulk == fallback
    assert len(bulk.upcoming_deadlines) == 10
    due_dates = [d.due_date for d in bulk.upcoming_deadlines]
    assert due_dates == sorted(due_dates)
    tied = [d.task_id for d in bulk.upcoming_deadlines[:2]]
    assert tied == sorted(tied)
    assert "finished" not in {d.title for d in bulk.upcoming_deadlines}
    assert bulk.upcoming_deadlines[-1].title == "due +9h"


@pytest.mark.parametrize("strategy_cls", [BulkAnalyticsStrategy, FallbackAnalyticsStrategy])
@pytest.mark.parametrize(
    ("offset_hours", "overdue", "upcoming"),
    [
        (5, 1, 0),
        (-5, 0, 1),
    ],
)
async def test_due_dates_with_offsets_compare_in_utc(
    db_session, task_factory, window, settings, strategy_cls, offset_hours, overdue, upcoming
):
    # 2 hours before now for +05:00, 2 hours after now for -05:00
    shift = timedelta(hours=-2 if offset_hours > 0 else 2)
    due = (window.now + shift).astimezone(timezone(timedelta(hours=offset_hours)))
    await task_factory(due_date=due)

    report = await strategy_cls(settings).compute(db_session, ALICE_ID, window)

    assert report.overdue_tasks == overdue
    assert len(report.upcoming_deadlines) == upcoming
