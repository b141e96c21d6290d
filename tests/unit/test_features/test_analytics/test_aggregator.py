"""Tests for the pure analytics aggregation functions."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

import pytest

from taskflow_service.features.analytics.aggregator import (
    ReportWindow,
    StatusCounts,
    TaskSnapshot,
    aggregate,
    count_priorities,
    count_statuses,
    count_tags,
    effective_priority,
    month_ranges,
    productivity_score,
    round_half_up,
    to_utc,
    upcoming_deadlines,
)

NOW = datetime(2026, 10, 19, 12, 0, tzinfo=UTC)


def snapshot(index: int = 0, **kwargs) -> TaskSnapshot:
    defaults = {
        "id": f"00000000-0000-4000-8000-{index:012d}",
        "title": f"Task {index}",
        "status": "pending",
        "created_at": NOW - timedelta(days=1),
    }
    return TaskSnapshot(**{**defaults, **kwargs})


@pytest.fixture
def window() -> ReportWindow:
    return ReportWindow.at(NOW)


@pytest.fixture
def scenario_tasks() -> list[TaskSnapshot]:
    """10 tasks: 4 done, 2 in progress, 4 pending of which 2 are overdue."""
    tasks = [snapshot(i, status="done") for i in range(4)]
    tasks += [snapshot(i, status="in-progress") for i in range(4, 6)]
    tasks += [snapshot(i, status="pending", due_date=NOW - timedelta(days=2)) for i in range(6, 8)]
    tasks += [snapshot(i, status="pending") for i in range(8, 10)]
    return tasks


class TestProductivityScore:
    def test_reference_scenario(self, scenario_tasks, window):
        report = aggregate(scenario_tasks, window)

        assert report.total_tasks == 10
        assert report.completed_tasks == 4
        assert report.in_progress_tasks == 2
        assert report.pending_tasks == 4
        assert report.overdue_tasks == 2
        assert report.completion_rate == 40
        # 16 + 24 + 20 + 5
        assert report.productivity_score == 65

    def test_empty_counts_score_zero(self):
        assert productivity_score(StatusCounts()) == 0

    def test_half_rounds_up(self):
        # 0 + 30 + 2 + 2.5 = 34.5
        assert productivity_score(StatusCounts(total=1, pending=0, in_progress=1)) == 35
        assert round_half_up(64.5) == 65
        assert round_half_up(64.49) == 64

    @pytest.mark.parametrize("total", [1, 3, 7, 10, 25, 400])
    def test_score_stays_in_bounds(self, total):
        for completed in range(0, total + 1, max(1, total // 5)):
            for overdue in range(0, total - completed + 1, max(1, total // 5)):
                in_progress = total - completed
                counts = StatusCounts(
                    total=total,
                    completed=completed,
                    in_progress=in_progress,
                    overdue=overdue,
                )
                score = productivity_score(counts)
                assert isinstance(score, int)
                assert 0 <= score <= 100


class TestCounting:
    def test_overdue_requires_unfinished_task_with_past_due_date(self):
        tasks = [
            snapshot(1, status="done", due_date=NOW - timedelta(days=1)),
            snapshot(2, status="pending", due_date=NOW - timedelta(seconds=1)),
            snapshot(3, status="in-progress", due_date=NOW + timedelta(days=1)),
            snapshot(4, status="pending"),
        ]

        counts = count_statuses(tasks, NOW)

        assert counts.overdue == 1
        assert counts.completed + counts.pending + counts.in_progress == counts.total

    def test_unparseable_due_date_is_skipped(self, window):
        tasks = [snapshot(1, due_date="next tuesday"), snapshot(2, due_date=NOW - timedelta(days=1))]

        report = aggregate(tasks, window)

        assert report.total_tasks == 2
        assert report.overdue_tasks == 1
        assert report.upcoming_deadlines == []

    def test_naive_datetimes_are_read_as_utc(self):
        naive = datetime(2026, 10, 19, 11, 0)
        assert to_utc(naive) == datetime(2026, 10, 19, 11, 0, tzinfo=UTC)
        assert to_utc("2026-10-19T11:00:00Z") == datetime(2026, 10, 19, 11, 0, tzinfo=UTC)
        assert to_utc("2026-10-19T13:00:00+02:00") == datetime(2026, 10, 19, 11, 0, tzinfo=UTC)
        assert to_utc("garbage") is None
        assert to_utc(12345) is None


class TestDistributions:
    def test_priority_defaults_to_medium(self):
        tasks = [
            snapshot(1, priority="high"),
            snapshot(2, priority="low"),
            snapshot(3, priority=None),
            snapshot(4, priority="urgent"),
            snapshot(5, priority="HIGH"),
        ]

        breakdown = count_priorities(tasks)

        assert breakdown.model_dump() == {"high": 1, "medium": 3, "low": 1}
        assert sum(breakdown.model_dump().values()) == len(tasks)

    def test_effective_priority(self):
        assert effective_priority("low") == "low"
        assert effective_priority(None) == "medium"
        assert effective_priority(3) == "medium"

    def test_tags_counted_per_occurrence_and_ordered(self):
        tasks = [
            snapshot(1, tags=("work", "urgent", "work")),
            snapshot(2, tags=("home", "Work")),
            snapshot(3, tags=("home",)),
        ]

        tags = count_tags(tasks)

        assert list(tags.items()) == [("home", 2), ("work", 2), ("Work", 1), ("urgent", 1)]

    def test_tags_truncated_to_top_twenty(self):
        tasks = [snapshot(i, tags=(f"tag-{i:02d}",)) for i in range(25)]

        tags = count_tags(tasks)

        assert len(tags) == 20
        assert list(tags) == [f"tag-{i:02d}" for i in range(20)]


class TestMonthlyTrends:
    def test_six_ascending_months_ending_now(self, window):
        report = aggregate([], window)

        assert [t.month for t in report.monthly_trends] == [
            "2026-05",
            "2026-06",
            "2026-07",
            "2026-08",
            "2026-09",
            "2026-10",
        ]

    def test_months_wrap_over_year_boundary(self):
        keys = [m.key for m in month_ranges(datetime(2026, 2, 10, tzinfo=UTC))]
        assert keys == ["2025-09", "2025-10", "2025-11", "2025-12", "2026-01", "2026-02"]

    def test_completion_attributed_to_creation_month(self, window):
        tasks = [
            snapshot(1, status="done", created_at=datetime(2026, 8, 31, 23, 59, tzinfo=UTC)),
            snapshot(2, status="pending", created_at=datetime(2026, 8, 1, tzinfo=UTC)),
            snapshot(3, status="done", created_at="2026-10-01T00:00:00Z"),
            snapshot(4, status="done", created_at=datetime(2026, 3, 15, tzinfo=UTC)),
        ]

        report = aggregate(tasks, window)
        trends = {t.month: (t.created, t.completed) for t in report.monthly_trends}

        assert trends["2026-08"] == (2, 1)
        assert trends["2026-10"] == (1, 1)
        assert trends["2026-05"] == (0, 0)
        # outside the window but still part of the totals
        assert report.total_tasks == 4
        assert report.completed_tasks == 3


class TestUpcomingDeadlines:
    def test_due_tomorrow_listed_only_while_unfinished(self, window):
        tomorrow = NOW + timedelta(days=1)

        pending = aggregate([snapshot(1, due_date=tomorrow)], window)
        done = aggregate([snapshot(1, status="done", due_date=tomorrow)], window)

        assert [d.task_id for d in pending.upcoming_deadlines] == [snapshot(1).id]
        assert done.upcoming_deadlines == []

    def test_window_bounds_and_order(self):
        tasks = [
            snapshot(1, due_date=NOW + timedelta(days=3)),
            snapshot(2, due_date=NOW),
            snapshot(3, due_date=NOW + timedelta(days=7)),
            snapshot(4, due_date=NOW + timedelta(days=7, seconds=1)),
            snapshot(5, due_date=NOW - timedelta(seconds=1)),
            snapshot(6, due_date=NOW + timedelta(days=3)),
        ]

        deadlines = upcoming_deadlines(tasks, NOW, NOW + timedelta(days=7))

        assert [d.task_id[-1] for d in deadlines] == ["2", "1", "6", "3"]

    def test_limit_and_verbatim_due_date(self):
        tasks = [snapshot(i, due_date=NOW + timedelta(hours=i + 1)) for i in range(15)]
        tasks.append(snapshot(99, due_date="2026-10-19T12:30:00Z", priority="bogus"))

        deadlines = upcoming_deadlines(tasks, NOW, NOW + timedelta(days=7), limit=10)

        assert len(deadlines) == 10
        assert deadlines[0].due_date == "2026-10-19T12:30:00Z"
        assert deadlines[0].priority == "medium"
        assert deadlines[1].due_date == (NOW + timedelta(hours=1)).isoformat()


class TestReport:
    def test_empty_report(self, window):
        report = aggregate([], window)

        assert report.total_tasks == 0
        assert report.completion_rate == 0
        assert report.productivity_score == 0
        assert report.tasks_by_priority.model_dump() == {"high": 0, "medium": 0, "low": 0}
        assert report.tasks_by_tag == {}
        assert len(report.monthly_trends) == 6
        assert all(t.created == 0 and t.completed == 0 for t in report.monthly_trends)
        assert report.upcoming_deadlines == []
        assert report.average_completion_time == 24

    def test_same_input_same_report(self, scenario_tasks, window):
        first = aggregate(scenario_tasks, window)
        second = aggregate(list(scenario_tasks), window)

        assert first == second

    def test_serializes_with_camel_case_keys(self, scenario_tasks, window):
        body = aggregate(scenario_tasks, window).model_dump(by_alias=True, mode="json")

        assert set(body) == {
            "totalTasks",
            "completedTasks",
            "pendingTasks",
            "inProgressTasks",
            "completionRate",
            "overdueTasks",
            "productivityScore",
            "averageCompletionTime",
            "tasksByPriority",
            "tasksByTag",
            "monthlyTrends",
            "upcomingDeadlines",
        }
