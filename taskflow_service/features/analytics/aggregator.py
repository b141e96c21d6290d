"""Pure aggregation helpers for the task analytics report.

Nothing in this module touches the database or the clock: every function
takes an explicit ``now``/window and returns fresh values, so the same
snapshot always produces the same report. The fallback strategy runs these
over an in-memory sample; the bulk strategy reuses the scoring and
formatting pieces on top of SQL aggregates.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
import math
from typing import TYPE_CHECKING, Any

from taskflow_service.core.models.task import TaskPriority, TaskStatus
from taskflow_service.features.analytics.schemas import (
    AnalyticsReport,
    MonthlyTrend,
    PriorityBreakdown,
    UpcomingDeadline,
)

if TYPE_CHECKING:
    from taskflow_service.core.models.task import Task

DEFAULT_PRIORITY = TaskPriority.MEDIUM.value
VALID_PRIORITIES = frozenset(p.value for p in TaskPriority)


@dataclass(frozen=True, slots=True)
class TaskSnapshot:
    """Read-only view of a task as the aggregator sees it."""

    id: str
    title: str
    status: str
    created_at: datetime | str | None
    priority: str | None = None
    due_date: datetime | str | None = None
    tags: tuple[str, ...] = ()

    @classmethod
    def from_model(cls, task: Task) -> TaskSnapshot:
        return cls(
            id=str(task.id),
            title=task.title,
            status=task.status,
            created_at=task.created_at,
            priority=task.priority,
            due_date=task.due_date,
            tags=tuple(task.tag_names),
        )


@dataclass(frozen=True, slots=True)
class StatusCounts:
    total: int = 0
    completed: int = 0
    pending: int = 0
    in_progress: int = 0
    overdue: int = 0


@dataclass(frozen=True, slots=True)
class MonthRange:
    """Half-open UTC range ``[start, end)`` covering one calendar month."""

    key: str
    start: datetime
    end: datetime


@dataclass(frozen=True, slots=True)
class ReportWindow:
    """Reference instant plus the date ranges derived from it."""

    now: datetime
    horizon: datetime
    months: tuple[MonthRange, ...]

    @classmethod
    def at(cls, now: datetime | str, deadline_days: int = 7, trend_months: int = 6) -> ReportWindow:
        now = to_utc(now)
        if now is None:
            raise ValueError("now must be a datetime or ISO-8601 string")
        return cls(
            now=now,
            horizon=now + timedelta(days=deadline_days),
            months=month_ranges(now, trend_months),
        )


# ============================================================================
# Scalar helpers
# ============================================================================


def to_utc(value: Any) -> datetime | None:
    """Normalize a datetime or ISO-8601 string to an aware UTC datetime.

    Naive datetimes are read as UTC. Anything unparseable returns None.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None

    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=UTC)
    return parsed.astimezone(UTC)


def format_due_date(value: datetime | str) -> str:
    """Render a due date for the report, keeping stored strings verbatim."""
    if isinstance(value, str):
        return value
    normalized = to_utc(value)
    return normalized.isoformat() if normalized is not None else str(value)


def round_half_up(value: float) -> int:
    # round() is banker's rounding: round(64.5) == 64
    return math.floor(value + 0.5)


def effective_priority(value: Any) -> str:
    """Return the priority used for grouping; missing or unknown means medium."""
    if isinstance(value, str) and value in VALID_PRIORITIES:
        return value
    return DEFAULT_PRIORITY


def completion_rate(completed: int, total: int) -> float:
    if total <= 0:
        return 0.0
    return completed / total * 100


def productivity_score(counts: StatusCounts) -> int:
    """Weighted blend of completion, overdue ratio, volume and activity.

    Weights are 0.4 / 0.3 / 0.2 / 0.1 and every component is capped at 100,
    so the result always lands in ``[0, 100]``.
    """
    total = counts.total
    if total <= 0:
        return 0

    completion = completion_rate(counts.completed, total) * 0.4
    overdue_penalty = max(0.0, 100 - counts.overdue / total * 100) * 0.3
    volume = min(100, total * 10) * 0.2
    activity = min(100, counts.in_progress * 25) * 0.1
    return round_half_up(completion + overdue_penalty + volume + activity)


def month_ranges(now: datetime, count: int = 6) -> tuple[MonthRange, ...]:
    """Return ``count`` consecutive UTC months ending with ``now``'s month."""
    ranges: list[MonthRange] = []
    for offset in range(count - 1, -1, -1):
        index = now.year * 12 + (now.month - 1) - offset
        year, month = divmod(index, 12)
        start = datetime(year, month + 1, 1, tzinfo=UTC)
        next_year, next_month = divmod(index + 1, 12)
        end = datetime(next_year, next_month + 1, 1, tzinfo=UTC)
        ranges.append(MonthRange(key=f"{year:04d}-{month + 1:02d}", start=start, end=end))
    return tuple(ranges)


# ============================================================================
# Snapshot aggregations
# ============================================================================


def count_statuses(tasks: Iterable[TaskSnapshot], now: datetime) -> StatusCounts:
    total = completed = pending = in_progress = overdue = 0
    for task in tasks:
        total += 1
        if task.status == TaskStatus.DONE:
            completed += 1
            continue
        if task.status == TaskStatus.PENDING:
            pending += 1
        elif task.status == TaskStatus.IN_PROGRESS:
            in_progress += 1

        due = to_utc(task.due_date)
        if due is not None and due < now:
            overdue += 1

    return StatusCounts(
        total=total,
        completed=completed,
        pending=pending,
        in_progress=in_progress,
        overdue=overdue,
    )


def count_priorities(tasks: Iterable[TaskSnapshot]) -> PriorityBreakdown:
    counter = Counter(effective_priority(task.priority) for task in tasks)
    return PriorityBreakdown(
        high=counter[TaskPriority.HIGH.value],
        medium=counter[TaskPriority.MEDIUM.value],
        low=counter[TaskPriority.LOW.value],
    )


def rank_tags(counts: Mapping[str, int], limit: int = 20) -> dict[str, int]:
    """Order tags by count descending then name ascending, keeping the top ``limit``."""
    ranked = sorted(counts.items(), key=lambda item: (-item[1], item[0]))
    return dict(ranked[:limit])


def count_tags(tasks: Iterable[TaskSnapshot], limit: int = 20) -> dict[str, int]:
    counter: Counter[str] = Counter()
    for task in tasks:
        counter.update(task.tags)
    return rank_tags(counter, limit)


def monthly_trends(tasks: Iterable[TaskSnapshot], months: Sequence[MonthRange]) -> list[MonthlyTrend]:
    """Bucket tasks by creation month.

    ``completed`` counts tasks created in the month that are done now, not
    tasks completed during the month.
    """
    created = dict.fromkeys((m.key for m in months), 0)
    completed = dict.fromkeys((m.key for m in months), 0)
    if months:
        window_start, window_end = months[0].start, months[-1].end
        for task in tasks:
            created_at = to_utc(task.created_at)
            if created_at is None or not window_start <= created_at < window_end:
                continue
            key = f"{created_at.year:04d}-{created_at.month:02d}"
            created[key] += 1
            if task.status == TaskStatus.DONE:
                completed[key] += 1

    return [
        MonthlyTrend(month=m.key, created=created[m.key], completed=completed[m.key])
        for m in months
    ]


def upcoming_deadlines(
    tasks: Iterable[TaskSnapshot],
    now: datetime,
    horizon: datetime,
    limit: int = 10,
) -> list[UpcomingDeadline]:
    """Unfinished tasks due in ``[now, horizon]``, soonest first."""
    candidates: list[tuple[datetime, str, TaskSnapshot]] = []
    for task in tasks:
        if task.status == TaskStatus.DONE or task.due_date is None:
            continue
        due = to_utc(task.due_date)
        if due is None or not now <= due <= horizon:
            continue
        candidates.append((due, task.id, task))

    candidates.sort(key=lambda item: (item[0], item[1]))
    return [
        UpcomingDeadline(
            task_id=task.id,
            title=task.title,
            due_date=format_due_date(task.due_date),
            priority=effective_priority(task.priority),
        )
        for _, _, task in candidates[:limit]
    ]


def build_report(
    counts: StatusCounts,
    *,
    priorities: PriorityBreakdown,
    tags: Mapping[str, int],
    trends: Sequence[MonthlyTrend],
    deadlines: Sequence[UpcomingDeadline],
    average_completion_time: int = 24,
) -> AnalyticsReport:
    return AnalyticsReport(
        total_tasks=counts.total,
        completed_tasks=counts.completed,
        pending_tasks=counts.pending,
        in_progress_tasks=counts.in_progress,
        completion_rate=completion_rate(counts.completed, counts.total),
        overdue_tasks=counts.overdue,
        productivity_score=productivity_score(counts),
        average_completion_time=average_completion_time,
        tasks_by_priority=priorities,
        tasks_by_tag=dict(tags),
        monthly_trends=list(trends),
        upcoming_deadlines=list(deadlines),
    )


def aggregate(
    tasks: Iterable[TaskSnapshot],
    window: ReportWindow,
    *,
    top_tags: int = 20,
    deadline_limit: int = 10,
    average_completion_time: int = 24,
    counts: StatusCounts | None = None,
) -> AnalyticsReport:
    """Compute a full report from task snapshots.

    Args:
        tasks: The owner's tasks (or a sample of them).
        window: Reference instant and derived ranges.
        top_tags: Maximum number of tags to report.
        deadline_limit: Maximum number of upcoming deadlines.
        average_completion_time: Placeholder value copied into the report.
        counts: Exact scalar counts computed elsewhere. When omitted they are
            derived from ``tasks``.
    """
    snapshot = tuple(tasks)
    return build_report(
        counts if counts is not None else count_statuses(snapshot, window.now),
        priorities=count_priorities(snapshot),
        tags=count_tags(snapshot, top_tags),
        trends=monthly_trends(snapshot, window.months),
        deadlines=upcoming_deadlines(snapshot, window.now, window.horizon, deadline_limit),
        average_completion_time=average_completion_time,
    )
