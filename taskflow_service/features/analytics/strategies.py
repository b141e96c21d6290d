"""Strategies that turn an owner's tasks into an analytics report.

Two implementations share the :class:`AnalyticsStrategy` protocol:

- :class:`BulkAnalyticsStrategy` pushes counting, grouping and ordering into
  the database in three round trips. Its output is exact.
- :class:`FallbackAnalyticsStrategy` issues five count queries, then loads
  the most recent ``sample_size`` tasks and aggregates them in memory.
  Scalar counts and the score are exact; tags, priorities, trends and
  deadlines are computed from the sample when an owner has more tasks than
  that.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from sqlalchemy import and_, case, func, select

from taskflow_service.core.models import Task, TaskPriority, TaskStatus, TaskTag
from taskflow_service.core.settings import AnalyticsSettings, get_analytics_settings
from taskflow_service.features.analytics.aggregator import (
    ReportWindow,
    StatusCounts,
    TaskSnapshot,
    aggregate,
    build_report,
    effective_priority,
    format_due_date,
)
from taskflow_service.features.analytics.schemas import (
    AnalyticsReport,
    MonthlyTrend,
    PriorityBreakdown,
    UpcomingDeadline,
)

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession


@runtime_checkable
class AnalyticsStrategy(Protocol):
    """Computes a report for one owner.

    Attributes:
        name: Label used in logs and metrics.
        exact: Whether every field is computed from the full data set.
    """

    name: str
    exact: bool

    async def compute(
        self,
        session: AsyncSession,
        owner_id: str,
        window: ReportWindow,
    ) -> AnalyticsReport: ...


def _count_if(condition: Any) -> Any:
    return func.coalesce(func.sum(case((condition, 1), else_=0)), 0)


def _overdue_condition(window: ReportWindow) -> Any:
    return and_(
        Task.status != TaskStatus.DONE.value,
        Task.due_date.is_not(None),
        Task.due_date < window.now,
    )


class BulkAnalyticsStrategy:
    """Database-side aggregation using portable ``SUM(CASE ...)`` queries."""

    name = "bulk"
    exact = True

    def __init__(self, settings: AnalyticsSettings | None = None) -> None:
        self.settings = settings or get_analytics_settings()

    async def compute(
        self,
        session: AsyncSession,
        owner_id: str,
        window: ReportWindow,
    ) -> AnalyticsReport:
        counts, priorities, trends = await self._summary(session, owner_id, window)
        tags = await self._top_tags(session, owner_id)
        deadlines = await self._deadlines(session, owner_id, window)
        return build_report(
            counts,
            priorities=priorities,
            tags=tags,
            trends=trends,
            deadlines=deadlines,
            average_completion_time=self.settings.average_completion_time,
        )

    async def _summary(
        self,
        session: AsyncSession,
        owner_id: str,
        window: ReportWindow,
    ) -> tuple[StatusCounts, PriorityBreakdown, list[MonthlyTrend]]:
        done = Task.status == TaskStatus.DONE.value
        columns = [
            func.count(Task.id).label("total"),
            _count_if(done).label("completed"),
            _count_if(Task.status == TaskStatus.PENDING.value).label("pending"),
            _count_if(Task.status == TaskStatus.IN_PROGRESS.value).label("in_progress"),
            _count_if(_overdue_condition(window)).label("overdue"),
            _count_if(Task.priority == TaskPriority.LOW.value).label("priority_low"),
            _count_if(Task.priority == TaskPriority.HIGH.value).label("priority_high"),
        ]
        for index, month in enumerate(window.months):
            in_month = and_(Task.created_at >= month.start, Task.created_at < month.end)
            columns.append(_count_if(in_month).label(f"created_{index}"))
            columns.append(_count_if(and_(in_month, done)).label(f"completed_{index}"))

        stmt = select(*columns).where(Task.owner_id == owner_id)
        row = (await session.execute(stmt)).one()._mapping

        counts = StatusCounts(
            total=int(row["total"]),
            completed=int(row["completed"]),
            pending=int(row["pending"]),
            in_progress=int(row["in_progress"]),
            overdue=int(row["overdue"]),
        )
        low, high = int(row["priority_low"]), int(row["priority_high"])
        priorities = PriorityBreakdown(high=high, medium=counts.total - low - high, low=low)
        trends = [
            MonthlyTrend(
                month=month.key,
                created=int(row[f"created_{index}"]),
                completed=int(row[f"completed_{index}"]),
            )
            for index, month in enumerate(window.months)
        ]
        return counts, priorities, trends

    async def _top_tags(self, session: AsyncSession, owner_id: str) -> dict[str, int]:
        tag_count = func.count(TaskTag.tag).label("tag_count")
        stmt = (
            select(TaskTag.tag, tag_count)
            .join(Task, Task.id == TaskTag.task_id)
            .where(Task.owner_id == owner_id)
            .group_by(TaskTag.tag)
            .order_by(tag_count.desc(), TaskTag.tag.asc())
            .limit(self.settings.top_tags_limit)
        )
        result = await session.execute(stmt)
        return {tag: int(count) for tag, count in result.all()}

    async def _deadlines(
        self,
        session: AsyncSession,
        owner_id: str,
        window: ReportWindow,
    ) -> list[UpcomingDeadline]:
        stmt = (
            select(Task.id, Task.title, Task.due_date, Task.priority)
            .where(
                Task.owner_id == owner_id,
                Task.status != TaskStatus.DONE.value,
                Task.due_date.is_not(None),
                Task.due_date >= window.now,
                Task.due_date <= window.horizon,
            )
            .order_by(Task.due_date.asc(), Task.id.asc())
            .limit(self.settings.deadline_limit)
        )
        result = await session.execute(stmt)
        return [
            UpcomingDeadline(
                task_id=str(task_id),
                title=title,
                due_date=format_due_date(due_date),
                priority=effective_priority(priority),
            )
            for task_id, title, due_date, priority in result.all()
        ]


class FallbackAnalyticsStrategy:
    """Exact counts from SQL, everything else from a bounded in-memory sample."""

    name = "fallback"
    exact = False

    def __init__(self, settings: AnalyticsSettings | None = None) -> None:
        self.settings = settings or get_analytics_settings()

    async def compute(
        self,
        session: AsyncSession,
        owner_id: str,
        window: ReportWindow,
    ) -> AnalyticsReport:
        counts = await self._counts(session, owner_id, window)
        sample = await self._sample(session, owner_id)
        return aggregate(
            sample,
            window,
            top_tags=self.settings.top_tags_limit,
            deadline_limit=self.settings.deadline_limit,
            average_completion_time=self.settings.average_completion_time,
            counts=counts,
        )

    async def _counts(self, session: AsyncSession, owner_id: str, window: ReportWindow) -> StatusCounts:
        async def count(*conditions: Any) -> int:
            stmt = select(func.count(Task.id)).where(Task.owner_id == owner_id, *conditions)
            return int(await session.scalar(stmt) or 0)

        return StatusCounts(
            total=await count(),
            completed=await count(Task.status == TaskStatus.DONE.value),
            pending=await count(Task.status == TaskStatus.PENDING.value),
            in_progress=await count(Task.status == TaskStatus.IN_PROGRESS.value),
            overdue=await count(_overdue_condition(window)),
        )

    async def _sample(self, session: AsyncSession, owner_id: str) -> list[TaskSnapshot]:
        stmt = (
            select(Task)
            .where(Task.owner_id == owner_id)
            .order_by(Task.created_at.desc(), Task.id.desc())
            .limit(self.settings.sample_size)
        )
        result = await session.execute(stmt)
        return [TaskSnapshot.from_model(task) for task in result.scalars().all()]


def default_strategies(settings: AnalyticsSettings | None = None) -> list[AnalyticsStrategy]:
    """Strategies in the order they are tried."""
    settings = settings or get_analytics_settings()
    strategies: list[AnalyticsStrategy] = []
    if settings.bulk_enabled:
        strategies.append(BulkAnalyticsStrategy(settings))
    strategies.append(FallbackAnalyticsStrategy(settings))
    return strategies
