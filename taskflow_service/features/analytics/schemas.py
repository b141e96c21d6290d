"""Pydantic schemas for the task analytics report.

Field names are snake_case in Python and camelCase on the wire.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class PriorityBreakdown(_CamelModel):
    """Task counts per effective priority. Always carries all three keys."""

    high: int = Field(default=0, ge=0)
    medium: int = Field(default=0, ge=0)
    low: int = Field(default=0, ge=0)


class MonthlyTrend(_CamelModel):
    """Tasks created in one calendar month and how many of those are done."""

    month: str = Field(pattern=r"^\d{4}-\d{2}$", description="Calendar month as YYYY-MM")
    created: int = Field(default=0, ge=0)
    completed: int = Field(default=0, ge=0)


class UpcomingDeadline(_CamelModel):
    """An unfinished task due within the look-ahead window."""

    task_id: str
    title: str
    due_date: str = Field(description="Due date as stored, ISO-8601")
    priority: str = Field(description="Effective priority (missing values read as medium)")


class AnalyticsReport(_CamelModel):
    """Productivity analytics for one task owner.

    Example:
        ```json
        {
            "totalTasks": 10,
            "completedTasks": 4,
            "pendingTasks": 2,
            "inProgressTasks": 2,
            "completionRate": 40.0,
            "overdueTasks": 2,
            "productivityScore": 65,
            "averageCompletionTime": 24,
            "tasksByPriority": {"high": 0, "medium": 10, "low": 0},
            "tasksByTag": {"work": 3},
            "monthlyTrends": [{"month": "2026-10", "created": 10, "completed": 4}],
            "upcomingDeadlines": []
        }
        ```
    """

    total_tasks: int = Field(ge=0)
    completed_tasks: int = Field(ge=0)
    pending_tasks: int = Field(ge=0)
    in_progress_tasks: int = Field(ge=0)
    completion_rate: float = Field(ge=0, le=100, description="Percentage of tasks done")
    overdue_tasks: int = Field(ge=0)
    productivity_score: int = Field(ge=0, le=100)
    average_completion_time: int = Field(
        default=24,
        description="Reserved placeholder in hours, not computed",
    )
    tasks_by_priority: PriorityBreakdown
    tasks_by_tag: dict[str, int] = Field(default_factory=dict)
    monthly_trends: list[MonthlyTrend]
    upcoming_deadlines: list[UpcomingDeadline] = Field(default_factory=list)
