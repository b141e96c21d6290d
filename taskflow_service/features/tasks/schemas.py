"""Pydantic schemas for the tasks API."""

from __future__ import annotations

from datetime import datetime
from typing import Annotated
from uuid import UUID

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, StringConstraints, field_validator

from taskflow_service.core.database import as_utc
from taskflow_service.core.models.task import TaskPriority, TaskStatus

Title = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=200)]
Description = Annotated[str, StringConstraints(max_length=1000)]
Tag = Annotated[str, StringConstraints(min_length=1, max_length=50, pattern=r"^[A-Za-z0-9_-]+$")]

MAX_TAGS = 20


class TaskBase(BaseModel):
    """Shared task fields."""

    title: Title = Field(description="Task title")
    description: Description | None = Field(default=None, description="Free-form notes")
    status: TaskStatus = Field(default=TaskStatus.PENDING, description="Workflow state")
    priority: TaskPriority | None = Field(default=None, description="Priority, read as medium when unset")
    due_date: datetime | None = Field(default=None, description="Deadline (ISO-8601)")
    tags: list[Tag] = Field(default_factory=list, max_length=MAX_TAGS, description="Ordered tags")

    @field_validator("due_date")
    @classmethod
    def _due_date_utc(cls, value: datetime | None) -> datetime | None:
        return as_utc(value) if value is not None else None


class TaskCreate(TaskBase):
    """Schema for creating a task.

    Example:
        ```json
        {
            "title": "Write quarterly report",
            "description": "Numbers for Q3 and the Q4 outlook",
            "status": "pending",
            "priority": "high",
            "due_date": "2026-11-01T17:00:00Z",
            "tags": ["work", "reports"]
        }
        ```
    """


class TaskUpdate(BaseModel):
    """Schema for partial task updates. Only fields that are sent change."""

    title: Title | None = None
    description: Description | None = None
    status: TaskStatus | None = None
    priority: TaskPriority | None = None
    due_date: datetime | None = None
    tags: list[Tag] | None = Field(default=None, max_length=MAX_TAGS)

    @field_validator("due_date")
    @classmethod
    def _due_date_utc(cls, value: datetime | None) -> datetime | None:
        return as_utc(value) if value is not None else None


class TaskResponse(BaseModel):
    """Schema for task responses."""

    id: UUID
    owner_id: str
    title: str
    description: str | None
    status: TaskStatus
    priority: str | None
    due_date: datetime | None
    tags: list[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("tag_names", "tags"),
    )
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class TaskListResponse(BaseModel):
    """Schema for a page of tasks.

    Example:
        ```json
        {
            "items": [...],
            "total": 42,
            "limit": 50,
            "offset": 0
        }
        ```
    """

    items: list[TaskResponse]
    total: int
    limit: int
    offset: int
