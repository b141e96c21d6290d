"""Task and task tag models."""

from __future__ import annotations

import uuid
from datetime import datetime
from enum import StrEnum

from sqlalchemy import CheckConstraint, ForeignKey, Index, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from taskflow_service.core.database import Base, TimestampMixin, UTCDateTime, UUIDPKMixin


class TaskStatus(StrEnum):
    """Closed set of task states."""

    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    DONE = "done"


class TaskPriority(StrEnum):
    """Valid stored priorities. Absent or unknown values read as MEDIUM."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class Task(Base, UUIDPKMixin, TimestampMixin):
    """A unit of work owned by one user.

    Metadata from the client (priority, due date, tags) is stored in typed
    columns and a child table so it can be aggregated in SQL.
    """

    __tablename__ = "tasks"
    __table_args__ = (
        CheckConstraint(
            "status IN ('pending', 'in-progress', 'done')",
            name="status_valid",
        ),
        Index("ix_tasks_owner_id_status", "owner_id", "status"),
        Index("ix_tasks_owner_id_created_at", "owner_id", "created_at"),
        Index("ix_tasks_due_date", "due_date"),
    )

    owner_id: Mapped[str] = mapped_column(String(36), nullable=False)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=TaskStatus.PENDING.value,
        server_default=TaskStatus.PENDING.value,
    )
    priority: Mapped[str | None] = mapped_column(String(20), nullable=True)
    due_date: Mapped[datetime | None] = mapped_column(UTCDateTime, nullable=True)

    tags: Mapped[list[TaskTag]] = relationship(
        back_populates="task",
        cascade="all, delete-orphan",
        order_by="TaskTag.position",
        lazy="selectin",
        passive_deletes=True,
    )

    @property
    def tag_names(self) -> list[str]:
        """Tags in their stored order, duplicates preserved."""
        return [tag.tag for tag in self.tags]

    def set_tags(self, names: list[str]) -> None:
        """Replace the tag list, keeping the given order."""
        self.tags = [TaskTag(position=index, tag=name) for index, name in enumerate(names)]

    def __repr__(self) -> str:
        return f"<Task(id={self.id}, owner_id={self.owner_id!r}, status={self.status!r})>"


class TaskTag(Base):
    """One occurrence of a tag on a task."""

    __tablename__ = "task_tags"
    __table_args__ = (Index("ix_task_tags_tag", "tag"),)

    task_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("tasks.id", ondelete="CASCADE"),
        primary_key=True,
    )
    position: Mapped[int] = mapped_column(Integer, primary_key=True)
    tag: Mapped[str] = mapped_column(String(50), nullable=False)

    task: Mapped[Task] = relationship(back_populates="tags")
