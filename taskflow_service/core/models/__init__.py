"""ORM models.

Importing this package registers every mapped class on Base.metadata.
"""

from __future__ import annotations

from .task import Task, TaskPriority, TaskStatus, TaskTag

__all__ = ["Task", "TaskPriority", "TaskStatus", "TaskTag"]
