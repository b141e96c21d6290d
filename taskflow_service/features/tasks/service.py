"""Tasks service layer."""

from __future__ import annotations

from typing import TYPE_CHECKING, Annotated
from uuid import UUID

from fastapi import Depends
from sqlalchemy import func, select

from taskflow_service.core.dependencies.database import SessionDep
from taskflow_service.core.exceptions import NotFoundException
from taskflow_service.core.models import Task, TaskStatus
from taskflow_service.core.services.base import BaseService
from taskflow_service.features.analytics.service import ReportCache, invalidate_cached_report
from taskflow_service.infra.cache import get_cache_instance

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from taskflow_service.features.tasks.schemas import TaskCreate, TaskUpdate


class TaskService(BaseService):
    """CRUD for tasks, always scoped to one owner.

    Every mutation drops the owner's cached analytics report.
    """

    def __init__(self, session: AsyncSession, cache: ReportCache | None = None) -> None:
        super().__init__()
        self.session = session
        self.cache = cache

    async def create_task(self, owner_id: str, data: TaskCreate) -> Task:
        task = Task(
            owner_id=owner_id,
            title=data.title,
            description=data.description,
            status=data.status.value,
            priority=data.priority.value if data.priority else None,
            due_date=data.due_date,
        )
        task.set_tags(data.tags)

        self.session.add(task)
        await self.session.commit()
        await self.session.refresh(task)
        await invalidate_cached_report(self.cache, owner_id)

        self.logger.info("Created task", extra={"task_id": str(task.id), "owner_id": owner_id})
        return task

    async def get_task(self, owner_id: str, task_id: UUID) -> Task:
        """Get one of the owner's tasks.

        Raises:
            NotFoundException: The task does not exist or belongs to someone else.
        """
        stmt = select(Task).where(Task.id == task_id, Task.owner_id == owner_id)
        task = (await self.session.execute(stmt)).scalar_one_or_none()
        if task is None:
            raise NotFoundException(
                detail=f"Task with ID {task_id} not found",
                type="task-not-found",
                extra={"task_id": str(task_id)},
            )
        return task

    async def list_tasks(
        self,
        owner_id: str,
        *,
        status: TaskStatus | None = None,
        limit: int = 50,
        offset: int = 0,
    ) -> tuple[list[Task], int]:
        """List the owner's tasks, newest first.

        Returns:
            Tuple of (tasks page, total matching count).
        """
        stmt = select(Task).where(Task.owner_id == owner_id)
        if status is not None:
            stmt = stmt.where(Task.status == status.value)

        total = await self.session.scalar(select(func.count()).select_from(stmt.subquery())) or 0

        stmt = stmt.order_by(Task.created_at.desc(), Task.id.desc()).limit(limit).offset(offset)
        result = await self.session.execute(stmt)
        return list(result.scalars().all()), int(total)

    async def update_task(self, owner_id: str, task_id: UUID, data: TaskUpdate) -> Task:
        task = await self.get_task(owner_id, task_id)

        changes = data.model_dump(exclude_unset=True)
        tags = changes.pop("tags", None)
        for field, value in changes.items():
            if field in ("status", "priority") and value is not None:
                value = value.value
            if field in ("title", "status") and value is None:
                continue
            setattr(task, field, value)
        if tags is not None:
            # flush the orphaned rows first so (task_id, position) keys can be reused
            task.tags.clear()
            await self.session.flush()
            task.set_tags(tags)

        await self.session.commit()
        await self.session.refresh(task)
        await invalidate_cached_report(self.cache, owner_id)

        self.logger.info(
            "Updated task",
            extra={"task_id": str(task_id), "fields": sorted(data.model_fields_set)},
        )
        return task

    async def delete_task(self, owner_id: str, task_id: UUID) -> None:
        task = await self.get_task(owner_id, task_id)
        await self.session.delete(task)
        await self.session.commit()
        await invalidate_cached_report(self.cache, owner_id)

        self.logger.info("Deleted task", extra={"task_id": str(task_id), "owner_id": owner_id})


def get_task_service(session: SessionDep) -> TaskService:
    """FastAPI dependency that builds a :class:`TaskService` per request."""
    return TaskService(session, cache=get_cache_instance())


TaskServiceDep = Annotated[TaskService, Depends(get_task_service)]
