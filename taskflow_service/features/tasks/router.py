"""Tasks API router."""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Query, Response, status

from taskflow_service.core.dependencies.auth import AuthUserDep
from taskflow_service.core.models import TaskStatus
from taskflow_service.features.tasks.schemas import (
    TaskCreate,
    TaskListResponse,
    TaskResponse,
    TaskUpdate,
)
from taskflow_service.features.tasks.service import TaskServiceDep

router = APIRouter(prefix="/tasks", tags=["tasks"])


@router.post(
    "",
    response_model=TaskResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create task",
)
async def create_task(data: TaskCreate, user: AuthUserDep, service: TaskServiceDep) -> TaskResponse:
    """Create a task owned by the authenticated user.

    Example:
        ```bash
        curl -X POST http://localhost:8000/api/v1/tasks \\
          -H "Authorization: Bearer $TOKEN" \\
          -H "Content-Type: application/json" \\
          -d '{"title": "Write report", "priority": "high", "tags": ["work"]}'
        ```
    """
    task = await service.create_task(user.user_id, data)
    return TaskResponse.model_validate(task)


@router.get("", response_model=TaskListResponse, summary="List tasks")
async def list_tasks(
    user: AuthUserDep,
    service: TaskServiceDep,
    status_filter: TaskStatus | None = Query(None, alias="status", description="Filter by status"),
    limit: int = Query(50, ge=1, le=200, description="Page size"),
    offset: int = Query(0, ge=0, description="Rows to skip"),
) -> TaskListResponse:
    """List the authenticated user's tasks, newest first."""
    tasks, total = await service.list_tasks(
        user.user_id, status=status_filter, limit=limit, offset=offset
    )
    return TaskListResponse(
        items=[TaskResponse.model_validate(task) for task in tasks],
        total=total,
        limit=limit,
        offset=offset,
    )


@router.get("/{task_id}", response_model=TaskResponse, summary="Get task")
async def get_task(task_id: UUID, user: AuthUserDep, service: TaskServiceDep) -> TaskResponse:
    task = await service.get_task(user.user_id, task_id)
    return TaskResponse.model_validate(task)


@router.patch("/{task_id}", response_model=TaskResponse, summary="Update task")
async def update_task(
    task_id: UUID,
    data: TaskUpdate,
    user: AuthUserDep,
    service: TaskServiceDep,
) -> TaskResponse:
    """Partially update a task. Omitted fields are left unchanged."""
    task = await service.update_task(user.user_id, task_id, data)
    return TaskResponse.model_validate(task)


@router.delete(
    "/{task_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Delete task",
)
async def delete_task(task_id: UUID, user: AuthUserDep, service: TaskServiceDep) -> Response:
    await service.delete_task(user.user_id, task_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
