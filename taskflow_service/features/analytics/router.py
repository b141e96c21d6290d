"""Analytics API router."""

from __future__ import annotations

from fastapi import APIRouter

from taskflow_service.core.dependencies.auth import AuthUserDep
from taskflow_service.core.schemas import ProblemDetails
from taskflow_service.features.analytics.schemas import AnalyticsReport
from taskflow_service.features.analytics.service import AnalyticsServiceDep

router = APIRouter(prefix="/analytics", tags=["analytics"])

_PROBLEM = {"model": ProblemDetails}


@router.get(
    "/tasks",
    response_model=AnalyticsReport,
    summary="Task productivity analytics",
    responses={
        400: {**_PROBLEM, "description": "Malformed user id"},
        401: {**_PROBLEM, "description": "Missing or invalid bearer token"},
        429: {**_PROBLEM, "description": "Rate limit exceeded"},
        500: {**_PROBLEM, "description": "Analytics could not be generated"},
    },
)
async def get_task_analytics(user: AuthUserDep, service: AnalyticsServiceDep) -> AnalyticsReport:
    """Return productivity analytics for the authenticated user's tasks.

    Example:
        ```bash
        curl http://localhost:8000/api/v1/analytics/tasks \\
          -H "Authorization: Bearer $TOKEN"
        ```
    """
    return await service.get_report(user.user_id)
