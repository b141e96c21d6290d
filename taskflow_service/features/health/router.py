"""Health check API endpoints.

- ``/health/live``: the process is up.
- ``/health/ready``: the database answers ``SELECT 1`` (and Redis pings when
  it is configured).
"""

from __future__ import annotations

from datetime import UTC, datetime

from fastapi import APIRouter, Response, status

from taskflow_service.core.settings import get_app_settings
from taskflow_service.features.health.schemas import LivenessResponse, ReadinessResponse
from taskflow_service.infra.cache import get_cache_instance
from taskflow_service.infra.database.session import check_database

router = APIRouter(prefix="/health", tags=["health"])


@router.get(
    "/live",
    response_model=LivenessResponse,
    summary="Liveness probe (Kubernetes)",
)
async def liveness_check() -> LivenessResponse:
    return LivenessResponse(
        alive=True,
        timestamp=datetime.now(UTC),
        service=get_app_settings().service_name,
    )


@router.get(
    "/ready",
    response_model=ReadinessResponse,
    responses={503: {"description": "Service not ready to accept traffic"}},
    summary="Readiness probe (Kubernetes)",
)
async def readiness_check(response: Response) -> ReadinessResponse:
    """Return 200 when critical dependencies respond, 503 otherwise."""
    checks = {"database": await check_database()}

    cache = get_cache_instance()
    if cache is not None:
        checks["cache"] = await cache.health_check()

    ready = all(checks.values())
    if not ready:
        response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    return ReadinessResponse(ready=ready, checks=checks, timestamp=datetime.now(UTC))
