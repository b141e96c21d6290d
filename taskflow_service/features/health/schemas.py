"""Health check response schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class LivenessResponse(BaseModel):
    """Liveness probe response.

    Example:
        ```json
        {"alive": true, "timestamp": "2026-01-01T00:00:00Z", "service": "taskflow-service"}
        ```
    """

    alive: bool = Field(description="Liveness status")
    timestamp: datetime = Field(description="Check timestamp")
    service: str = Field(min_length=1, max_length=100, description="Service name")


class ReadinessResponse(BaseModel):
    """Readiness probe response. Served with 503 when not ready."""

    ready: bool = Field(description="Overall readiness status")
    checks: dict[str, bool] = Field(default_factory=dict, description="Individual dependency checks")
    timestamp: datetime = Field(description="Check timestamp")
