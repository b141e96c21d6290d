"""Liveness and readiness probes."""

from taskflow_service.features.health.router import router

__all__ = ["router"]
