"""Task analytics: productivity score, distributions, trends and deadlines."""

from taskflow_service.features.analytics.router import router

__all__ = ["router"]
