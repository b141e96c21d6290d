"""Task CRUD scoped to the authenticated owner."""

from taskflow_service.features.tasks.router import router

__all__ = ["router"]
