"""Base service class for business logic."""

from __future__ import annotations

import logging

from taskflow_service.infra.logging import get_lazy_logger


class BaseService:
    """Base class for all service classes.

    Loggers:
        - self.logger: Standard logger for INFO/WARNING/ERROR
        - self._lazy: Lazy logger for DEBUG (callables only run when DEBUG is enabled)

    Example:
        ```python
        class TaskService(BaseService):
            def __init__(self, session: AsyncSession):
                super().__init__()
                self.session = session

            async def get(self, task_id: UUID) -> Task:
                self.logger.info("Fetching task", extra={"task_id": str(task_id)})
                ...
        ```
    """

    def __init__(self) -> None:
        class_name = self.__class__.__name__
        self.logger = logging.getLogger(class_name)
        self._lazy = get_lazy_logger(class_name)
