"""Context management for structured logging.

Provides automatic context injection into log records using contextvars,
so request IDs and user IDs appear in every log message without explicit
passing. Each async task gets its own copy of the context.
"""

from __future__ import annotations

import logging
from contextvars import ContextVar
from typing import Any

_log_context: ContextVar[dict[str, Any]] = ContextVar("log_context", default={})


def set_log_context(**kwargs: Any) -> None:
    """Set logging context for the current async task.

    All subsequent log calls in this context include these fields.

    Example:
        ```python
        # In middleware
        set_log_context(request_id="abc-123", path="/api/v1/analytics/tasks")

        # In the analytics service
        set_log_context(user_id=user.user_id)

        logger.info("Processing request")  # Includes request_id and user_id
        ```
    """
    current = _log_context.get().copy()
    current.update(kwargs)
    _log_context.set(current)


def get_log_context() -> dict[str, Any]:
    """Get a copy of the current logging context."""
    return _log_context.get().copy()


def clear_log_context() -> None:
    """Clear all logging context for the current async task.

    Usually not needed as context is isolated per request, but useful in
    tests and CLI commands.
    """
    _log_context.set({})


def remove_from_log_context(*keys: str) -> None:
    """Remove specific keys from logging context."""
    current = _log_context.get().copy()
    for key in keys:
        current.pop(key, None)
    _log_context.set(current)


class ContextInjectingFilter(logging.Filter):
    """Logging filter that copies the contextvars log context onto each record.

    Attached to the root logger by configure_logging(), so every logger
    benefits. Existing record attributes are never overwritten.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        for key, value in _log_context.get().items():
            if not hasattr(record, key):
                setattr(record, key, value)
        return True
