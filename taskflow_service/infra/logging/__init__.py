"""Logging infrastructure.

Structured logging with:
- JSONL format for Loki/Elasticsearch ingestion
- Automatic context injection (request_id, user_id)
- QueueHandler + QueueListener for non-blocking I/O
- Lazy evaluation for expensive debug messages

Basic usage:
    import logging

    from taskflow_service.infra.logging import set_log_context

    logger = logging.getLogger(__name__)

    set_log_context(request_id="abc-123", user_id="…")
    logger.info("Processing request")  # Includes request_id and user_id
"""

from taskflow_service.infra.logging.config import (
    complete,
    configure_logging,
    setup_logging,
    shutdown,
)
from taskflow_service.infra.logging.context import (
    ContextInjectingFilter,
    clear_log_context,
    get_log_context,
    remove_from_log_context,
    set_log_context,
)
from taskflow_service.infra.logging.formatters import JSONFormatter
from taskflow_service.infra.logging.lazy import LazyLoggerAdapter, get_lazy_logger

__all__ = [
    "ContextInjectingFilter",
    "JSONFormatter",
    "LazyLoggerAdapter",
    "clear_log_context",
    "complete",
    "configure_logging",
    "get_lazy_logger",
    "get_log_context",
    "remove_from_log_context",
    "set_log_context",
    "setup_logging",
    "shutdown",
]
