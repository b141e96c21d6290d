"""CLI helpers for async commands and formatted output."""

from taskflow_service.cli.utils.async_runner import coro
from taskflow_service.cli.utils.formatters import error, header, info, success, warning

__all__ = ["coro", "error", "header", "info", "success", "warning"]
