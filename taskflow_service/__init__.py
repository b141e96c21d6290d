"""Taskflow service: personal task management with productivity analytics."""

__version__ = "0.1.0"
