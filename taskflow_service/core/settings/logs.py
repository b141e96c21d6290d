"""Logging configuration settings."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class LoggingSettings(BaseSettings):
    """Structured logging configuration.

    Environment variables use LOG_ prefix.
    Example: LOG_LEVEL=INFO, LOG_JSON_LOGS=true
    """

    level: LogLevel = Field(
        default="INFO",
        description="Root logging level (DEBUG|INFO|WARNING|ERROR|CRITICAL)",
    )
    console_level: LogLevel | None = Field(
        default=None, description="Console handler level (defaults to level)",
    )
    file_level: LogLevel | None = Field(
        default=None, description="File handler level (defaults to level)",
    )

    json_logs: bool = Field(default=True, description="Enable JSON-formatted structured logs")

    # Log file configuration
    file_path: Path | None = Field(
        default=None,
        description="Log file path (None disables file logging)",
    )
    file_max_bytes: int = Field(
        default=10_485_760,
        ge=1024,
        le=1_073_741_824,
        description="Max log file size in bytes (10MB, max 1GB)",
    )
    file_backup_count: int = Field(
        default=5, ge=0, le=100, description="Number of backup log files to keep",
    )

    console_enabled: bool = Field(default=True, description="Enable console/stderr logging")
    include_context: bool = Field(
        default=True, description="Inject contextvars log context into every record",
    )
    capture_warnings: bool = Field(
        default=True, description="Route Python warnings through logging",
    )
    include_uvicorn: bool = Field(default=True, description="Include Uvicorn access logs")

    # Request tracking
    include_request_id: bool = Field(default=True, description="Include request ID in logs")
    log_slow_requests: bool = Field(
        default=True, description="Log slow requests (> threshold)",
    )
    slow_request_threshold: float = Field(
        default=1.0, ge=0.1, le=60.0, description="Slow request threshold in seconds",
    )

    @field_validator("level", "console_level", "file_level", mode="before")
    @classmethod
    def normalize_level(cls, v: Any) -> Any:
        """Normalize log level to uppercase."""
        if isinstance(v, str):
            return v.upper()
        return v

    model_config = SettingsConfigDict(
        env_prefix="LOG_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
        extra="ignore",
        env_ignore_empty=True,
    )

    @property
    def level_int(self) -> int:
        """Get numeric log level."""
        return getattr(logging, self.level.upper(), logging.INFO)

    def to_logging_kwargs(self) -> dict[str, Any]:
        """Return kwargs suitable for configure_logging(...)."""
        return {
            "log_level": self.level,
            "console_level": self.console_level or self.level,
            "file_level": self.file_level or self.level,
            "file_path": str(self.file_path) if self.file_path else None,
            "json_logs": self.json_logs,
            "console_enabled": self.console_enabled,
            "include_context": self.include_context,
            "capture_warnings": self.capture_warnings,
            "file_max_bytes": self.file_max_bytes,
            "file_backup_count": self.file_backup_count,
        }
