"""Authenticated caller schema."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class AuthUser(BaseModel):
    """User resolved from a bearer token by the auth service."""

    user_id: str = Field(min_length=1, max_length=255, description="Opaque user identifier")
    email: str | None = Field(default=None, max_length=320)
    role: str | None = Field(default=None, max_length=100)
    metadata: dict[str, Any] = Field(default_factory=dict)

    model_config = ConfigDict(frozen=True)
