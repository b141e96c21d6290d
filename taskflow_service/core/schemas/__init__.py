"""Shared Pydantic schemas."""

from __future__ import annotations

from .auth import AuthUser
from .problem_details import ProblemDetails

__all__ = ["AuthUser", "ProblemDetails"]
