"""Declarative base, model mixins and column types."""

from __future__ import annotations

from .base import NAMING_CONVENTION, Base, TimestampMixin, UUIDPKMixin, utcnow
from .types import UTCDateTime, as_utc

__all__ = [
    "NAMING_CONVENTION",
    "Base",
    "TimestampMixin",
    "UTCDateTime",
    "UUIDPKMixin",
    "as_utc",
    "utcnow",
]
