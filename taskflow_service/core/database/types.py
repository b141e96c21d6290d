"""Custom SQLAlchemy column types."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, TypeDecorator

if TYPE_CHECKING:
    from sqlalchemy.engine import Dialect


def as_utc(value: datetime) -> datetime:
    """Convert to an aware UTC datetime. Naive values are read as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


class UTCDateTime(TypeDecorator[datetime]):
    """Timezone-aware datetime that is always stored and returned in UTC.

    SQLite keeps only the wall-clock part of a datetime, so an offset such as
    ``+05:00`` would otherwise be dropped on write and the value read back
    five hours off. Converting every bound value to UTC first keeps stored
    values, SQL comparisons and loaded values consistent on every backend.

    Example:
        ```python
        class Task(Base):
            due_date: Mapped[datetime | None] = mapped_column(UTCDateTime, nullable=True)
        ```
    """

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        if value is None:
            return None
        return as_utc(value)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        if value is None:
            return None
        return as_utc(value)
