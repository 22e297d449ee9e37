"""Column Types — timezone handling shared by every timestamp column.

Invariants:
    - Values read back are always timezone-aware UTC, on every backend
    - Naive values written are interpreted as UTC

Design Decisions:
    - TypeDecorator over per-query fixes: SQLite drops tzinfo on storage,
      PostgreSQL keeps it; callers should not have to care which one is behind them
"""

from datetime import datetime, timezone

from sqlalchemy import DateTime
from sqlalchemy.types import TypeDecorator


class UTCDateTime(TypeDecorator):
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect):
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

    def process_result_value(self, value: datetime | None, dialect):
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)
