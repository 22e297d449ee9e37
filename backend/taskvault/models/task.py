"""Task ORM — a unit of work owned by exactly one User.

Invariants:
    - owner_id FK → users.id, ON DELETE CASCADE (a task cannot outlive its owner)
    - status ∈ {todo, in_progress, done}, priority ∈ {low, medium, high} (CHECK constraints)
    - title non-null; emptiness is enforced by core/task_rules before insert
    - id increases monotonically: used as the insertion-order tie-break when listing

Design Decisions:
    - Integer id over UUID: gives a stable tie-break for created_at ordering
      on every backend (ADR: deterministic pagination)
    - BigInteger with an Integer variant on SQLite: SQLite only autoincrements INTEGER PKs
    - Composite indexes mirror the list filters (owner + status, owner + priority)
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    BigInteger, CheckConstraint, ForeignKey, Index, Integer,
    String, Text,
)
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID

from taskvault.core.domain_types import TaskPriority, TaskStatus
from taskvault.db.base import Base
from taskvault.db.types import UTCDateTime


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _in_clause(column: str, enum) -> str:
    values = ", ".join(f"'{member.value}'" for member in enum)
    return f"{column} IN ({values})"


class Task(Base):
    """Owner-scoped task record."""
    __tablename__ = "tasks"
    __table_args__ = (
        CheckConstraint(_in_clause("status", TaskStatus), name="ck_tasks_status"),
        CheckConstraint(
            _in_clause("priority", TaskPriority), name="ck_tasks_priority",
        ),
        Index("idx_tasks_owner_id_status", "owner_id", "status"),
        Index("idx_tasks_owner_id_priority", "owner_id", "priority"),
    )

    id: Mapped[int] = mapped_column(
        BigInteger().with_variant(Integer, "sqlite"),
        primary_key=True, autoincrement=True,
    )
    owner_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(
        String(20), nullable=False, default=TaskStatus.TODO.value,
    )
    priority: Mapped[str] = mapped_column(
        String(20), nullable=False, default=TaskPriority.MEDIUM.value,
    )
    due_date: Mapped[datetime | None] = mapped_column(
        UTCDateTime(), nullable=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime(), nullable=False, default=_utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        UTCDateTime(), nullable=False, default=_utcnow,
    )
