"""User ORM — persisted credential identity.

Invariants:
    - id is UUID primary key
    - email is unique and stored normalized (trimmed, lower-cased)
    - password_hash never leaves the services layer
    - deleting a user cascades to tasks at the database level (FK ON DELETE CASCADE)

Design Decisions:
    - No ORM relationship to Task: the DB cascade does the work, and no
      code path needs to load a user's tasks through the user
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID

from taskvault.db.base import Base
from taskvault.db.types import UTCDateTime


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(Base):
    """Registered account."""
    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    email: Mapped[str] = mapped_column(
        String(255), nullable=False, unique=True,
    )
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime(), nullable=False, default=_utcnow,
    )
    updated_at: Mapped[datetime] = mapped_column(
        UTCDateTime(), nullable=False, default=_utcnow,
    )
