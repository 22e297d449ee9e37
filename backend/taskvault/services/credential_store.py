"""Credential Store — registers users and verifies their passwords.

Invariants:
    - Emails are normalized (trim + lower-case) before every read and write
    - register never returns or logs the password hash
    - A duplicate email is detected by the unique constraint (IntegrityError), never
      by inspecting driver error text, and surfaces as DuplicateResourceError
    - verify fails with the same InvalidCredentialError for unknown email and wrong
      password, and both paths run one bcrypt comparison of the same cost
    - bcrypt runs in a worker thread; the event loop is never blocked by hashing

Design Decisions:
    - No pre-check SELECT for duplicates: the constraint is the only race-free test
    - get/delete live here because User is this store's aggregate
"""

import asyncio
import logging
from datetime import datetime, timezone

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from taskvault.core.domain_types import UserId
from taskvault.core.errors import (
    DuplicateResourceError,
    InvalidCredentialError,
    ResourceNotFoundError,
)
from taskvault.core.passwords import (
    DEFAULT_HASH_ROUNDS,
    hash_password,
    verify_against_dummy,
    verify_password,
)
from taskvault.models.user import User

logger = logging.getLogger(__name__)


def normalize_email(email: str) -> str:
    return email.strip().lower()


def _normalize_name(name: str | None) -> str | None:
    if name is None:
        return None
    return name.strip() or None


class CredentialStore:
    """Persistence and verification of user credentials."""

    def __init__(self, db: AsyncSession, hash_rounds: int = DEFAULT_HASH_ROUNDS):
        self.db = db
        self.hash_rounds = hash_rounds

    async def register(
        self, email: str, password: str, name: str | None = None,
    ) -> User:
        """Create a user. Raises DuplicateResourceError if the email is taken."""
        password_hash = await asyncio.to_thread(
            hash_password, password, self.hash_rounds,
        )
        now = datetime.now(timezone.utc)
        user = User(
            email=normalize_email(email),
            password_hash=password_hash,
            name=_normalize_name(name),
            created_at=now,
            updated_at=now,
        )
        self.db.add(user)
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise DuplicateResourceError("Email already registered") from None
        logger.info("User registered", extra={"user_id": user.id})
        return user

    async def verify(self, email: str, password: str) -> User:
        """Return the user if the password matches, else InvalidCredentialError."""
        result = await self.db.execute(
            select(User).where(User.email == normalize_email(email)),
        )
        user = result.scalar_one_or_none()
        if user is None:
            await asyncio.to_thread(
                verify_against_dummy, password, self.hash_rounds,
            )
            raise InvalidCredentialError()
        matches = await asyncio.to_thread(
            verify_password, password, user.password_hash,
        )
        if not matches:
            raise InvalidCredentialError()
        return user

    async def get(self, user_id: UserId) -> User:
        result = await self.db.execute(select(User).where(User.id == user_id))
        user = result.scalar_one_or_none()
        if user is None:
            raise ResourceNotFoundError("User")
        return user

    async def delete(self, user_id: UserId) -> None:
        """Remove a user. Their tasks go with them (FK ON DELETE CASCADE)."""
        result = await self.db.execute(delete(User).where(User.id == user_id))
        if result.rowcount == 0:
            await self.db.rollback()
            raise ResourceNotFoundError("User")
        await self.db.commit()
        logger.info("User deleted", extra={"user_id": user_id})
