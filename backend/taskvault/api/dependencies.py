"""Dependency Providers — wire settings, sessions and stores into route handlers.

Invariants:
    - One TokenService per process (read-only after first use)
    - Stores are constructed per request around the request's borrowed session

Design Decisions:
    - FastAPI Depends over module globals: tests override providers via
      app.dependency_overrides instead of monkeypatching
"""

from functools import lru_cache

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from taskvault.config import get_settings
from taskvault.core.tokens import TokenService
from taskvault.infrastructure.database import get_db
from taskvault.services.credential_store import CredentialStore
from taskvault.services.task_store import TaskStore


@lru_cache
def get_token_service() -> TokenService:
    settings = get_settings()
    return TokenService(
        secret=settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
        ttl=settings.token_ttl,
        not_before_delay=settings.token_not_before_delay,
        leeway=settings.token_leeway,
    )


def get_credential_store(db: AsyncSession = Depends(get_db)) -> CredentialStore:
    return CredentialStore(db, hash_rounds=get_settings().password_hash_rounds)


def get_task_store(db: AsyncSession = Depends(get_db)) -> TaskStore:
    return TaskStore(db)
