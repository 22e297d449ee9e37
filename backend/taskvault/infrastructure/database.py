"""Database Session Manager — async connection pool with automatic rollback and health checks.

Invariants:
    - Exactly one engine (bounded pool) per process, created by init_db, disposed by close_db
    - A session is borrowed for one request and always rolled back + closed on exit
    - Every SQLAlchemy exception that escapes a store is mapped to DatabaseError
      (core/errors.py) — storage text never reaches the client
    - SQLite engines enforce foreign keys (cascade parity with PostgreSQL)

Design Decisions:
    - Singleton db_manager initialized on startup: FastAPI lifespan manages lifecycle
      (ADR: no global import side effects)
    - expire_on_commit=False: returned ORM rows stay readable after commit in async context
    - Stores catch IntegrityError themselves where it carries meaning (duplicate email);
      this layer only sees the ones nobody recognized
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy import event, text
from sqlalchemy.exc import (
    IntegrityError, OperationalError, DBAPIError, SQLAlchemyError,
)
from sqlalchemy.ext.asyncio import (
    AsyncEngine, AsyncSession, create_async_engine, async_sessionmaker,
)

from taskvault.core.errors import DatabaseError

logger = logging.getLogger(__name__)


def _set_sqlite_pragma(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def enable_sqlite_foreign_keys(engine: AsyncEngine) -> None:
    """SQLite ignores FK constraints (and ON DELETE CASCADE) unless asked per connection."""
    if engine.dialect.name == "sqlite":
        event.listen(engine.sync_engine, "connect", _set_sqlite_pragma)


def classify_storage_error(exc: SQLAlchemyError) -> tuple[str, str]:
    """(operation, log-only summary) for an unrecognized storage failure."""
    # IntegrityError and OperationalError are both DBAPIError: check them first
    if isinstance(exc, IntegrityError):
        return "write", "Unrecognized constraint violation"
    if isinstance(exc, OperationalError):
        return "connect", "Connection or operational error"
    if isinstance(exc, DBAPIError):
        return "query", "Database driver error"
    return "orm", "Database operation failed"


class DatabaseSessionManager:
    """Manages async database sessions with pooling, rollback, and health checks."""

    def __init__(
        self, database_url: str, pool_size: int = 20, max_overflow: int = 10,
    ):
        engine_kwargs: dict = {"pool_pre_ping": True}
        if not database_url.startswith("sqlite"):
            engine_kwargs.update(
                pool_size=pool_size,
                max_overflow=max_overflow,
                pool_recycle=3600,
            )
        self.engine = create_async_engine(database_url, **engine_kwargs)
        enable_sqlite_foreign_keys(self.engine)
        self._session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Lend one session for the duration of a request."""
        session = self._session_factory()
        try:
            yield session
        except SQLAlchemyError as e:
            await session.rollback()
            operation, summary = classify_storage_error(e)
            logger.error(f"Storage failure during {operation}: {e}")
            raise DatabaseError(summary, operation) from None
        finally:
            # close() also rolls back whatever transaction is still open
            await session.close()

    async def health_check(self) -> bool:
        """Check database connectivity (for readiness probes)."""
        try:
            async with self.session() as db:
                await db.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.error(f"DB health check failed: {e}")
            return False

    async def dispose(self) -> None:
        await self.engine.dispose()


# Singleton (initialized on startup)
db_manager: DatabaseSessionManager | None = None


def init_db(database_url: str, **kwargs) -> DatabaseSessionManager:
    global db_manager
    db_manager = DatabaseSessionManager(database_url, **kwargs)
    return db_manager


async def close_db() -> None:
    global db_manager
    if db_manager is not None:
        await db_manager.dispose()
        db_manager = None


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency for database sessions."""
    if not db_manager:
        raise RuntimeError("Database not initialized")
    async with db_manager.session() as session:
        yield session
