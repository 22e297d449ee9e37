"""Database session manager — storage failures become DatabaseError, sessions stay scoped.

Invariants:
    - A SQLAlchemy failure inside session() leaves as DatabaseError, never raw
    - The DatabaseError text is for logs only: map_error hides it
"""

import pytest
from sqlalchemy import text
from sqlalchemy.exc import IntegrityError, OperationalError, SQLAlchemyError

from taskvault.core.error_mapping import INTERNAL_ERROR_MESSAGE, map_error
from taskvault.core.errors import DatabaseError
from taskvault.infrastructure.database import (
    DatabaseSessionManager,
    classify_storage_error,
)


@pytest.fixture
def manager(test_engine, test_session_factory):
    m = DatabaseSessionManager.__new__(DatabaseSessionManager)
    m.engine = test_engine
    m._session_factory = test_session_factory
    return m


@pytest.mark.parametrize(
    "exc,operation",
    [
        (IntegrityError("INSERT", {}, Exception("dup")), "write"),
        (OperationalError("SELECT", {}, Exception("gone")), "connect"),
        (SQLAlchemyError("odd"), "orm"),
    ],
)
def test_classify_storage_error(exc, operation):
    assert classify_storage_error(exc)[0] == operation


async def test_storage_failure_surfaces_as_database_error(manager):
    with pytest.raises(DatabaseError) as info:
        async with manager.session() as db:
            await db.execute(text("SELECT * FROM no_such_table"))
    assert info.value.expose is False
    assert map_error(info.value).message == INTERNAL_ERROR_MESSAGE


async def test_session_is_usable_after_a_failed_one(manager):
    with pytest.raises(DatabaseError):
        async with manager.session() as db:
            await db.execute(text("SELECT * FROM no_such_table"))
    async with manager.session() as db:
        assert (await db.execute(text("SELECT 1"))).scalar() == 1


async def test_health_check(manager):
    assert await manager.health_check() is True
