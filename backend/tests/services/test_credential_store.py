"""Credential Store — registration, verification and account removal against a real DB.

Invariants:
    - Unknown email and wrong password raise the same error with the same message
    - Duplicate email → DuplicateResourceError, via the unique constraint
    - Deleting a user cascades to their tasks
"""

from unittest.mock import patch
from uuid import uuid4

import pytest
from sqlalchemy import func, select

from taskvault.core.errors import (
    DuplicateResourceError,
    InvalidCredentialError,
    ResourceNotFoundError,
)
from taskvault.models.task import Task
from taskvault.models.user import User
from taskvault.services.credential_store import CredentialStore
from taskvault.services.task_store import TaskStore


@pytest.fixture
def store(test_db):
    return CredentialStore(test_db, hash_rounds=4)


async def test_register_stores_hash_not_password(store, test_db):
    user = await store.register("alice@example.com", "secret123", "Alice")
    assert user.id is not None
    assert user.name == "Alice"
    assert user.password_hash != "secret123"
    assert user.password_hash.startswith("$2")


async def test_register_normalizes_email_and_name(store):
    user = await store.register("  Alice@Example.COM ", "secret123", "   ")
    assert user.email == "alice@example.com"
    assert user.name is None


async def test_duplicate_email_raises_conflict(store, test_db):
    await store.register("alice@example.com", "secret123")
    with pytest.raises(DuplicateResourceError) as info:
        await store.register("ALICE@example.com", "other-password")
    assert info.value.http_status == 409
    count = await test_db.scalar(select(func.count()).select_from(User))
    assert count == 1


async def test_verify_returns_user(store):
    created = await store.register("alice@example.com", "secret123")
    user = await store.verify("Alice@Example.com", "secret123")
    assert user.id == created.id


async def test_unknown_email_and_wrong_password_are_indistinguishable(store):
    await store.register("alice@example.com", "secret123")
    with pytest.raises(InvalidCredentialError) as unknown:
        await store.verify("nobody@example.com", "secret123")
    with pytest.raises(InvalidCredentialError) as wrong:
        await store.verify("alice@example.com", "wrong-password")
    assert type(unknown.value) is type(wrong.value)
    assert unknown.value.code == wrong.value.code
    assert unknown.value.message == wrong.value.message
    assert unknown.value.details == wrong.value.details


async def test_unknown_email_still_runs_a_hash_comparison(store):
    with patch(
        "taskvault.services.credential_store.verify_against_dummy",
        return_value=False,
    ) as dummy:
        with pytest.raises(InvalidCredentialError):
            await store.verify("nobody@example.com", "secret123")
    dummy.assert_called_once_with("secret123", 4)


async def test_get_unknown_user_is_not_found(store):
    with pytest.raises(ResourceNotFoundError):
        await store.get(uuid4())


async def test_delete_user_cascades_to_tasks(store, test_db):
    user = await store.register("alice@example.com", "secret123")
    tasks = TaskStore(test_db)
    await tasks.create(user.id, "Buy milk")
    await tasks.create(user.id, "Walk dog")

    await store.delete(user.id)

    remaining = await test_db.scalar(select(func.count()).select_from(Task))
    assert remaining == 0
    with pytest.raises(ResourceNotFoundError):
        await store.get(user.id)


async def test_delete_unknown_user_is_not_found(store):
    with pytest.raises(ResourceNotFoundError):
        await store.delete(uuid4())
