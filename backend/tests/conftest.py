"""Root conftest — shared test configuration, async DB and FastAPI test client.

Invariants:
    - Environment is pinned before any taskvault module is imported
      (get_settings() is lru_cached on first use)
    - Every test gets a fresh in-memory SQLite database with foreign keys on
    - get_db dependency overridden to use the test DB session factory

Design Decisions:
    - SQLite in-memory: fast, no external dependency; RETURNING and FK cascade
      are both supported by current SQLite
    - StaticPool: one shared in-memory connection across sessions in a test
    - bcrypt cost 4 in tests (PASSWORD_HASH_ROUNDS): same code path, a fraction of the time
"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault(
    "JWT_SECRET", "test-signing-secret-with-more-than-32-bytes-of-entropy",
)
os.environ.setdefault("PASSWORD_HASH_ROUNDS", "4")
os.environ.setdefault("LOG_FORMAT", "text")

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import (  # noqa: E402
    AsyncSession, async_sessionmaker, create_async_engine,
)
from sqlalchemy.pool import StaticPool  # noqa: E402

import taskvault.infrastructure.database as db_module  # noqa: E402
from taskvault.db.base import Base  # noqa: E402
from taskvault.infrastructure.database import (  # noqa: E402
    DatabaseSessionManager, enable_sqlite_foreign_keys, get_db,
)
from taskvault.main import app  # noqa: E402
import taskvault.models  # noqa: E402,F401

TEST_PASSWORD = "secret123"


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    enable_sqlite_foreign_keys(engine)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
async def client(test_engine, test_session_factory):
    """FastAPI test client with DB dependency overridden."""
    fake_manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    fake_manager.engine = test_engine
    fake_manager._session_factory = test_session_factory

    async def override_get_db():
        async with fake_manager.session() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    original_manager = db_module.db_manager
    db_module.db_manager = fake_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager


# ─── Helpers ─────────────────────────────────────────────────────

async def register_and_login(
    client: AsyncClient, email: str, password: str = TEST_PASSWORD,
) -> dict:
    """Register a user via the API and return auth headers plus the user payload."""
    res = await client.post(
        "/auth/register", json={"email": email, "password": password},
    )
    assert res.status_code == 201, res.text
    res = await client.post(
        "/auth/login", json={"email": email, "password": password},
    )
    assert res.status_code == 200, res.text
    body = res.json()
    return {
        "headers": {"Authorization": f"Bearer {body['token']}"},
        "user": body["user"],
        "token": body["token"],
    }


@pytest.fixture
def login_as(client):
    """Factory fixture: `await login_as("carol@example.com")` → headers, user, token."""
    async def _login_as(email: str, password: str = TEST_PASSWORD) -> dict:
        return await register_and_login(client, email, password)
    return _login_as


@pytest.fixture
async def alice(login_as):
    return await login_as("alice@example.com")


@pytest.fixture
async def bob(login_as):
    return await login_as("bob@example.com")
