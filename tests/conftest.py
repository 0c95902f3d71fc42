"""Shared pytest fixtures configured to use SQLite in-memory for tests."""

import logging
import os
import tempfile
from uuid import uuid4

# Settings are read at import time, so configure the environment first
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("REDIS_URL", "")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("SKIP_LIFESPAN_DB", "1")
os.environ.setdefault("LOG_DIR", tempfile.mkdtemp(prefix="notestream-logs-"))

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import event  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from notestream.core.models import BaseModel, User  # noqa: E402
from notestream.core.notifications import NotificationHub, get_notification_hub  # noqa: E402
from notestream.core.redis_client import get_redis_client  # noqa: E402
from notestream.core.schemas.auth import Caller  # noqa: E402
from notestream.database import get_db_session  # noqa: E402
from notestream.main import app  # noqa: E402
from notestream.security.jwt import create_token_for_user  # noqa: E402
from notestream.security.password import hash_password  # noqa: E402

# Silence extremely verbose DEBUG logs from aiosqlite to keep test output readable
logging.getLogger("aiosqlite").setLevel(logging.WARNING)


def make_engine():
    """SQLite in-memory engine; StaticPool keeps one DB across connections."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    # SQLite only enforces foreign keys (and ON DELETE CASCADE) when asked
    @event.listens_for(engine.sync_engine, "connect")
    def _set_sqlite_pragma(dbapi_connection, connection_record):  # noqa: ANN001
        cursor = dbapi_connection.cursor()
        try:
            cursor.execute("PRAGMA foreign_keys=ON")
        finally:
            cursor.close()

    return engine


async def create_schema(engine) -> None:
    async with engine.begin() as conn:
        await conn.run_sync(BaseModel.metadata.create_all)


@pytest.fixture
async def test_engine():
    engine = make_engine()
    await create_schema(engine)
    try:
        yield engine
    finally:
        await engine.dispose()


@pytest.fixture
async def test_session(test_engine):
    """Fresh database session per test."""
    session_factory = async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        try:
            yield session
        finally:
            await session.rollback()


async def _add_user(session: AsyncSession, username: str, password: str = "Password123!") -> User:
    user = User(
        username=username,
        email=f"{username}@example.com",
        password_hash=hash_password(password),
    )
    session.add(user)
    await session.commit()
    await session.refresh(user)
    return user


@pytest.fixture
async def alice(test_session):
    return await _add_user(test_session, "alice")


@pytest.fixture
async def bob(test_session):
    return await _add_user(test_session, "bob")


@pytest.fixture
def alice_caller(alice):
    return Caller(id=alice.id, username=alice.username)


@pytest.fixture
def bob_caller(bob):
    return Caller(id=bob.id, username=bob.username)


@pytest.fixture
def hub():
    """Fresh notification hub, also injected into the app."""
    hub = NotificationHub()
    app.dependency_overrides[get_notification_hub] = lambda: hub
    yield hub
    app.dependency_overrides.pop(get_notification_hub, None)


@pytest.fixture
def client(hub):
    """TestClient bound to its own in-memory database.

    Entering the client starts one event loop shared by every request and
    WebSocket session, so the hub's queues and the DB live on the same loop.
    """
    engine = make_engine()
    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async def _override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db_session] = _override_get_db
    with TestClient(app) as test_client:
        test_client.portal.call(create_schema, engine)
        yield test_client
        test_client.portal.call(engine.dispose)
    app.dependency_overrides.pop(get_db_session, None)


def register(client: TestClient, username: str, password: str = "Password123!") -> dict:
    """Register through the API; returns the {token, user} body."""
    response = client.post(
        "/api/register",
        json={"username": username, "email": f"{username}@example.com", "password": password},
    )
    assert response.status_code == 200, response.text
    return response.json()


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def auth_headers(alice):
    """Authorization header carrying a valid token for alice."""
    return bearer(create_token_for_user(alice))


class FakeRedis:
    """In-memory stand-in for redis.asyncio.Redis."""

    def __init__(self):
        self.storage = {}
        self.expiry = {}

    async def ping(self):
        return True

    async def set(self, key, value):
        self.storage[key] = value
        return True

    async def setex(self, key, seconds, value):
        self.storage[key] = value
        self.expiry[key] = seconds
        return True

    async def exists(self, key):
        return 1 if key in self.storage else 0

    async def aclose(self):
        pass


@pytest.fixture
def fake_redis():
    """Plug a FakeRedis into the shared RedisClient for one test."""
    redis_client = get_redis_client()
    fake = FakeRedis()
    redis_client.redis = fake
    yield fake
    redis_client.redis = None


@pytest.fixture
def unique_name():
    return f"user_{uuid4().hex[:8]}"
