"""Shared test fixtures."""

from __future__ import annotations

from collections.abc import AsyncGenerator
from datetime import date

import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from magilearn.auth.jwt import create_access_token
from magilearn.config import get_settings
from magilearn.db import models  # noqa: F401
from magilearn.db.base import Base
from magilearn.dependencies import get_memory_storage, get_recommendation_service, reset_memory_storage
from magilearn.main import create_app
from magilearn.storage import MemoryStorage, SqlStorage
from magilearn.storage.seed import seed_demo_user

TODAY = date(2026, 3, 14)


@pytest.fixture(autouse=True)
def _test_settings(monkeypatch: pytest.MonkeyPatch):
    """Memory backend, no Redis, no AI key, guest mode on."""
    monkeypatch.setenv("MAGILEARN_STORAGE_BACKEND", "memory")
    monkeypatch.setenv("MAGILEARN_REDIS_URL", "")
    monkeypatch.setenv("MAGILEARN_ANTHROPIC_API_KEY", "")
    monkeypatch.setenv("MAGILEARN_ALLOW_GUEST", "true")
    monkeypatch.setenv("MAGILEARN_LOG_FORMAT", "console")
    get_settings.cache_clear()
    get_recommendation_service.cache_clear()
    reset_memory_storage()
    yield
    get_settings.cache_clear()
    get_recommendation_service.cache_clear()
    reset_memory_storage()


@pytest.fixture
def memory_storage() -> MemoryStorage:
    return MemoryStorage()


@pytest_asyncio.fixture
async def seeded_storage() -> MemoryStorage:
    """Memory storage holding the demo learner (one of three spins used on TODAY)."""
    storage = MemoryStorage()
    await seed_demo_user(storage, "default-user", today=TODAY)
    return storage


@pytest_asyncio.fixture
async def sql_session() -> AsyncGenerator[AsyncSession, None]:
    """Session on a fresh in-memory SQLite database with all tables created."""
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        yield session
    await engine.dispose()


@pytest.fixture
def sql_storage(sql_session: AsyncSession) -> SqlStorage:
    return SqlStorage(sql_session)


@pytest.fixture
def app() -> FastAPI:
    return create_app()


@pytest_asyncio.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client against the app on the memory backend, demo learner seeded."""
    await seed_demo_user(get_memory_storage(), get_settings().default_user_id)

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


async def _signup(client: AsyncClient, username: str = "mia", password: str = "rainbow42") -> dict:
    """Helper to create an account through the API."""
    response = await client.post("/api/auth/signup", json={"username": username, "password": password})
    assert response.status_code == 200, response.text
    data = response.json()
    return {
        "username": username,
        "password": password,
        "user_id": data["user"]["id"],
        "access_token": data["access_token"],
    }


@pytest_asyncio.fixture
async def signed_up_user(client: AsyncClient) -> dict:
    return await _signup(client)


@pytest_asyncio.fixture
async def authed_client(client: AsyncClient, signed_up_user: dict) -> AsyncClient:
    """Client authenticated as a freshly signed-up learner."""
    client.headers["Authorization"] = f"Bearer {signed_up_user['access_token']}"
    return client


@pytest.fixture
def make_token():
    """Build an access token for an arbitrary user id."""

    def _make(user_id: str, username: str = "someone") -> str:
        return create_access_token(user_id, username)

    return _make
