"""Service test fixtures — async DB, seeded reaction catalog and FastAPI test client.

Invariants:
    - Every test gets a fresh in-memory SQLite database with the default catalog
    - get_db dependency overridden to use the test DB
    - db_manager patched so the readiness probe sees the test engine

Design Decisions:
    - SQLite in-memory over StaticPool: every session shares the one connection,
      so rows committed by a request are visible to test_db
    - Users are created through the API: fixtures exercise the real auth path
"""

import pytest
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from sqlalchemy.pool import StaticPool
from httpx import ASGITransport, AsyncClient

from articlehub.db.base import Base
from articlehub.db.seed import seed_reaction_kinds
from articlehub.infrastructure.database import get_db, DatabaseSessionManager
import articlehub.infrastructure.database as db_module
from articlehub.main import app


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False, poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    factory = async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )
    async with factory() as db:
        await seed_reaction_kinds(db)
    return factory


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
async def client(test_engine, test_session_factory):
    """FastAPI test client with DB dependency overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    original_manager = db_module.db_manager
    fake_manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    fake_manager.engine = test_engine
    fake_manager._session_factory = test_session_factory
    db_module.db_manager = fake_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager


async def _register(client: AsyncClient, username: str) -> dict:
    """Register a user through the API; returns {"user", "token", "headers"}."""
    res = await client.post("/api/auth/register", json={
        "username": username,
        "email": f"{username.lower()}@mail.com",
        "password": "secret123",
    })
    assert res.status_code == 201, res.text
    body = res.json()
    return {
        "user": body["user"],
        "token": body["token"],
        "headers": {"Authorization": f"Bearer {body['token']}"},
    }


@pytest.fixture
def register_user(client):
    """Factory: await register_user("carol") for extra accounts."""
    async def _factory(username: str) -> dict:
        return await _register(client, username)
    return _factory


@pytest.fixture
async def alice(client):
    return await _register(client, "alice")


@pytest.fixture
async def bob(client):
    return await _register(client, "bob")


@pytest.fixture
async def article(client, alice):
    res = await client.post(
        "/api/articles",
        json={"title": "First article", "content": "Some long enough article body."},
        headers=alice["headers"],
    )
    assert res.status_code == 201, res.text
    return res.json()["article"]


@pytest.fixture
async def comment(client, alice, article):
    res = await client.post(
        f"/api/comments/article/{article['id']}",
        json={"content": "Nice read"},
        headers=alice["headers"],
    )
    assert res.status_code == 201, res.text
    return res.json()["comment"]
