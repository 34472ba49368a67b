"""Test fixtures — a fresh in-memory store and app per test.

Learn: Each test builds its own engine on SQLite in-memory (aiosqlite +
StaticPool so every session shares the one connection), creates the
tables, and hands the engine to create_app(). Nothing is mocked in the
auth pipeline: tests sign up, get real JWTs, and send them as bearer
tokens, exactly like a client would.
"""

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool

from recordvault.config import Settings
from recordvault.db.models import create_all
from recordvault.main import create_app

TEST_DB_URL = "sqlite+aiosqlite:///:memory:"
TEST_JWT_SECRET = "test-signing-key-0123456789abcdef0123456789"


@pytest.fixture()
def settings():
    # Minimum bcrypt cost keeps the suite fast
    return Settings(
        database_url=TEST_DB_URL,
        jwt_secret=TEST_JWT_SECRET,
        bcrypt_rounds=4,
        environment="test",
    )


@pytest_asyncio.fixture()
async def engine():
    engine = create_async_engine(
        TEST_DB_URL,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    await create_all(engine)
    try:
        yield engine
    finally:
        await engine.dispose()


@pytest.fixture()
def app(settings, engine):
    return create_app(settings=settings, engine=engine)


@pytest_asyncio.fixture()
async def client(app):
    """HTTP client talking to the app in-process."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture()
def signup(client):
    """Sign up a user and return (token, auth headers)."""

    async def _signup(username: str, password: str = "password_123"):
        r = await client.post(
            "/api/auth/signup",
            json={"username": username, "password": password},
        )
        assert r.status_code == 201, r.text
        token = r.json()["token"]
        return token, {"Authorization": f"Bearer {token}"}

    return _signup
