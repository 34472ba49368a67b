"""Auth API tests — signup, login, and identical failure responses.

Learn: Tests cover:
1. Signup → token whose subject is the new user's id
2. Duplicate username → 400, and still exactly one user
3. Blank/missing fields → 400 {message}
4. Login success
5. Unknown user and wrong password are indistinguishable
"""

import uuid

import pytest
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from recordvault.db.models import User


def _name(prefix: str) -> str:
    return f"{prefix}-{uuid.uuid4().hex[:8]}"


async def _user_count(engine, username: str) -> int:
    async with AsyncSession(engine) as session:
        result = await session.execute(
            select(func.count()).select_from(User).where(User.username == username)
        )
        return result.scalar_one()


# ═══════════════════════════════════════════════════════════
# Signup
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_signup_returns_user_and_token(client):
    username = _name("alice")
    r = await client.post(
        "/api/auth/signup",
        json={"username": username, "password": "secure_password_123"},
    )
    assert r.status_code == 201
    body = r.json()
    assert set(body) == {"user", "token"}
    assert body["user"] == username


@pytest.mark.asyncio
async def test_signup_token_subject_is_user_id(app, client, engine):
    """The issued token verifies to the id of the persisted user."""
    username = _name("subject")
    r = await client.post(
        "/api/auth/signup", json={"username": username, "password": "pw_123456"}
    )
    token = r.json()["token"]

    async with AsyncSession(engine) as session:
        user = (
            await session.execute(select(User).where(User.username == username))
        ).scalar_one()

    assert app.state.credentials.verify_token(token) == str(user.id)


@pytest.mark.asyncio
async def test_distinct_signups_get_distinct_identities(app, client):
    subjects = set()
    for _ in range(3):
        r = await client.post(
            "/api/auth/signup",
            json={"username": _name("many"), "password": "pw_123456"},
        )
        assert r.status_code == 201
        subjects.add(app.state.credentials.verify_token(r.json()["token"]))
    assert len(subjects) == 3


@pytest.mark.asyncio
async def test_signup_stores_hash_not_password(client, engine):
    username = _name("hashed")
    await client.post(
        "/api/auth/signup", json={"username": username, "password": "plain_secret"}
    )
    async with AsyncSession(engine) as session:
        user = (
            await session.execute(select(User).where(User.username == username))
        ).scalar_one()
    assert user.password_hash != "plain_secret"
    assert user.password_hash.startswith("$2")


@pytest.mark.asyncio
async def test_signup_duplicate_username(client, engine):
    """Second signup with the same username fails; no second user exists."""
    username = _name("dup")
    body = {"username": username, "password": "password_123"}

    r1 = await client.post("/api/auth/signup", json=body)
    assert r1.status_code == 201

    r2 = await client.post(
        "/api/auth/signup", json={"username": username, "password": "different_456"}
    )
    assert r2.status_code == 400
    assert r2.json() == {"message": "Username already exists."}

    assert await _user_count(engine, username) == 1


@pytest.mark.asyncio
async def test_signup_blank_username(client):
    r = await client.post(
        "/api/auth/signup", json={"username": "   ", "password": "password_123"}
    )
    assert r.status_code == 400
    assert "message" in r.json()


@pytest.mark.asyncio
async def test_signup_empty_password(client):
    r = await client.post(
        "/api/auth/signup", json={"username": _name("nopw"), "password": ""}
    )
    assert r.status_code == 400
    assert r.json()["message"] == "Password is required."


@pytest.mark.asyncio
async def test_signup_missing_field(client):
    """Missing body fields are 400 {message}, not FastAPI's 422."""
    r = await client.post("/api/auth/signup", json={"username": _name("half")})
    assert r.status_code == 400
    assert "password" in r.json()["message"]


# ═══════════════════════════════════════════════════════════
# Login
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_login_success(app, client):
    username = _name("login")
    r = await client.post(
        "/api/auth/signup", json={"username": username, "password": "my_password_123"}
    )
    signup_subject = app.state.credentials.verify_token(r.json()["token"])

    r = await client.post(
        "/api/auth/login", json={"username": username, "password": "my_password_123"}
    )
    assert r.status_code == 200
    body = r.json()
    assert body["user"] == username
    assert app.state.credentials.verify_token(body["token"]) == signup_subject


@pytest.mark.asyncio
async def test_login_failures_are_indistinguishable(client):
    """Wrong password and unknown user give the same status and body."""
    username = _name("enum")
    await client.post(
        "/api/auth/signup", json={"username": username, "password": "correct_password"}
    )

    wrong_pw = await client.post(
        "/api/auth/login", json={"username": username, "password": "wrong_password"}
    )
    no_user = await client.post(
        "/api/auth/login",
        json={"username": _name("nobody"), "password": "correct_password"},
    )

    assert wrong_pw.status_code == no_user.status_code == 400
    assert wrong_pw.json() == no_user.json() == {"message": "Invalid credentials."}


@pytest.mark.asyncio
async def test_login_missing_field(client):
    r = await client.post("/api/auth/login", json={"password": "whatever"})
    assert r.status_code == 400
    assert "username" in r.json()["message"]
