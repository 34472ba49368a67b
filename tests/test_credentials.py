"""Credential service tests — bcrypt hashing and JWT signing.

Learn: These run without the app or the store. The service is a plain
object built from a secret, so tests construct it directly.
"""

import uuid
from datetime import datetime, timedelta, timezone

import jwt
import pytest

from recordvault.auth.credentials import CredentialService
from recordvault.auth.jwt import TokenError
from recordvault.auth.password import hash_password, verify_password
from recordvault.config import Settings

SECRET = "unit-test-signing-key-0123456789abcdef0123"
OTHER_SECRET = "another-signing-key-fedcba9876543210fedcba"


@pytest.fixture()
def creds():
    return CredentialService(secret=SECRET, bcrypt_rounds=4)


# ═══════════════════════════════════════════════════════════
# Passwords
# ═══════════════════════════════════════════════════════════


def test_hash_is_salted(creds):
    """Same password hashed twice gives different hashes; both verify."""
    h1 = creds.hash_password("hunter2")
    h2 = creds.hash_password("hunter2")
    assert h1 != h2
    assert creds.verify_password("hunter2", h1)
    assert creds.verify_password("hunter2", h2)


def test_hash_is_not_plaintext(creds):
    h = creds.hash_password("hunter2")
    assert "hunter2" not in h
    assert h.startswith("$2")


def test_verify_wrong_password(creds):
    h = creds.hash_password("hunter2")
    assert creds.verify_password("hunter3", h) is False


def test_verify_malformed_hash_returns_false():
    assert verify_password("hunter2", "not-a-bcrypt-hash") is False


def test_default_cost_factor_is_ten():
    h = hash_password("hunter2")
    assert h.split("$")[2] == "10"


# ═══════════════════════════════════════════════════════════
# Tokens
# ═══════════════════════════════════════════════════════════


def test_token_round_trip(creds):
    user_id = str(uuid.uuid4())
    token = creds.issue_token(user_id)
    assert creds.verify_token(token) == user_id


def test_token_expires_after_one_day(creds):
    token = creds.issue_token("someone")
    payload = jwt.decode(token, SECRET, algorithms=["HS256"])
    assert payload["exp"] - payload["iat"] == 24 * 60 * 60


def test_expired_token_rejected(creds):
    token = creds.issue_token("someone", expires_minutes=-1)
    with pytest.raises(TokenError):
        creds.verify_token(token)


def test_token_from_other_key_rejected(creds):
    other = CredentialService(secret=OTHER_SECRET)
    token = other.issue_token("someone")
    with pytest.raises(TokenError):
        creds.verify_token(token)


def test_tampered_token_rejected(creds):
    """Swapping in another payload under the original signature fails."""
    real = creds.issue_token("alice")
    forged_body = CredentialService(secret=OTHER_SECRET).issue_token("mallory")
    header, payload, _ = forged_body.split(".")
    signature = real.split(".")[2]
    with pytest.raises(TokenError):
        creds.verify_token(f"{header}.{payload}.{signature}")


def test_garbage_token_rejected(creds):
    with pytest.raises(TokenError):
        creds.verify_token("not.a.token")


def test_token_without_subject_rejected(creds):
    token = jwt.encode(
        {"exp": datetime.now(timezone.utc) + timedelta(hours=1)},
        SECRET,
        algorithm="HS256",
    )
    with pytest.raises(TokenError):
        creds.verify_token(token)


# ═══════════════════════════════════════════════════════════
# Settings
# ═══════════════════════════════════════════════════════════


def test_from_settings_uses_configured_lifetime():
    settings = Settings(
        jwt_secret=SECRET, access_token_expire_minutes=5, environment="test"
    )
    creds = CredentialService.from_settings(settings)
    payload = jwt.decode(creds.issue_token("x"), SECRET, algorithms=["HS256"])
    assert payload["exp"] - payload["iat"] == 5 * 60


def test_default_secret_refused_outside_development():
    with pytest.raises(ValueError):
        Settings(environment="production")
