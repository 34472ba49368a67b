"""Password hashing utilities.

Uses bcrypt: every hash embeds its own random salt and cost factor, so
hashing the same password twice gives different strings and verification
needs nothing but the stored hash. Cost 10 (~60ms) matches the hashes the
service has always produced; it is configurable via RECORDVAULT_BCRYPT_ROUNDS.
"""

import bcrypt

DEFAULT_ROUNDS = 10


def hash_password(password: str, rounds: int = DEFAULT_ROUNDS) -> str:
    """Hash a password with bcrypt.

    Passwords are truncated to 72 bytes (bcrypt's limit) before hashing.
    """
    pw_bytes = password.encode("utf-8")[:72]
    salt = bcrypt.gensalt(rounds=rounds)
    return bcrypt.hashpw(pw_bytes, salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Verify a password against its bcrypt hash.

    Returns False (never raises) for malformed hashes.
    """
    try:
        pw_bytes = password.encode("utf-8")[:72]
        hash_bytes = password_hash.encode("utf-8")
        return bcrypt.checkpw(pw_bytes, hash_bytes)
    except (ValueError, TypeError):
        return False
