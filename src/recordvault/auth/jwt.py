"""JWT token creation and verification.

Tokens are stateless: {sub: user_id, iat, exp}. There is no server-side
session table and no revocation list, so a token is valid exactly until
its exp claim.
"""

from datetime import datetime, timedelta, timezone

import jwt


class TokenError(Exception):
    """Raised when token verification fails."""


def create_access_token(
    user_id: str,
    secret: str,
    algorithm: str = "HS256",
    expires_minutes: int = 60 * 24,
) -> str:
    """Create a signed JWT access token for user_id."""
    now = datetime.now(timezone.utc)
    payload = {
        "sub": user_id,
        "iat": now,
        "exp": now + timedelta(minutes=expires_minutes),
    }
    return jwt.encode(payload, secret, algorithm=algorithm)


def verify_token(token: str, secret: str, algorithm: str = "HS256") -> dict:
    """Verify and decode a JWT token.

    Returns the payload dict on success.
    Raises TokenError on bad signature, malformed token, or expiry.
    """
    try:
        return jwt.decode(
            token,
            secret,
            algorithms=[algorithm],
            options={"require": ["sub", "exp"]},
        )
    except jwt.ExpiredSignatureError:
        raise TokenError("Token has expired")
    except jwt.InvalidTokenError as e:
        raise TokenError(f"Invalid token: {e}")
