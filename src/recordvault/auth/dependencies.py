"""FastAPI auth dependencies — the access guard.

Learn: get_current_user is used as Depends() on every records route. It
turns the Authorization header into a CurrentIdentity, which routes then
pass explicitly into the service layer. It never touches the database: a
token is valid purely by signature and expiry.

All failures raise the same UnauthorizedError. Whether the header was
missing, the scheme wrong, the token expired or forged, the caller sees
one 401 with one message.
"""

import uuid
from dataclasses import dataclass
from typing import Optional

import structlog
from fastapi import Depends, Header, Request

from recordvault.auth.credentials import CredentialService
from recordvault.auth.jwt import TokenError
from recordvault.errors import UnauthorizedError

logger = structlog.get_logger()

BEARER_PREFIX = "Bearer "


@dataclass(frozen=True)
class CurrentIdentity:
    """The authenticated caller. All record queries are scoped by user_id."""

    user_id: uuid.UUID


def get_credentials(request: Request) -> CredentialService:
    """The app's CredentialService, built once in create_app()."""
    return request.app.state.credentials


async def get_current_user(
    authorization: Optional[str] = Header(None),
    credentials: CredentialService = Depends(get_credentials),
) -> CurrentIdentity:
    """Extract and verify the bearer token (401 if absent or invalid)."""
    if not authorization or not authorization.startswith(BEARER_PREFIX):
        logger.info("auth.rejected", reason="missing_or_malformed_header")
        raise UnauthorizedError()

    token = authorization[len(BEARER_PREFIX):].strip()
    if not token:
        logger.info("auth.rejected", reason="empty_token")
        raise UnauthorizedError()

    try:
        subject = credentials.verify_token(token)
        user_id = uuid.UUID(subject)
    except (TokenError, ValueError) as e:
        logger.info("auth.rejected", reason="invalid_token", error=str(e))
        raise UnauthorizedError()

    structlog.contextvars.bind_contextvars(user_id=str(user_id))
    return CurrentIdentity(user_id=user_id)
