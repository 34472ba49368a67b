"""Auth service — signup and login.

Learn: Username uniqueness is left to the store's UNIQUE index rather than
a check-then-insert, so two concurrent signups for the same name can't
both succeed. The IntegrityError is translated into DuplicateUsernameError
after a rollback.

Login failures are collapsed into one InvalidCredentialsError so the
response never reveals whether a username exists.
"""

from dataclasses import dataclass

import structlog
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from recordvault.auth.credentials import CredentialService
from recordvault.db.models import User
from recordvault.errors import (
    DuplicateUsernameError,
    InvalidCredentialsError,
    ValidationError,
)

logger = structlog.get_logger()


@dataclass(frozen=True)
class AuthResult:
    username: str
    token: str


class AuthService:
    """Business logic for account creation and authentication."""

    def __init__(self, db: AsyncSession, credentials: CredentialService):
        self.db = db
        self.credentials = credentials

    async def signup(self, username: str, password: str) -> AuthResult:
        """Create a user and return a token for it."""
        if not username or not username.strip():
            raise ValidationError("Username is required.")
        if not password:
            raise ValidationError("Password is required.")

        user = User(
            username=username,
            password_hash=self.credentials.hash_password(password),
        )
        self.db.add(user)
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            logger.info("auth.signup_duplicate", username=username)
            raise DuplicateUsernameError()

        logger.info("auth.signup", user_id=str(user.id), username=username)
        return AuthResult(username=user.username, token=self.credentials.issue_token(str(user.id)))

    async def login(self, username: str, password: str) -> AuthResult:
        """Check credentials and return a fresh token."""
        result = await self.db.execute(select(User).where(User.username == username))
        user = result.scalars().first()

        if not user or not self.credentials.verify_password(password, user.password_hash):
            logger.info("auth.login_failed", username=username)
            raise InvalidCredentialsError()

        logger.info("auth.login", user_id=str(user.id))
        return AuthResult(username=user.username, token=self.credentials.issue_token(str(user.id)))
