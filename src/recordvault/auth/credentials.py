"""Credential service — password hashing + token signing behind one object.

Built once in create_app() with the signing key and cost settings, then
shared (read-only) by every request. It does no I/O.
"""

from recordvault.auth import jwt as tokens
from recordvault.auth import password as passwords
from recordvault.auth.jwt import TokenError
from recordvault.config import Settings


class CredentialService:
    """Hashes/verifies passwords and issues/verifies access tokens."""

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        expires_minutes: int = 60 * 24,
        bcrypt_rounds: int = passwords.DEFAULT_ROUNDS,
    ):
        self._secret = secret
        self.algorithm = algorithm
        self.expires_minutes = expires_minutes
        self.bcrypt_rounds = bcrypt_rounds

    @classmethod
    def from_settings(cls, settings: Settings) -> "CredentialService":
        return cls(
            secret=settings.jwt_secret,
            algorithm=settings.jwt_algorithm,
            expires_minutes=settings.access_token_expire_minutes,
            bcrypt_rounds=settings.bcrypt_rounds,
        )

    # ─── Passwords ──────────────────────────────────────

    def hash_password(self, plaintext: str) -> str:
        return passwords.hash_password(plaintext, rounds=self.bcrypt_rounds)

    def verify_password(self, plaintext: str, password_hash: str) -> bool:
        return passwords.verify_password(plaintext, password_hash)

    # ─── Tokens ─────────────────────────────────────────

    def issue_token(self, subject_id: str, expires_minutes: int | None = None) -> str:
        """Sign a token for subject_id, valid for the configured lifetime."""
        return tokens.create_access_token(
            subject_id,
            self._secret,
            algorithm=self.algorithm,
            expires_minutes=(
                self.expires_minutes if expires_minutes is None else expires_minutes
            ),
        )

    def verify_token(self, token: str) -> str:
        """Return the subject id of a valid token. Raises TokenError otherwise."""
        payload = tokens.verify_token(token, self._secret, algorithm=self.algorithm)
        subject = payload.get("sub")
        if not isinstance(subject, str) or not subject:
            raise TokenError("Token has no subject")
        return subject
