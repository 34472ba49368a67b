"""Domain errors and their HTTP mapping.

Each error carries the status code and the human-readable message that the
API returns as {"message": ...}. Credential, token, and ownership failures
each use one fixed message so callers cannot tell the underlying causes
apart (missing user vs. wrong password, expired vs. forged token, missing
record vs. someone else's record).
"""


class RecordVaultError(Exception):
    """Base class for errors that map to an API response."""

    status_code: int = 500
    message: str = "Internal server error."

    def __init__(self, message: str | None = None):
        self.message = message or self.message
        super().__init__(self.message)


class ValidationError(RecordVaultError):
    """A required field is missing or empty."""

    status_code = 400
    message = "Invalid request."


class DuplicateUsernameError(RecordVaultError):
    status_code = 400
    message = "Username already exists."


class InvalidCredentialsError(RecordVaultError):
    """Unknown username or wrong password. Both cases look the same."""

    status_code = 400
    message = "Invalid credentials."


class UnauthorizedError(RecordVaultError):
    """Missing, malformed, expired, or forged bearer token."""

    status_code = 401
    message = "Request is not authorized."


class RecordNotFoundError(RecordVaultError):
    """No such record for this caller (whether or not it exists for someone else)."""

    status_code = 404
    message = "Record not found or user unauthorized."


class InternalError(RecordVaultError):
    status_code = 500
