"""Application configuration via environment variables.

Uses pydantic-settings to load config from env vars with RECORDVAULT_ prefix.
The Settings object is built once and handed to create_app(); components
receive what they need at construction time instead of reading env vars
per request.
"""

from pydantic import model_validator
from pydantic_settings import BaseSettings

DEFAULT_JWT_SECRET = "change-me-in-production"


class Settings(BaseSettings):
    """All app configuration. Set via RECORDVAULT_* env vars."""

    # Database
    database_url: str = "sqlite+aiosqlite:///./recordvault.db"

    # Auth
    jwt_secret: str = DEFAULT_JWT_SECRET
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 60 * 24  # tokens live for one day
    bcrypt_rounds: int = 10

    # Server
    environment: str = "development"
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 8000

    # CORS
    cors_origins: list[str] = [
        "http://localhost:3000",
        "http://localhost:5173",
    ]

    # Logging
    log_level: str = "INFO"
    log_format: str = "console"  # console or json

    model_config = {"env_prefix": "RECORDVAULT_"}

    @model_validator(mode="after")
    def validate_production_settings(self):
        """Ensure sensitive defaults are changed in non-development environments."""
        if self.environment != "development" and self.jwt_secret == DEFAULT_JWT_SECRET:
            raise ValueError(
                "RECORDVAULT_JWT_SECRET must be set to a secure value in "
                "non-development environments. Generate one with: "
                'python -c "import secrets; print(secrets.token_urlsafe(32))"'
            )
        if not 4 <= self.bcrypt_rounds <= 31:
            raise ValueError("RECORDVAULT_BCRYPT_ROUNDS must be between 4 and 31")
        return self


def get_settings() -> Settings:
    """Build settings from the current environment."""
    return Settings()
