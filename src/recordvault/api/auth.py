"""Auth API — signup and login.

- POST /auth/signup → create a user, return {user, token} (201)
- POST /auth/login  → check credentials, return {user, token} (200)

Both return 400 {message} on failure; see recordvault.errors.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from recordvault.auth.credentials import CredentialService
from recordvault.auth.dependencies import get_credentials
from recordvault.db.engine import get_db
from recordvault.schemas.auth import AuthResponse, Credentials
from recordvault.services.auth_service import AuthService

router = APIRouter(prefix="/auth")


def _svc(
    db: AsyncSession = Depends(get_db),
    credentials: CredentialService = Depends(get_credentials),
) -> AuthService:
    return AuthService(db, credentials)


@router.post("/signup", response_model=AuthResponse, status_code=201)
async def signup(body: Credentials, svc: AuthService = Depends(_svc)):
    """Create a new account and log it in."""
    result = await svc.signup(body.username, body.password)
    return AuthResponse(user=result.username, token=result.token)


@router.post("/login", response_model=AuthResponse)
async def login(body: Credentials, svc: AuthService = Depends(_svc)):
    """Login with username and password → JWT."""
    result = await svc.login(body.username, body.password)
    return AuthResponse(user=result.username, token=result.token)
