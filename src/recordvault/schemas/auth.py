"""Pydantic schemas for signup/login.

Blank usernames/passwords pass schema validation on purpose: the auth
service owns that check so that direct service callers get it too.
"""

from pydantic import BaseModel


class Credentials(BaseModel):
    username: str
    password: str


class AuthResponse(BaseModel):
    """Signup/login result. `user` is the username, not an object."""

    user: str
    token: str
