"""Client side: session state machine, token storage, and rendering.

The SessionManager plays the role the browser script used to: it keeps
the token, attaches it to every records call, and drops back to the
logged-out state the moment any call comes back 401.
"""

from recordvault.client.session import (
    ApiError,
    SessionExpiredError,
    SessionManager,
    SessionState,
)
from recordvault.client.token_store import FileTokenStore, MemoryTokenStore, StoredSession

__all__ = [
    "ApiError",
    "FileTokenStore",
    "MemoryTokenStore",
    "SessionExpiredError",
    "SessionManager",
    "SessionState",
    "StoredSession",
]
