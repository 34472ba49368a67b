"""Client session manager — a two-state machine over the records API.

    UNAUTHENTICATED --(signup/login ok)--> AUTHENTICATED
    AUTHENTICATED   --(logout | any 401)--> UNAUTHENTICATED

Learn: The 401 transition is handled in one place (_request_protected),
so every protected call (list, create, delete) forces logout the same
way. After each mutation the full list is re-fetched; `records` is always
the last server response, and rendering is a pure function of it.
"""

from enum import Enum
from typing import Any, Callable, Optional

import httpx
import structlog

from recordvault.client.token_store import MemoryTokenStore, StoredSession, TokenStore

logger = structlog.get_logger()

SIGNUP_PATH = "/api/auth/signup"
LOGIN_PATH = "/api/auth/login"
RECORDS_PATH = "/api/records"


class SessionState(str, Enum):
    UNAUTHENTICATED = "unauthenticated"
    AUTHENTICATED = "authenticated"


class ApiError(Exception):
    """Non-auth API failure, carrying the server's {message}."""

    def __init__(self, status_code: int, message: str):
        self.status_code = status_code
        self.message = message
        super().__init__(f"{status_code}: {message}")


class SessionExpiredError(Exception):
    """The server rejected the token (or there is none); the session was logged out."""


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or response.reason_phrase
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return response.reason_phrase


StateListener = Callable[[SessionState], None]


class SessionManager:
    """Holds the token, tracks the session state, and talks to the API.

    `http` is an httpx.AsyncClient whose base_url points at the server.
    """

    def __init__(self, http: httpx.AsyncClient, store: Optional[TokenStore] = None):
        self.http = http
        self.store = store or MemoryTokenStore()
        self.records: list[dict[str, Any]] = []
        self._listeners: list[StateListener] = []
        self._session = self.store.load()

    # ─── State ──────────────────────────────────────────

    @property
    def state(self) -> SessionState:
        if self._session is not None:
            return SessionState.AUTHENTICATED
        return SessionState.UNAUTHENTICATED

    @property
    def username(self) -> Optional[str]:
        return self._session.username if self._session else None

    @property
    def token(self) -> Optional[str]:
        return self._session.token if self._session else None

    def add_listener(self, listener: StateListener) -> None:
        """Call listener(new_state) on every state transition."""
        self._listeners.append(listener)

    def _transition(self, session: Optional[StoredSession]) -> None:
        before = self.state
        self._session = session
        if session is None:
            self.store.clear()
            self.records = []
        else:
            self.store.save(session)
        if self.state != before:
            logger.info("session.transition", from_state=before.value, to_state=self.state.value)
            for listener in list(self._listeners):
                listener(self.state)

    # ─── Auth ───────────────────────────────────────────

    async def signup(self, username: str, password: str) -> list[dict[str, Any]]:
        """Create an account, enter AUTHENTICATED, and load the (empty) list."""
        return await self._authenticate(SIGNUP_PATH, username, password)

    async def login(self, username: str, password: str) -> list[dict[str, Any]]:
        """Log in, enter AUTHENTICATED, and load the record list."""
        return await self._authenticate(LOGIN_PATH, username, password)

    async def _authenticate(self, path: str, username: str, password: str) -> list[dict[str, Any]]:
        response = await self.http.post(path, json={"username": username, "password": password})
        if response.is_error:
            raise ApiError(response.status_code, _error_message(response))

        body = response.json()
        self._transition(StoredSession(username=body["user"], token=body["token"]))
        return await self.fetch_records()

    def logout(self) -> None:
        """Explicit logout: forget the token and the records."""
        self._transition(None)

    # ─── Records ────────────────────────────────────────

    async def fetch_records(self) -> list[dict[str, Any]]:
        response = await self._request_protected("GET", RECORDS_PATH)
        self.records = response.json()
        return self.records

    async def create_record(
        self,
        type: str,
        name: str,
        id_number: str,
        password: str = "",
        notes: Optional[str] = None,
    ) -> dict[str, Any]:
        """Create a record, then re-fetch the full list."""
        payload = {
            "type": type,
            "name": name.strip(),
            "idNumber": id_number.strip(),
            "password": password.strip(),
            "notes": notes.strip() if notes is not None else None,
        }
        response = await self._request_protected("POST", RECORDS_PATH, json=payload)
        created = response.json()
        await self.fetch_records()
        return created

    async def delete_record(self, record_id: str) -> None:
        """Delete a record, then re-fetch the full list."""
        await self._request_protected("DELETE", f"{RECORDS_PATH}/{record_id}")
        await self.fetch_records()

    async def _request_protected(self, method: str, path: str, **kwargs) -> httpx.Response:
        if self._session is None:
            raise SessionExpiredError("Not logged in.")

        headers = {"Authorization": f"Bearer {self._session.token}"}
        try:
            response = await self.http.request(method, path, headers=headers, **kwargs)
        except httpx.HTTPError as e:
            logger.warning("session.request_failed", method=method, path=path, error=str(e))
            raise

        if response.status_code == 401:
            logger.info("session.forced_logout", method=method, path=path)
            self._transition(None)
            raise SessionExpiredError(_error_message(response))
        if response.is_error:
            raise ApiError(response.status_code, _error_message(response))
        return response
