"""Where a client session keeps its token between runs.

MemoryTokenStore lasts for the process; FileTokenStore persists to a JSON
file (chmod 600) so a CLI login survives across invocations. Only the
username and the token are stored, never the password.
"""

import json
import os
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Optional, Protocol


@dataclass(frozen=True)
class StoredSession:
    username: str
    token: str


class TokenStore(Protocol):
    def load(self) -> Optional[StoredSession]: ...

    def save(self, session: StoredSession) -> None: ...

    def clear(self) -> None: ...


class MemoryTokenStore:
    """In-process token store."""

    def __init__(self, session: Optional[StoredSession] = None):
        self._session = session

    def load(self) -> Optional[StoredSession]:
        return self._session

    def save(self, session: StoredSession) -> None:
        self._session = session

    def clear(self) -> None:
        self._session = None


class FileTokenStore:
    """JSON-file token store, readable only by the owner."""

    def __init__(self, path: str | Path):
        self.path = Path(path).expanduser()

    def load(self) -> Optional[StoredSession]:
        try:
            data = json.loads(self.path.read_text())
        except FileNotFoundError:
            return None
        except (OSError, ValueError):
            # Unreadable or corrupt file counts as logged out
            return None
        if not isinstance(data, dict) or not data.get("token"):
            return None
        return StoredSession(username=str(data.get("username", "")), token=str(data["token"]))

    def save(self, session: StoredSession) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd = os.open(self.path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
        with os.fdopen(fd, "w") as f:
            json.dump(asdict(session), f)

    def clear(self) -> None:
        self.path.unlink(missing_ok=True)
