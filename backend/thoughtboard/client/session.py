"""
Who is logged in on this client.

The token and user are loaded from a store once at start-up, saved on
login/signup and removed on logout. Stores are swappable so tests and
headless tools can keep the session in memory.
"""
import json
from pathlib import Path
from typing import Any, Protocol

from loguru import logger as loguru_logger

from thoughtboard.client.api import ApiClient
from thoughtboard.client.models import User

logger = loguru_logger.bind(name="client")


class SessionStore(Protocol):
    def read(self) -> dict[str, Any] | None: ...
    def write(self, data: dict[str, Any]) -> None: ...
    def clear(self) -> None: ...


class MemorySessionStore:
    def __init__(self, data: dict[str, Any] | None = None):
        self._data = data

    def read(self) -> dict[str, Any] | None:
        return self._data

    def write(self, data: dict[str, Any]) -> None:
        self._data = dict(data)

    def clear(self) -> None:
        self._data = None


class FileSessionStore:
    """JSON file holding ``{"token": ..., "user": {...}}``"""

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def read(self) -> dict[str, Any] | None:
        if not self.path.exists():
            return None
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning(f"Ignoring unreadable session file {self.path}: {e}")
            return None
        return data if isinstance(data, dict) else None

    def write(self, data: dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data), encoding="utf-8")

    def clear(self) -> None:
        self.path.unlink(missing_ok=True)


class SessionContext:
    def __init__(self, api: ApiClient, store: SessionStore | None = None):
        self.api = api
        self.store = store or MemorySessionStore()
        self.user: User | None = None
        self.token: str | None = None
        self.loading = True

    @property
    def is_authenticated(self) -> bool:
        return self.token is not None and self.user is not None

    def load(self) -> None:
        """Restore a saved session; a partial or corrupt one counts as logged out."""
        data = self.store.read() or {}
        token, user = data.get("token"), data.get("user")
        if token and isinstance(user, dict):
            try:
                self._set(token, User.from_wire(user))
            except ValueError:
                logger.warning("Saved session has an invalid user, ignoring it")
        self.loading = False

    def _set(self, token: str | None, user: User | None) -> None:
        self.token = token
        self.user = user
        self.api.token = token

    def _save(self, token: str, user: User) -> None:
        self._set(token, user)
        self.store.write({"token": token, "user": user.to_wire()})

    async def login(self, username: str, password: str) -> User:
        token, user = await self.api.login(username, password)
        self._save(token, user)
        logger.info(f"Logged in as {user.username}")
        return user

    async def signup(self, username: str, password: str) -> User:
        token, user = await self.api.signup(username, password)
        self._save(token, user)
        logger.info(f"Signed up as {user.username}")
        return user

    def logout(self) -> None:
        self._set(None, None)
        self.store.clear()
