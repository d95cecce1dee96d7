"""
Session (bearer token + user record) for authenticated calls.

The session is an explicit object handed to the clients and controllers:
created at login, destroyed at logout, and persisted through a small JSON
key-value store so a restarted client can pick it up again.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Callable, Optional

from pydantic import BaseModel, ValidationError

from bibocom.config import get_settings
from bibocom.core.errors import AuthRequiredError
from bibocom.infra.logging_config import get_logger
from bibocom.schemas.user import User

logger = get_logger("session")

TOKEN_KEY = "token"
USER_KEY = "user"


class AuthSession(BaseModel):
    token: str
    user: Optional[User] = None


class SessionStore:
    """Persistent key-value storage for the session (``token`` and ``user``)."""

    def __init__(self, path: Optional[Path] = None) -> None:
        self._path = path or get_settings().session_path

    @property
    def path(self) -> Path:
        return self._path

    def read(self) -> Optional[AuthSession]:
        """Return the stored session, or None if missing or unreadable."""
        if not self._path.exists():
            return None
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.warning("Could not read session file %s: %s", self._path, e)
            return None
        if not isinstance(data, dict) or not data.get(TOKEN_KEY):
            return None
        try:
            return AuthSession(token=data[TOKEN_KEY], user=data.get(USER_KEY))
        except ValidationError as e:
            logger.warning("Invalid session file %s: %s", self._path, e)
            return None

    def write(self, session: AuthSession) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        data = {
            TOKEN_KEY: session.token,
            USER_KEY: session.user.model_dump(mode="json", by_alias=True)
            if session.user
            else None,
        }
        self._path.write_text(json.dumps(data), encoding="utf-8")

    def delete(self) -> None:
        self._path.unlink(missing_ok=True)


class AuthContext:
    """Holds the current session. Token present means authenticated."""

    def __init__(
        self,
        store: Optional[SessionStore] = None,
        session: Optional[AuthSession] = None,
    ) -> None:
        self._store = store
        self._session = session
        self._logout_listeners: list[Callable[[], None]] = []

    @classmethod
    def from_store(cls, store: Optional[SessionStore] = None) -> AuthContext:
        """Restore the persisted session, if any."""
        store = store or SessionStore()
        return cls(store=store, session=store.read())

    @property
    def session(self) -> Optional[AuthSession]:
        return self._session

    @property
    def is_authenticated(self) -> bool:
        return bool(self._session and self._session.token)

    @property
    def token(self) -> Optional[str]:
        return self._session.token if self._session else None

    @property
    def current_user(self) -> Optional[User]:
        return self._session.user if self._session else None

    @property
    def user_id(self) -> Optional[int]:
        user = self.current_user
        return user.id if user else None

    def login(self, session: AuthSession) -> None:
        self._session = session
        if self._store is not None:
            self._store.write(session)
        logger.info("Session started for user=%s", self.user_id)

    def logout(self) -> None:
        """Destroy the session and notify listeners (e.g. redirect to login)."""
        user_id = self.user_id
        self._session = None
        if self._store is not None:
            self._store.delete()
        logger.info("Session ended for user=%s", user_id)
        for listener in list(self._logout_listeners):
            listener()

    def add_logout_listener(self, listener: Callable[[], None]) -> Callable[[], None]:
        self._logout_listeners.append(listener)

        def remove() -> None:
            if listener in self._logout_listeners:
                self._logout_listeners.remove(listener)

        return remove

    def auth_headers(self) -> dict[str, str]:
        """Authorization header for the current session. Raises without a token."""
        if not self.is_authenticated:
            raise AuthRequiredError()
        return {"Authorization": f"Bearer {self.token}"}
