"""
SESSION STORE

Purpose:
- Persist the operator credential between console restarts
- Two keys: "token" and "user"
- Written together, cleared together, never partially

Storage:
- FileSessionStore: JSON file, atomic write (temp file + replace)
- One file per operator browser, named by its browser id
- MemorySessionStore: in-process dict (per-tab sessions, tests)

Only the Session Manager writes here. The API client only reads the token.
"""

import json
import logging
import os
import re
import secrets
import threading
from typing import Any, Dict, Optional, Tuple

logger = logging.getLogger(__name__)

TOKEN_KEY = "token"
USER_KEY = "user"

BROWSER_ID_PATTERN = re.compile(r"^[A-Za-z0-9_-]{32}$")


class SessionStore:
    """Interface for the persisted {token, user} pair."""

    def read(self) -> Optional[Tuple[str, Dict[str, Any]]]:
        raise NotImplementedError

    def write(self, token: str, user: Dict[str, Any]) -> None:
        raise NotImplementedError

    def clear(self) -> None:
        raise NotImplementedError

    def token(self) -> Optional[str]:
        stored = self.read()
        if stored is None:
            return None
        return stored[0]


def _is_complete(data: Any) -> bool:
    if not isinstance(data, dict):
        return False
    token = data.get(TOKEN_KEY)
    user = data.get(USER_KEY)
    return isinstance(token, str) and bool(token) and isinstance(user, dict)


class MemorySessionStore(SessionStore):

    def __init__(self, token: Optional[str] = None, user: Optional[Dict[str, Any]] = None):
        self._data: Dict[str, Any] = {}
        if token is not None and user is not None:
            self.write(token, user)

    def read(self) -> Optional[Tuple[str, Dict[str, Any]]]:
        if not _is_complete(self._data):
            return None
        return self._data[TOKEN_KEY], dict(self._data[USER_KEY])

    def write(self, token: str, user: Dict[str, Any]) -> None:
        self._data = {TOKEN_KEY: token, USER_KEY: dict(user)}

    def clear(self) -> None:
        self._data = {}


class FileSessionStore(SessionStore):
    """
    JSON-file backed store.

    - Thread-safe
    - Crash-safe (temp file + replace)
    - A file holding only one of the two keys counts as no session
    """

    def __init__(self, path: str):
        self.path = path
        self._lock = threading.Lock()

    def read(self) -> Optional[Tuple[str, Dict[str, Any]]]:
        with self._lock:
            if not os.path.exists(self.path):
                return None
            try:
                with open(self.path, "r", encoding="utf-8") as f:
                    data = json.load(f)
            except (OSError, ValueError) as e:
                logger.warning(f"Unreadable session file {self.path}: {e}")
                data = None

        if not _is_complete(data):
            # Half-written or corrupted pair is dropped as a whole
            self.clear()
            return None

        return data[TOKEN_KEY], data[USER_KEY]

    def write(self, token: str, user: Dict[str, Any]) -> None:
        tmp_path = f"{self.path}.tmp"
        directory = os.path.dirname(self.path)

        with self._lock:
            if directory:
                os.makedirs(directory, exist_ok=True)
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump({TOKEN_KEY: token, USER_KEY: user}, f, ensure_ascii=False)
            os.replace(tmp_path, self.path)

    def clear(self) -> None:
        with self._lock:
            try:
                os.remove(self.path)
            except FileNotFoundError:
                pass


# ==================================================
# PER-BROWSER FILES
# ==================================================

def new_browser_id() -> str:
    return secrets.token_urlsafe(24)


def is_browser_id(value: Any) -> bool:
    return isinstance(value, str) and bool(BROWSER_ID_PATTERN.match(value))


def session_file_for(directory: str, browser_id: str) -> str:
    """Path of the session file owned by one operator browser."""
    if not is_browser_id(browser_id):
        raise ValueError(f"Invalid browser id: {browser_id!r}")
    return os.path.join(directory, f"{browser_id}.json")
