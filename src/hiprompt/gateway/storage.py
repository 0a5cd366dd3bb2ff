"""
Persistence for the signed-in auth session.

The auth client saves the token pair after sign-in and refresh, loads it
on startup and clears it on sign-out. FileSessionStorage is the default;
MemorySessionStorage keeps nothing across processes.
"""

import json
import os
from pathlib import Path
from typing import Optional, Protocol

from loguru import logger
from pydantic import ValidationError

from ..models.session import AuthSession


class SessionStorage(Protocol):
    def load(self) -> Optional[AuthSession]:
        ...

    def save(self, session: AuthSession) -> None:
        ...

    def clear(self) -> None:
        ...


class MemorySessionStorage:
    """Keeps the session in memory only."""

    def __init__(self, session: Optional[AuthSession] = None):
        self._session = session

    def load(self) -> Optional[AuthSession]:
        return self._session

    def save(self, session: AuthSession) -> None:
        self._session = session

    def clear(self) -> None:
        self._session = None


class FileSessionStorage:
    """
    Stores the session as JSON in a user-private file.

    A corrupt or unreadable file is treated as "no session" and logged.
    save() and clear() raise OSError; the auth client logs and carries on.
    """

    def __init__(self, path: Path | str):
        self.path = Path(path).expanduser()

    def load(self) -> Optional[AuthSession]:
        if not self.path.exists():
            return None
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
            return AuthSession.model_validate(data)
        except (OSError, ValueError, ValidationError) as e:
            logger.warning(f"Ignoring unreadable session file {self.path}: {e}")
            return None

    def save(self, session: AuthSession) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(".tmp")
        # Created private: the tokens never sit in a world-readable file
        tmp_path.unlink(missing_ok=True)
        fd = os.open(tmp_path, os.O_WRONLY | os.O_CREAT | os.O_EXCL, 0o600)
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(session.model_dump_json())
        tmp_path.replace(self.path)
        logger.debug(f"Session saved to {self.path}")

    def clear(self) -> None:
        self.path.unlink(missing_ok=True)
        logger.debug(f"Session cleared from {self.path}")
