"""
View - base class for page view-models.

A view owns the data one page shows and reloads it when one of its inputs
changes (filters, tab, signed-in identity). There is no implicit dependency
tracking: subclasses call reload() from their input setters or session
listener.

Late results:
- every load() gets a generation number; a load that finishes after a newer
  one started, or after close(), is discarded
- background tasks (view counting, reloads triggered by session events)
  are kept until settle() or close(); their failures are logged
"""

import asyncio
from dataclasses import dataclass
from typing import Awaitable, Callable, Literal, Optional

from loguru import logger

from ..auth.session_manager import SessionManager
from ..errors import AuthError, AuthErrorKind, HiPromptError
from ..models.session import AuthEvent, Session

NoticeLevel = Literal["success", "error", "info"]


@dataclass(frozen=True)
class Notice:
    """A transient user-facing notification."""

    level: NoticeLevel
    message: str


NoticeHandler = Callable[[Notice], None]


class View:
    """Base view-model with load generations and notices."""

    def __init__(self, sessions: SessionManager, on_notice: Optional[NoticeHandler] = None):
        self.sessions = sessions
        self.on_notice = on_notice
        self.notices: list[Notice] = []
        self.loading = False
        self.closed = False
        self._generation = 0
        self._pending: set[asyncio.Future] = set()
        self._unsubscribe: Optional[Callable[[], None]] = None

    @property
    def session(self) -> Session:
        return self.sessions.session

    # Notices

    def notify(self, level: NoticeLevel, message: str) -> None:
        notice = Notice(level, message)
        self.notices.append(notice)
        if self.on_notice is not None:
            self.on_notice(notice)

    def notify_error(self, error: HiPromptError, fallback: Optional[str] = None) -> None:
        if isinstance(error, AuthError) and error.kind == AuthErrorKind.NOT_AUTHENTICATED:
            self.notify("error", error.message)
        else:
            self.notify("error", fallback or error.message)

    # Loading

    async def load(self) -> None:
        if self.closed:
            return
        self._generation += 1
        generation = self._generation
        self.loading = True
        try:
            await self._load(generation)
        finally:
            if generation == self._generation:
                self.loading = False

    async def _load(self, generation: int) -> None:
        raise NotImplementedError

    def is_current(self, generation: int) -> bool:
        """False when the view was closed or reloaded since `generation` started."""
        return not self.closed and generation == self._generation

    # Session following

    def follow_session(self) -> None:
        """Reload whenever the signed-in identity changes."""
        if self._unsubscribe is None:
            self._unsubscribe = self.sessions.subscribe(self._on_session_change)

    def _on_session_change(self, session: Session, event: AuthEvent) -> None:
        if not self.closed:
            self.spawn(self.on_identity_change(session))

    async def on_identity_change(self, session: Session) -> None:
        await self.load()

    # Background work

    def spawn(self, awaitable: Awaitable) -> asyncio.Future:
        future = asyncio.ensure_future(awaitable)
        self._pending.add(future)
        future.add_done_callback(self._finished)
        return future

    def _finished(self, future: asyncio.Future) -> None:
        self._pending.discard(future)
        if not future.cancelled() and future.exception() is not None:
            logger.opt(exception=future.exception()).error(f"{type(self).__name__} background task failed")

    async def settle(self) -> None:
        """Wait for background tasks started so far."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    def close(self) -> None:
        """Stop following inputs. Results arriving afterwards are dropped."""
        self.closed = True
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
