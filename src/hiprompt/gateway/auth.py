"""
GoTrue auth client (/auth/v1).

Endpoints:
- POST /token?grant_type=password       - Sign in with email + password
- POST /token?grant_type=refresh_token  - Exchange refresh token
- POST /signup                          - Create account (metadata in "data")
- POST /logout                          - Revoke the refresh token
- GET  /user                            - Current user for an access token

Session lifecycle:
1. get_session() loads the persisted session once, refreshing it when the
   access token expires within refresh_margin seconds
2. sign-in / refresh save the new token pair and notify listeners
3. sign-out clears storage and notifies listeners (no-op without a session)

Listeners receive (AuthEvent, AuthSession | None) synchronously, in
registration order, before the triggering call returns.
"""

import asyncio
import itertools
from typing import Any, Optional

import httpx
from loguru import logger

from ..errors import AuthApiError
from ..models.session import AuthEvent, AuthSession, Identity
from .base import AuthListener, SignUpResponse, Subscription
from .query import error_from_response
from .storage import MemorySessionStorage, SessionStorage


class AuthClient:
    """Password auth against a GoTrue server, with persisted sessions."""

    def __init__(
        self,
        http: httpx.AsyncClient,
        auth_url: str,
        api_key: str,
        storage: Optional[SessionStorage] = None,
        refresh_margin: int = 60,
    ):
        self.http = http
        self.auth_url = auth_url.rstrip("/")
        self.api_key = api_key
        self.storage = storage or MemorySessionStorage()
        self.refresh_margin = refresh_margin
        self._session: Optional[AuthSession] = None
        self._loaded = False
        self._listeners: dict[int, AuthListener] = {}
        self._ids = itertools.count()
        self._refresh_lock = asyncio.Lock()

    # Listeners

    def on_auth_state_change(self, callback: AuthListener) -> Subscription:
        key = next(self._ids)
        self._listeners[key] = callback
        return Subscription(lambda: self._listeners.pop(key, None))

    def _notify(self, event: AuthEvent, session: Optional[AuthSession]) -> None:
        logger.debug(f"Auth event {event.value}")
        for callback in list(self._listeners.values()):
            try:
                callback(event, session)
            except Exception:
                logger.exception(f"Auth listener failed on {event.value}")

    # HTTP

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[dict[str, str]] = None,
        json: Optional[dict[str, Any]] = None,
        access_token: Optional[str] = None,
    ) -> httpx.Response:
        headers = {"apikey": self.api_key, "Content-Type": "application/json"}
        headers["Authorization"] = f"Bearer {access_token or self.api_key}"
        try:
            response = await self.http.request(
                method, f"{self.auth_url}{path}", params=params, json=json, headers=headers
            )
        except httpx.HTTPError as e:
            logger.warning(f"Auth transport error on {path}: {e}")
            raise AuthApiError(f"Network error: {e}") from e

        if response.status_code >= 400:
            raise error_from_response(response, AuthApiError)
        return response

    # The in-memory session stays authoritative when persisting it fails

    def _store(self, session: AuthSession) -> None:
        self._session = session
        self._loaded = True
        try:
            self.storage.save(session)
        except OSError as e:
            logger.warning(f"Could not persist session, it will not survive this process: {e}")

    def _forget(self) -> None:
        self._session = None
        self._loaded = True
        try:
            self.storage.clear()
        except OSError as e:
            logger.warning(f"Could not remove persisted session: {e}")

    # Operations

    async def get_session(self) -> Optional[AuthSession]:
        """
        Current session, loading persisted state on first use.

        An expired session is refreshed; a rejected refresh token clears the
        stored session and returns None. Transport failures propagate.
        """
        if not self._loaded:
            self._session = self.storage.load()
            self._loaded = True

        session = self._session
        if session is None or not session.is_expired(self.refresh_margin):
            return session

        # Refresh tokens are single use: concurrent callers share one exchange
        async with self._refresh_lock:
            session = self._session
            if session is None or not session.is_expired(self.refresh_margin):
                return session
            try:
                return await self.refresh_session()
            except AuthApiError as e:
                if e.is_transport:
                    raise
                logger.info(f"Stored session rejected by provider ({e.message}), signing out")
                self._forget()
                self._notify(AuthEvent.SIGNED_OUT, None)
                return None

    async def refresh_session(self) -> AuthSession:
        if self._session is None:
            raise AuthApiError("No session to refresh", status=401, code="session_not_found")

        response = await self._request(
            "POST",
            "/token",
            params={"grant_type": "refresh_token"},
            json={"refresh_token": self._session.refresh_token},
        )
        session = AuthSession.model_validate(response.json())
        self._store(session)
        self._notify(AuthEvent.TOKEN_REFRESHED, session)
        return session

    async def sign_in_with_password(self, email: str, password: str) -> AuthSession:
        response = await self._request(
            "POST",
            "/token",
            params={"grant_type": "password"},
            json={"email": email, "password": password},
        )
        session = AuthSession.model_validate(response.json())
        self._store(session)
        logger.info(f"Signed in as {session.user.email}")
        self._notify(AuthEvent.SIGNED_IN, session)
        return session

    async def sign_up(
        self, email: str, password: str, metadata: Optional[dict[str, Any]] = None
    ) -> SignUpResponse:
        response = await self._request(
            "POST",
            "/signup",
            json={"email": email, "password": password, "data": metadata or {}},
        )
        body = response.json()

        # Autoconfirm projects return a session, others return the bare user
        if isinstance(body, dict) and body.get("access_token"):
            session = AuthSession.model_validate(body)
            self._store(session)
            self._notify(AuthEvent.SIGNED_IN, session)
            return SignUpResponse(user=session.user, session=session)

        user = Identity.model_validate(body.get("user", body))
        logger.info(f"Signed up {email}, awaiting email confirmation")
        return SignUpResponse(user=user, session=None)

    async def sign_out(self) -> None:
        """Revoke the session. Without a session this only clears storage."""
        if not self._loaded:
            self._session = self.storage.load()
            self._loaded = True

        session = self._session
        if session is None:
            self._forget()
            return

        try:
            await self._request("POST", "/logout", access_token=session.access_token)
        except AuthApiError as e:
            # An already-revoked token is as good as signed out
            if e.status not in (401, 403, 404):
                raise
            logger.debug(f"Logout with stale token ignored: {e.message}")

        self._forget()
        logger.info("Signed out")
        self._notify(AuthEvent.SIGNED_OUT, None)

    async def get_user(self) -> Optional[Identity]:
        """Fetch the user for the current access token; emits USER_UPDATED on change."""
        session = await self.get_session()
        if session is None:
            return None

        response = await self._request("GET", "/user", access_token=session.access_token)
        user = Identity.model_validate(response.json())
        if user != session.user:
            session = session.model_copy(update={"user": user})
            self._store(session)
            self._notify(AuthEvent.USER_UPDATED, session)
        return user
