"""
SessionManager - single source of truth for who is using the client.

State machine:
    unknown ──initialize()──▶ authenticated | anonymous
    anonymous ──sign_in()──▶ authenticated
    authenticated ──sign_out()──▶ anonymous
    authenticated ──TOKEN_REFRESHED / USER_UPDATED──▶ authenticated
    authenticated ──refresh_identity()──▶ authenticated (USER_UPDATED)

The manager is the only writer of the session. It follows the gateway's
auth events (token refresh, external sign-out) as well as its own calls,
and broadcasts every transition to subscribers.

Expected failures come back as Result values; nothing here raises for bad
credentials or provider outages.

Usage:
    manager = SessionManager(gateway)
    unsubscribe = manager.subscribe(lambda session, event: print(event, session.state))
    await manager.initialize()
    result = await manager.sign_in("ada@example.com", "secret")
"""

import asyncio
import itertools
from typing import Callable, Optional

from loguru import logger

from ..errors import AuthError, AuthErrorKind, GatewayError
from ..gateway.base import Gateway, Subscription
from ..models.session import AuthEvent, AuthSession, Identity, Session, SessionState
from ..result import Result
from .rules import require_identity
from .validation import auth_error_from

SessionListener = Callable[[Session, AuthEvent], None]

# Events that carry no news when the state is already what they describe
_IDEMPOTENT_EVENTS = {AuthEvent.SIGNED_IN, AuthEvent.SIGNED_OUT, AuthEvent.INITIAL_SESSION}


class SessionManager:
    """Owns the current Session and its listeners."""

    def __init__(self, gateway: Gateway):
        self.gateway = gateway
        self._session = Session.unknown()
        self._listeners: dict[int, SessionListener] = {}
        self._ids = itertools.count()
        self._init_task: Optional[asyncio.Task] = None
        self._gateway_subscription: Optional[Subscription] = None

    @property
    def session(self) -> Session:
        return self._session

    @property
    def state(self) -> SessionState:
        return self._session.state

    @property
    def identity(self) -> Optional[Identity]:
        return self._session.identity

    @property
    def loading(self) -> bool:
        return self._session.is_loading

    # Lifecycle

    async def initialize(self) -> Session:
        """
        Resolve the persisted session, once.

        Concurrent and repeated calls share the first resolution. A failure
        to reach the gateway resolves to anonymous.
        """
        if self._init_task is None:
            self._init_task = asyncio.ensure_future(self._resolve())
        return await asyncio.shield(self._init_task)

    async def _resolve(self) -> Session:
        if self._gateway_subscription is None:
            self._gateway_subscription = self.gateway.auth.on_auth_state_change(self._on_gateway_event)

        try:
            auth_session = await self.gateway.auth.get_session()
        except GatewayError as e:
            logger.warning(f"Could not restore session, continuing signed out: {e.message}")
            auth_session = None

        # An auth event that arrived meanwhile is newer than what we fetched
        if self._session.state != SessionState.UNKNOWN:
            return self._session

        if auth_session is not None:
            logger.info(f"Restored session for {auth_session.user.email}")
            self._transition(Session.authenticated(auth_session.user), AuthEvent.INITIAL_SESSION)
        else:
            self._transition(Session.anonymous(), AuthEvent.INITIAL_SESSION)
        return self._session

    async def close(self) -> None:
        """Stop following gateway events and drop all listeners."""
        if self._gateway_subscription is not None:
            self._gateway_subscription.unsubscribe()
            self._gateway_subscription = None
        self._listeners.clear()

    # Subscriptions

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        """
        Register a listener for every later transition.

        Returns:
            Zero-argument callable that removes the listener (safe to call twice)
        """
        key = next(self._ids)
        self._listeners[key] = listener

        def unsubscribe() -> None:
            self._listeners.pop(key, None)

        return unsubscribe

    def _transition(self, new: Session, event: AuthEvent) -> None:
        if new == self._session and event in _IDEMPOTENT_EVENTS:
            return

        logger.debug(f"Session {self._session.state.value} -> {new.state.value} ({event.value})")
        self._session = new
        for listener in list(self._listeners.values()):
            try:
                listener(new, event)
            except Exception:
                logger.exception(f"Session listener failed on {event.value}")

    def _on_gateway_event(self, event: AuthEvent, auth_session: Optional[AuthSession]) -> None:
        if event == AuthEvent.SIGNED_OUT or auth_session is None:
            self._transition(Session.anonymous(), event)
        else:
            self._transition(Session.authenticated(auth_session.user), event)

    # Operations

    async def sign_in(self, email: str, password: str) -> Result[Identity, AuthError]:
        """Sign in with email and password. State is unchanged on failure."""
        if not email.strip() or not password:
            return Result.fail(AuthError(AuthErrorKind.INVALID_INPUT, "Email and password are required"))

        try:
            auth_session = await self.gateway.auth.sign_in_with_password(email.strip(), password)
        except GatewayError as e:
            error = auth_error_from(e)
            logger.info(f"Sign-in failed for {email}: {error!r}")
            return Result.fail(error)

        self._transition(Session.authenticated(auth_session.user), AuthEvent.SIGNED_IN)
        return Result.ok(auth_session.user)

    async def sign_up(self, email: str, password: str, display_name: str) -> Result[Identity, AuthError]:
        """
        Create an account with {"full_name": display_name} as metadata.

        The session only becomes authenticated when the provider signs the
        user in right away; with email verification on it stays as it was.
        """
        if not email.strip() or not password:
            return Result.fail(AuthError(AuthErrorKind.INVALID_INPUT, "Email and password are required"))

        try:
            response = await self.gateway.auth.sign_up(
                email.strip(), password, {"full_name": display_name.strip()}
            )
        except GatewayError as e:
            error = auth_error_from(e)
            logger.info(f"Sign-up failed for {email}: {error!r}")
            return Result.fail(error)

        if response.session is not None:
            self._transition(Session.authenticated(response.session.user), AuthEvent.SIGNED_IN)
        return Result.ok(response.user)

    async def sign_out(self) -> Result[None, AuthError]:
        """Sign out. Signing out while anonymous succeeds and changes nothing."""
        try:
            await self.gateway.auth.sign_out()
        except GatewayError as e:
            error = auth_error_from(e)
            logger.info(f"Sign-out failed: {error!r}")
            return Result.fail(error)

        self._transition(Session.anonymous(), AuthEvent.SIGNED_OUT)
        return Result.ok(None)

    async def refresh_identity(self) -> Result[Identity, AuthError]:
        """
        Re-read the signed-in user from the provider.

        Changed metadata arrives as USER_UPDATED and replaces the identity;
        a provider that no longer knows the session signs us out.
        """
        current = self.require_identity()
        if current.is_error:
            return current

        try:
            user = await self.gateway.auth.get_user()
        except GatewayError as e:
            error = auth_error_from(e)
            logger.info(f"Refreshing the user failed: {error!r}")
            return Result.fail(error)

        if user is None:
            self._transition(Session.anonymous(), AuthEvent.SIGNED_OUT)
            return self.require_identity()

        if user != self._session.identity:
            self._transition(Session.authenticated(user), AuthEvent.USER_UPDATED)
        return Result.ok(user)

    def require_identity(self) -> Result[Identity, AuthError]:
        """The signed-in identity, or a not_authenticated error."""
        return require_identity(self._session)
