"""
Gateway contract consumed by the session manager and services.

SupabaseGateway implements it over HTTP; tests provide an in-memory
implementation. Gateway methods raise GatewayError / AuthApiError on
failure; callers convert those into Result values.
"""

from dataclasses import dataclass
from typing import Any, Callable, Optional, Protocol

from ..models.session import AuthEvent, AuthSession, Identity
from .query import QueryBuilder

AuthListener = Callable[[AuthEvent, Optional[AuthSession]], None]


@dataclass
class SignUpResponse:
    """
    Result of a sign-up call.

    session is None while the provider waits for email verification.
    """

    user: Identity
    session: Optional[AuthSession] = None


class Subscription:
    """Handle returned by on_auth_state_change(); unsubscribe() is idempotent."""

    def __init__(self, unsubscribe: Callable[[], None]):
        self._unsubscribe = unsubscribe
        self.active = True

    def unsubscribe(self) -> None:
        if self.active:
            self.active = False
            self._unsubscribe()


class AuthGateway(Protocol):
    async def get_session(self) -> Optional[AuthSession]:
        ...

    def on_auth_state_change(self, callback: AuthListener) -> Subscription:
        ...

    async def sign_in_with_password(self, email: str, password: str) -> AuthSession:
        ...

    async def sign_up(
        self, email: str, password: str, metadata: Optional[dict[str, Any]] = None
    ) -> SignUpResponse:
        ...

    async def sign_out(self) -> None:
        ...

    async def get_user(self) -> Optional[Identity]:
        ...


class Gateway(Protocol):
    auth: AuthGateway

    def table(self, name: str) -> QueryBuilder:
        ...

    async def aclose(self) -> None:
        ...
