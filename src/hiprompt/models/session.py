"""
Identity and session models.

Identity and AuthSession are supplied by the gateway's auth subsystem; the
client never issues or validates credentials itself. Session is the
client-side snapshot handed to listeners and authorization rules:

    unknown ──initialize──▶ authenticated | anonymous
    anonymous ◀──sign_in / sign_out──▶ authenticated
    authenticated ──token refresh──▶ authenticated
"""

import time
from datetime import datetime
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from .core import utcnow


class Identity(BaseModel):
    """An authenticated user as known to the gateway."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    id: str = Field(..., description="Opaque user id (auth.users.id)")
    email: Optional[str] = Field(default=None, description="User email address")
    created_at: datetime = Field(default_factory=utcnow, description="Account creation time")
    user_metadata: dict[str, Any] = Field(
        default_factory=dict,
        description="Metadata supplied at sign-up (full_name, ...)",
    )

    @property
    def display_name(self) -> str:
        return self.user_metadata.get("full_name") or self.email or self.id


class AuthSession(BaseModel):
    """
    Token pair returned by the auth endpoints and persisted between runs.
    """

    model_config = ConfigDict(extra="ignore")

    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_in: Optional[int] = None
    expires_at: Optional[int] = Field(
        default=None, description="Access token expiry (epoch seconds)"
    )
    user: Identity

    def model_post_init(self, __context: Any) -> None:
        if self.expires_at is None and self.expires_in is not None:
            self.expires_at = int(time.time()) + self.expires_in

    def is_expired(self, margin: int = 0) -> bool:
        """True when the access token expires within `margin` seconds."""
        if self.expires_at is None:
            return False
        return self.expires_at <= time.time() + margin


class SessionState(str, Enum):
    UNKNOWN = "unknown"
    ANONYMOUS = "anonymous"
    AUTHENTICATED = "authenticated"


class AuthEvent(str, Enum):
    INITIAL_SESSION = "INITIAL_SESSION"
    SIGNED_IN = "SIGNED_IN"
    SIGNED_OUT = "SIGNED_OUT"
    TOKEN_REFRESHED = "TOKEN_REFRESHED"
    USER_UPDATED = "USER_UPDATED"


class Session(BaseModel):
    """Immutable snapshot of the client's authentication state."""

    model_config = ConfigDict(frozen=True)

    state: SessionState = SessionState.UNKNOWN
    identity: Optional[Identity] = None

    @classmethod
    def unknown(cls) -> "Session":
        return cls(state=SessionState.UNKNOWN)

    @classmethod
    def anonymous(cls) -> "Session":
        return cls(state=SessionState.ANONYMOUS)

    @classmethod
    def authenticated(cls, identity: Identity) -> "Session":
        return cls(state=SessionState.AUTHENTICATED, identity=identity)

    @property
    def is_authenticated(self) -> bool:
        return self.state == SessionState.AUTHENTICATED and self.identity is not None

    @property
    def is_loading(self) -> bool:
        return self.state == SessionState.UNKNOWN

    @property
    def user_id(self) -> Optional[str]:
        return self.identity.id if self.identity else None
