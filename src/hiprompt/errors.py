"""
hiprompt error taxonomy.

- ConfigurationError: gateway credentials missing. Fatal to startup; the CLI
  shows setup instructions instead of running commands.
- AuthError: sign-in/sign-up/sign-out failures and actions that need a
  signed-in identity. Recoverable.
- DataError: query or mutation failures. Recoverable, reported per operation.
- UnexpectedError: wraps a fault caught by the top-level boundary.

GatewayError and AuthApiError are raised by the gateway client only; the
session manager and services convert them into Result values.
"""

from enum import Enum
from typing import Any, Optional


class HiPromptError(Exception):
    """Base class for all hiprompt errors."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ConfigurationError(HiPromptError):
    """Gateway URL or API key is missing."""

    def __init__(self, missing: list[str]):
        self.missing = list(missing)
        super().__init__(f"Missing gateway configuration: {', '.join(self.missing)}")


class AuthErrorKind(str, Enum):
    INVALID_CREDENTIALS = "invalid_credentials"
    ALREADY_EXISTS = "already_exists"
    RATE_LIMITED = "rate_limited"
    NETWORK = "network"
    PROVIDER = "provider"
    NOT_AUTHENTICATED = "not_authenticated"
    INVALID_INPUT = "invalid_input"


class AuthError(HiPromptError):
    """Recoverable authentication failure."""

    def __init__(self, kind: AuthErrorKind, message: str):
        super().__init__(message)
        self.kind = kind

    def __repr__(self) -> str:
        return f"AuthError(kind={self.kind.value!r}, message={self.message!r})"


class DataErrorKind(str, Enum):
    NOT_FOUND = "not_found"
    FORBIDDEN = "forbidden"
    INVALID = "invalid"
    CONFLICT = "conflict"
    NETWORK = "network"
    QUERY = "query"


class DataError(HiPromptError):
    """Recoverable query or mutation failure."""

    def __init__(self, kind: DataErrorKind, message: str):
        super().__init__(message)
        self.kind = kind

    def __repr__(self) -> str:
        return f"DataError(kind={self.kind.value!r}, message={self.message!r})"


class UnexpectedError(HiPromptError):
    """A fault that escaped every expected-failure path."""

    def __init__(self, original: BaseException):
        super().__init__(str(original) or type(original).__name__)
        self.original = original


class GatewayError(HiPromptError):
    """
    Error response (or transport failure) from the remote gateway.

    Attributes:
        status: HTTP status code (None for transport failures)
        code: Provider error code (PostgREST "PGRST116", GoTrue "invalid_grant", ...)
        details: Raw error payload when the provider sent one
    """

    def __init__(
        self,
        message: str,
        status: Optional[int] = None,
        code: Optional[str] = None,
        details: Optional[Any] = None,
    ):
        super().__init__(message)
        self.status = status
        self.code = code
        self.details = details

    @property
    def is_transport(self) -> bool:
        return self.status is None

    def __repr__(self) -> str:
        return f"{type(self).__name__}(status={self.status!r}, code={self.code!r}, message={self.message!r})"


class AuthApiError(GatewayError):
    """Error response from the gateway's auth endpoints."""


# PostgREST code for .single() returning zero rows
NO_ROWS_CODE = "PGRST116"
