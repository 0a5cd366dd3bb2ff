"""
Input checks and provider error mapping for authentication.

registration_problems() mirrors the sign-up form rules (all fields filled,
password of at least six characters, confirmation matching).
auth_error_from() maps gateway failures onto AuthError kinds.
"""

from typing import Optional

from ..errors import AuthError, AuthErrorKind, GatewayError

MIN_PASSWORD_LENGTH = 6

_RATE_LIMIT_CODES = {"over_request_rate_limit", "over_email_send_rate_limit", "over_sms_send_rate_limit"}
_EXISTS_CODES = {"user_already_exists", "email_exists", "phone_exists"}
_CREDENTIAL_CODES = {"invalid_grant", "invalid_credentials"}


def registration_problems(
    email: str, password: str, confirm_password: Optional[str] = None, full_name: Optional[str] = None
) -> list[str]:
    """Unmet sign-up requirements, empty when the form may be submitted."""
    problems = []
    if not email.strip() or not password or (full_name is not None and not full_name.strip()):
        problems.append("All fields are required")
    if len(password) < MIN_PASSWORD_LENGTH:
        problems.append(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
    if confirm_password is not None and password != confirm_password:
        problems.append("Passwords do not match")
    return problems


def auth_error_from(error: GatewayError) -> AuthError:
    """Classify a gateway failure on an auth call."""
    text = (error.message or "").lower()
    code = (error.code or "").lower()

    if error.is_transport:
        return AuthError(AuthErrorKind.NETWORK, f"Could not reach the auth service: {error.message}")

    if error.status == 429 or code in _RATE_LIMIT_CODES or "rate limit" in text:
        return AuthError(AuthErrorKind.RATE_LIMITED, "Too many attempts, please wait and try again")

    if code in _EXISTS_CODES or "already registered" in text or "already exists" in text:
        return AuthError(AuthErrorKind.ALREADY_EXISTS, "An account with this email already exists")

    if code in _CREDENTIAL_CODES or "invalid login credentials" in text:
        return AuthError(AuthErrorKind.INVALID_CREDENTIALS, "Invalid email or password")

    return AuthError(AuthErrorKind.PROVIDER, error.message or "Authentication failed")
