"""
hiprompt Authentication Module.

- SessionManager: current identity, sign-in/up/out, transition listeners
- rules: can_view / can_mutate / visible / require_identity, the client mirror of row-level security
- validation: sign-up form checks and provider error mapping
"""

from .rules import can_mutate, can_view, require_identity, visible
from .session_manager import SessionListener, SessionManager
from .validation import auth_error_from, registration_problems

__all__ = [
    "SessionListener",
    "SessionManager",
    "auth_error_from",
    "can_mutate",
    "can_view",
    "registration_problems",
    "require_identity",
    "visible",
]
