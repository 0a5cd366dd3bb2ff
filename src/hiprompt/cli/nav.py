"""Navigation actions offered for the current session."""

from dataclasses import dataclass

from ..models.session import Session


@dataclass(frozen=True)
class NavAction:
    label: str
    command: str


DISCOVER = NavAction("Discover", "hiprompt prompts list")
CREATE = NavAction("Create", "hiprompt prompts create")
PROFILE = NavAction("Profile", "hiprompt profile")
SIGN_OUT = NavAction("Sign Out", "hiprompt logout")
SIGN_IN = NavAction("Sign In", "hiprompt login")
JOIN = NavAction("Join Now", "hiprompt register")


def nav_actions(session: Session) -> list[NavAction]:
    """Discover always; create/profile/sign-out when signed in, sign-in/join otherwise."""
    if session.is_authenticated:
        return [DISCOVER, CREATE, PROFILE, SIGN_OUT]
    return [DISCOVER, SIGN_IN, JOIN]
