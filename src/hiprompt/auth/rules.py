"""
Authorization rules for prompts.

Client-side mirror of the store's row-level security, used to decide what
to list and which actions to offer:
- a public prompt is visible to everyone
- a private prompt is visible only to its author
- only the author may edit or delete a prompt
- writes need a signed-in identity

Every surface that lists or renders prompts goes through these functions.
"""

from typing import Iterable

from ..errors import AuthError, AuthErrorKind
from ..models.entities import Prompt
from ..models.session import Identity, Session
from ..result import Result


def _is_owner(session: Session, item: Prompt) -> bool:
    return session.identity is not None and session.identity.id == item.author_id


def can_view(session: Session, item: Prompt) -> bool:
    return item.is_public or _is_owner(session, item)


def can_mutate(session: Session, item: Prompt) -> bool:
    return _is_owner(session, item)


def visible(session: Session, items: Iterable[Prompt]) -> list[Prompt]:
    """Items the session may see, order preserved."""
    return [item for item in items if can_view(session, item)]


def require_identity(session: Session) -> Result[Identity, AuthError]:
    """The signed-in identity, or a not_authenticated error."""
    if session.is_authenticated:
        return Result.ok(session.identity)
    return Result.fail(AuthError(AuthErrorKind.NOT_AUTHENTICATED, "Please sign in first"))
