"""Data models for hiprompt: session snapshots and remote row types."""

from .entities import (
    Category,
    LikeEdge,
    LikeToggle,
    PendingTags,
    Profile,
    ProfileStats,
    Prompt,
    PromptDraft,
    PromptPatch,
    Visibility,
)
from .session import AuthEvent, AuthSession, Identity, Session, SessionState

__all__ = [
    "AuthEvent",
    "AuthSession",
    "Category",
    "Identity",
    "LikeEdge",
    "LikeToggle",
    "PendingTags",
    "Profile",
    "ProfileStats",
    "Prompt",
    "PromptDraft",
    "PromptPatch",
    "Session",
    "SessionState",
    "Visibility",
]
