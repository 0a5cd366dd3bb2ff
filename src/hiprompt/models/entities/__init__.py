"""
hiprompt Entity Models

Row types of the remote store, as consumed by the client:
- Prompt: the content item (title, body, tags, visibility, counters)
- Category: prompt grouping
- Profile: public user profile keyed by auth user id
- LikeEdge: one identity's like of one prompt

The store owns ids, timestamps and row-level security. These models only
validate what comes back and shape what goes out.
"""

from .category import Category, find_category
from .like import LikeEdge, LikeToggle
from .profile import Profile, ProfileStats
from .prompt import (
    MAX_TAGS,
    PendingTags,
    Prompt,
    PromptDraft,
    PromptPatch,
    Visibility,
    normalize_tags,
)

__all__ = [
    "Category",
    "LikeEdge",
    "LikeToggle",
    "MAX_TAGS",
    "PendingTags",
    "Profile",
    "ProfileStats",
    "Prompt",
    "PromptDraft",
    "PromptPatch",
    "Visibility",
    "find_category",
    "normalize_tags",
]
