"""
Profile - public profile row keyed by the auth user id.

Profiles are created by the store when a user signs up; a signed-in user
may have no profile row yet, which is not an error.
"""

from datetime import datetime
from typing import Iterable, Optional

from pydantic import BaseModel, Field

from ..core import RowModel, utcnow
from .prompt import Prompt


class Profile(RowModel):
    """A row of the profiles table (id == auth user id)."""

    username: Optional[str] = Field(default=None, description="Unique handle")
    full_name: Optional[str] = Field(default=None, description="Display name")
    avatar_url: Optional[str] = Field(default=None, description="Avatar image URL")
    updated_at: datetime = Field(default_factory=utcnow, description="Last update timestamp")


class ProfileStats(BaseModel):
    """Totals shown on the profile page."""

    total_prompts: int = 0
    public_prompts: int = 0
    private_prompts: int = 0
    total_likes: int = 0
    total_views: int = 0

    @classmethod
    def from_prompts(cls, prompts: Iterable[Prompt]) -> "ProfileStats":
        stats = cls()
        for prompt in prompts:
            stats.total_prompts += 1
            if prompt.is_public:
                stats.public_prompts += 1
            else:
                stats.private_prompts += 1
            stats.total_likes += prompt.likes_count
            stats.total_views += prompt.views_count
        return stats
