"""LikeEdge - one identity's like of one prompt (unique per pair)."""

from pydantic import BaseModel, Field

from ..core import RowModel


class LikeEdge(RowModel):
    """A row of the prompt_likes table."""

    prompt_id: str = Field(..., description="prompts.id")
    user_id: str = Field(..., description="Identity id of the liker")


class LikeToggle(BaseModel):
    """Outcome of a like toggle: the new edge state and the counter written."""

    liked: bool
    likes_count: int
