"""
RowModel - Base model for rows read from the remote store.

Every table the client consumes (profiles, categories, prompts,
prompt_likes) has a string id and a created_at timestamp assigned by the
store. Unknown columns (embedded relations, future columns) are ignored.
"""

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class RowModel(BaseModel):
    """
    Base model for remote rows.

    Note: ids and timestamps are owned by the store. Values generated here
    only matter for rows built locally before they are inserted.
    """

    model_config = ConfigDict(extra="ignore")

    id: str = Field(..., description="Row identifier (UUID assigned by the store)")
    created_at: datetime = Field(
        default_factory=utcnow, description="Row creation timestamp"
    )
