"""
Prompt - the content item of hiprompt.

A prompt is a titled text with an optional description, an optional
category, free-text tags, a visibility flag and two social counters.

Key Fields:
- author_id: owner identity, fixed at insert time and never patched
- is_public: visibility (public prompts are readable by anyone, private
  prompts only by their author)
- tags: 0-10 unique strings, insertion order preserved
- likes_count: denormalized count of prompt_likes rows (approximate)
- views_count: best-effort view counter
"""

from datetime import datetime
from enum import Enum
from typing import Any, Iterable, Iterator, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ..core import RowModel, utcnow

MAX_TAGS = 10


def normalize_tags(tags: Optional[Iterable[str]]) -> list[str]:
    """
    Trim tags, drop blanks and duplicates (first occurrence wins), keep at
    most MAX_TAGS entries.
    """
    result: list[str] = []
    for raw in tags or []:
        tag = raw.strip()
        if not tag or tag in result:
            continue
        if len(result) >= MAX_TAGS:
            break
        result.append(tag)
    return result


class PendingTags:
    """
    Tag list being edited for a new prompt.

    add() refuses blanks, duplicates and anything past the tenth tag.
    """

    def __init__(self, tags: Optional[Iterable[str]] = None):
        self._tags: list[str] = normalize_tags(tags)

    def add(self, tag: str) -> bool:
        """Add a tag; returns False when it was rejected."""
        tag = tag.strip()
        if not tag or tag in self._tags or len(self._tags) >= MAX_TAGS:
            return False
        self._tags.append(tag)
        return True

    def remove(self, tag: str) -> bool:
        tag = tag.strip()
        if tag not in self._tags:
            return False
        self._tags.remove(tag)
        return True

    def as_list(self) -> list[str]:
        return list(self._tags)

    @property
    def is_full(self) -> bool:
        return len(self._tags) >= MAX_TAGS

    def __len__(self) -> int:
        return len(self._tags)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._tags))

    def __contains__(self, tag: object) -> bool:
        return tag in self._tags

    def __repr__(self) -> str:
        return f"PendingTags({self._tags!r})"


class Visibility(str, Enum):
    PUBLIC = "public"
    PRIVATE = "private"

    @classmethod
    def from_flag(cls, is_public: bool) -> "Visibility":
        return cls.PUBLIC if is_public else cls.PRIVATE


class Prompt(RowModel):
    """A row of the prompts table."""

    title: str = Field(..., description="Prompt title")
    description: Optional[str] = Field(default=None, description="Short summary")
    content: str = Field(..., description="Prompt body text")
    category_id: Optional[str] = Field(default=None, description="categories.id reference")
    category_name: Optional[str] = Field(
        default=None,
        description="Embedded categories.name (select with categories(name))",
    )
    author_id: str = Field(..., description="Owner identity id (immutable)")
    author_name: Optional[str] = Field(
        default=None,
        description="Embedded author profile name (select with profiles:author_id(full_name, username))",
    )
    is_public: bool = Field(default=True, description="Visible to everyone when true")
    tags: list[str] = Field(default_factory=list, description="Free-text tags")
    likes_count: int = Field(default=0, description="Denormalized like counter")
    views_count: int = Field(default=0, description="Best-effort view counter")
    updated_at: datetime = Field(default_factory=utcnow, description="Last update timestamp")

    @model_validator(mode="before")
    @classmethod
    def _flatten_category(cls, data: Any) -> Any:
        if isinstance(data, dict):
            embedded = data.get("categories")
            if isinstance(embedded, dict) and not data.get("category_name"):
                data = {**data, "category_name": embedded.get("name")}
        return data

    @model_validator(mode="before")
    @classmethod
    def _flatten_author(cls, data: Any) -> Any:
        if isinstance(data, dict):
            embedded = data.get("profiles")
            if isinstance(embedded, dict) and not data.get("author_name"):
                name = embedded.get("full_name") or embedded.get("username")
                data = {**data, "author_name": name}
        return data

    @field_validator("tags", mode="before")
    @classmethod
    def _normalize_tags(cls, value: Any) -> list[str]:
        return normalize_tags(value)

    @field_validator("likes_count", "views_count", mode="before")
    @classmethod
    def _null_counter(cls, value: Any) -> int:
        return 0 if value is None else value

    @property
    def visibility(self) -> Visibility:
        return Visibility.from_flag(self.is_public)


class PromptDraft(BaseModel):
    """Fields a user fills in to create a prompt."""

    title: str
    content: str
    description: Optional[str] = None
    category_id: Optional[str] = None
    is_public: bool = True
    tags: list[str] = Field(default_factory=list)

    @field_validator("tags", mode="before")
    @classmethod
    def _normalize_tags(cls, value: Any) -> list[str]:
        if isinstance(value, PendingTags):
            return value.as_list()
        return normalize_tags(value)

    def missing_fields(self) -> list[str]:
        missing = []
        if not self.title.strip():
            missing.append("title")
        if not self.content.strip():
            missing.append("content")
        return missing

    def to_row(self, author_id: str) -> dict[str, Any]:
        """Insert payload for the prompts table."""
        description = (self.description or "").strip()
        return {
            "title": self.title.strip(),
            "description": description or None,
            "content": self.content.strip(),
            "category_id": self.category_id or None,
            "author_id": author_id,
            "is_public": self.is_public,
            "tags": self.tags or None,
        }


class PromptPatch(BaseModel):
    """
    Partial update of a prompt owned by the caller.

    There is no author_id field: ownership cannot be transferred.
    """

    model_config = ConfigDict(extra="forbid")

    title: Optional[str] = None
    description: Optional[str] = None
    content: Optional[str] = None
    category_id: Optional[str] = None
    is_public: Optional[bool] = None
    tags: Optional[list[str]] = None

    @field_validator("tags", mode="before")
    @classmethod
    def _normalize_tags(cls, value: Any) -> Optional[list[str]]:
        return None if value is None else normalize_tags(value)

    def to_row(self) -> dict[str, Any]:
        row = self.model_dump(exclude_unset=True)
        for key in ("title", "content"):
            if key in row and row[key] is not None:
                row[key] = row[key].strip()
        row["updated_at"] = utcnow().isoformat()
        return row
