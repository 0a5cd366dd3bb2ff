"""Category - grouping for prompts. Lifecycle is owned by the remote store."""

from typing import Iterable, Optional

from pydantic import Field

from ..core import RowModel


class Category(RowModel):
    """A row of the categories table."""

    name: str = Field(..., description="Category name (unique, used for ordering)")
    description: Optional[str] = Field(default=None, description="Category description")


def find_category(categories: Iterable[Category], name_or_id: str) -> Optional[Category]:
    """Match a category by id, or by name ignoring case."""
    wanted = name_or_id.strip().lower()
    for category in categories:
        if category.id == name_or_id or category.name.lower() == wanted:
            return category
    return None
