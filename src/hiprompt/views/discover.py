"""
DiscoverView - the public prompt listing.

Inputs: category filter, search text. Changing either reloads the listing.
Categories are loaded once, with the first listing, unless load_categories()
fetched them earlier.
"""

import asyncio
from typing import Optional

from ..auth.session_manager import SessionManager
from ..models.entities import Category, Prompt, find_category
from ..services.categories import CategoryService
from ..services.prompts import PromptService
from .base import NoticeHandler, View


class DiscoverView(View):
    def __init__(
        self,
        sessions: SessionManager,
        prompts: PromptService,
        categories: CategoryService,
        on_notice: Optional[NoticeHandler] = None,
    ):
        super().__init__(sessions, on_notice)
        self.prompt_service = prompts
        self.category_service = categories
        self.category_id: Optional[str] = None
        self.search: str = ""
        self.prompts: list[Prompt] = []
        self.categories: list[Category] = []
        self.featured: Optional[Prompt] = None

    async def set_filters(self, category_id: Optional[str] = None, search: Optional[str] = None) -> bool:
        """Update the filters; reloads and returns True when anything changed."""
        category_id = category_id or None
        search = (search or "").strip()
        if category_id == self.category_id and search == self.search:
            return False
        self.category_id = category_id
        self.search = search
        await self.load()
        return True

    async def _load(self, generation: int) -> None:
        listing = self.prompt_service.list_public(
            self.session, category_id=self.category_id, search=self.search or None
        )
        if self.categories:
            prompts_result = await listing
            categories_result = None
        else:
            prompts_result, categories_result = await asyncio.gather(
                listing, self.category_service.list_categories()
            )

        if not self.is_current(generation):
            return

        if prompts_result.is_ok:
            self.prompts = prompts_result.value
            self.featured = self.prompt_service.featured(self.prompts)
        else:
            self.notify_error(prompts_result.error, "Failed to load prompts")

        if categories_result is not None:
            if categories_result.is_ok:
                self.categories = categories_result.value
            else:
                self.notify_error(categories_result.error, "Failed to load categories")

    def category_name(self, category_id: Optional[str]) -> Optional[str]:
        for category in self.categories:
            if category.id == category_id:
                return category.name
        return None

    async def load_categories(self) -> bool:
        """Fetch the categories ahead of the first listing, e.g. to resolve a filter by name."""
        result = await self.category_service.list_categories()
        if result.is_error:
            self.notify_error(result.error, "Failed to load categories")
            return False
        self.categories = result.value
        return True

    def find_category(self, name_or_id: str) -> Optional[Category]:
        return find_category(self.categories, name_or_id)
