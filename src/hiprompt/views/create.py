"""
CreatePromptView - the prompt authoring form.

Holds the category choices and the pending tag list; submit() validates
and inserts the prompt for the signed-in user.
"""

from typing import Optional

from ..auth.session_manager import SessionManager
from ..models.entities import MAX_TAGS, Category, PendingTags, Prompt, PromptDraft, find_category
from ..services.categories import CategoryService
from ..services.prompts import PromptService
from .base import NoticeHandler, View


class CreatePromptView(View):
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
        self.categories: list[Category] = []
        self.tags = PendingTags()
        self.created: Optional[Prompt] = None

    async def _load(self, generation: int) -> None:
        result = await self.category_service.list_categories()
        if not self.is_current(generation):
            return
        if result.is_ok:
            self.categories = result.value
        else:
            self.notify_error(result.error, "Failed to load categories")

    def add_tag(self, tag: str) -> bool:
        if self.tags.add(tag):
            return True
        if self.tags.is_full:
            self.notify("info", f"At most {MAX_TAGS} tags")
        return False

    def find_category(self, name_or_id: str) -> Optional[Category]:
        return find_category(self.categories, name_or_id)

    async def submit(
        self,
        title: str,
        content: str,
        description: Optional[str] = None,
        category_id: Optional[str] = None,
        is_public: bool = True,
    ) -> Optional[Prompt]:
        """Create the prompt; returns it, or None after notifying the failure."""
        draft = PromptDraft(
            title=title,
            content=content,
            description=description,
            category_id=category_id,
            is_public=is_public,
            tags=self.tags.as_list(),
        )
        if draft.missing_fields():
            self.notify("error", "Please fill in the title and content")
            return None

        result = await self.prompt_service.create(self.session, draft)
        if result.is_error:
            self.notify_error(result.error, "Create failed, please try again")
            return None

        self.created = result.value
        self.notify("success", "Prompt created")
        return self.created
