"""
PromptDetailView - one prompt with like, copy and delete actions.

Loading fetches the prompt, then the like state for the signed-in user,
and starts a background view count (once per view). Signing in or out
loads the prompt again, since what may be viewed and the like state both
depend on the identity.
"""

from typing import Optional

from ..auth.rules import can_mutate
from ..auth.session_manager import SessionManager
from ..errors import DataErrorKind
from ..models.entities import Prompt
from ..services.likes import LikeService
from ..services.prompts import PromptService
from .base import NoticeHandler, View


class PromptDetailView(View):
    def __init__(
        self,
        sessions: SessionManager,
        prompts: PromptService,
        likes: LikeService,
        prompt_id: str,
        on_notice: Optional[NoticeHandler] = None,
    ):
        super().__init__(sessions, on_notice)
        self.prompt_service = prompts
        self.like_service = likes
        self.prompt_id = prompt_id
        self.prompt: Optional[Prompt] = None
        self.not_found = False
        self.deleted = False
        self.liked = False
        self.likes_count = 0
        self.view_recorded = False

    @property
    def can_mutate(self) -> bool:
        return self.prompt is not None and can_mutate(self.session, self.prompt)

    async def _load(self, generation: int) -> None:
        result = await self.prompt_service.get(self.session, self.prompt_id)
        if not self.is_current(generation):
            return

        if result.is_error:
            self.prompt = None
            self.not_found = result.error.kind == DataErrorKind.NOT_FOUND
            if self.not_found:
                self.notify("error", "Prompt not found")
            else:
                self.notify_error(result.error, "Failed to load prompt")
            return

        self.prompt = result.value
        self.not_found = False
        self.likes_count = self.prompt.likes_count
        if not self.view_recorded:
            self.view_recorded = True
            self.spawn(self.prompt_service.record_view(self.prompt_id))
        await self._refresh_like(generation)

    async def _refresh_like(self, generation: int) -> None:
        liked = await self.like_service.is_liked(self.session, self.prompt_id)
        if self.is_current(generation) and liked.is_ok:
            self.liked = liked.value

    async def toggle_like(self) -> bool:
        """Like or unlike; returns True when the toggle went through."""
        if self.prompt is None:
            return False

        result = await self.like_service.toggle_like(self.session, self.prompt)
        if self.closed:
            return result.is_ok

        if result.is_error:
            self.notify_error(result.error, "Operation failed, please try again later")
            return False

        self.liked = result.value.liked
        self.likes_count = result.value.likes_count
        self.notify("success", "Liked" if self.liked else "Like removed")
        return True

    async def delete(self) -> bool:
        if self.prompt is None:
            return False
        if not self.can_mutate:
            self.notify("error", "Only the author can delete this prompt")
            return False

        result = await self.prompt_service.delete(self.session, self.prompt)
        if result.is_error:
            self.notify_error(result.error, "Delete failed, please try again later")
            return False

        self.deleted = True
        self.notify("success", "Prompt deleted")
        return True

    def copy_text(self) -> Optional[str]:
        """Prompt body for the clipboard."""
        return self.prompt.content if self.prompt else None
