"""
ProfileView - the signed-in user's profile, totals and prompt tabs.

Inputs: the signed-in identity (followed through the session manager) and
the visibility tab. Totals are computed over all of the user's prompts;
the listing shows the selected tab only.
"""

import asyncio
from typing import Optional

from ..auth.session_manager import SessionManager
from ..models.entities import Profile, ProfileStats, Prompt, Visibility
from ..models.session import Session
from ..services.profiles import ProfileService
from ..services.prompts import PromptService
from .base import NoticeHandler, View


class ProfileView(View):
    def __init__(
        self,
        sessions: SessionManager,
        prompts: PromptService,
        profiles: ProfileService,
        on_notice: Optional[NoticeHandler] = None,
    ):
        super().__init__(sessions, on_notice)
        self.prompt_service = prompts
        self.profile_service = profiles
        self.tab = Visibility.PUBLIC
        self.profile: Optional[Profile] = None
        self.all_prompts: list[Prompt] = []
        self.stats = ProfileStats()
        self._user_id: Optional[str] = sessions.session.user_id
        self.follow_session()

    @property
    def prompts(self) -> list[Prompt]:
        """Prompts of the selected tab."""
        return [p for p in self.all_prompts if p.visibility == self.tab]

    async def set_tab(self, tab: Visibility) -> bool:
        if tab == self.tab:
            return False
        self.tab = tab
        await self.load()
        return True

    async def on_identity_change(self, session: Session) -> None:
        if session.user_id == self._user_id:
            return
        self._user_id = session.user_id
        await self.load()

    async def _load(self, generation: int) -> None:
        if not self.session.is_authenticated:
            self.profile = None
            self.all_prompts = []
            self.stats = ProfileStats()
            return

        profile_result, prompts_result = await asyncio.gather(
            self.profile_service.get_profile(self.session),
            self.prompt_service.list_by_author(self.session),
        )
        if not self.is_current(generation):
            return

        if profile_result.is_ok:
            self.profile = profile_result.value
        else:
            self.notify_error(profile_result.error, "Failed to load profile")

        if prompts_result.is_ok:
            self.all_prompts = prompts_result.value
            self.stats = self.profile_service.stats(self.all_prompts)
        else:
            self.notify_error(prompts_result.error, "Failed to fetch prompts")
