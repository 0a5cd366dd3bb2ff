"""
hiprompt Views

Page view-models driven by explicit inputs:
- DiscoverView: public listing (category, search)
- PromptDetailView: one prompt, like/delete/copy
- CreatePromptView: authoring form with pending tags
- ProfileView: profile, totals, visibility tabs (follows the session)
"""

from .base import Notice, NoticeHandler, View
from .create import CreatePromptView
from .detail import PromptDetailView
from .discover import DiscoverView
from .profile import ProfileView

__all__ = [
    "CreatePromptView",
    "DiscoverView",
    "Notice",
    "NoticeHandler",
    "ProfileView",
    "PromptDetailView",
    "View",
]
