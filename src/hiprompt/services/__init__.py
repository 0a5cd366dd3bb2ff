"""
hiprompt Services

Data operations over the gateway. Each returns a Result; gateway failures
are converted to DataError (or AuthError when a signed-in user is needed):
- PromptService: prompt listings, detail, author-only writes, view counter
- LikeService: like state and toggling with likes_count maintenance
- CategoryService: category listing
- ProfileService: profile row and totals
"""

from .categories import CategoryService
from .likes import LikeService
from .profiles import ProfileService
from .prompts import PROMPT_COLUMNS, PromptService

__all__ = ["CategoryService", "LikeService", "PROMPT_COLUMNS", "ProfileService", "PromptService"]
