"""
PromptService - reads and writes of the prompts table.

Every listing is filtered through the authorization rules so the client
never shows a row the store's row-level security would hide, and every
mutation is refused locally when the caller is not the author.

Operations:
- list_public: public prompts, optional category and title/description search
- list_by_author: the signed-in user's prompts, optionally one visibility
- get: one prompt (not found when missing or not viewable)
- create / update / delete: author-only writes
- record_view: best-effort views_count increment
"""

from typing import Iterable, Optional, Union

from loguru import logger

from ..auth.rules import can_mutate, can_view, require_identity, visible
from ..errors import AuthError, DataError, DataErrorKind, GatewayError
from ..gateway.base import Gateway
from ..gateway.query import Filter
from ..models.entities import Prompt, PromptDraft, PromptPatch, Visibility
from ..models.session import Session
from ..result import Result
from .common import data_error_from

# Prompt rows with the category name and the author profile embedded
PROMPT_COLUMNS = "*, categories(name), profiles:author_id(full_name, username)"


class PromptService:
    """Prompt queries and author-only mutations."""

    def __init__(self, gateway: Gateway):
        self.gateway = gateway
        self.table = "prompts"

    async def list_public(
        self,
        session: Session,
        category_id: Optional[str] = None,
        search: Optional[str] = None,
    ) -> Result[list[Prompt], DataError]:
        """
        Public prompts, newest first.

        Args:
            session: Current session (listing still passes through can_view)
            category_id: Only prompts in this category
            search: Case-insensitive substring of title or description
        """
        query = self.gateway.table(self.table).select(PROMPT_COLUMNS).eq("is_public", True)
        if category_id:
            query = query.eq("category_id", category_id)
        if search and search.strip():
            pattern = f"%{search.strip()}%"
            query = query.or_(Filter("title", "ilike", pattern), Filter("description", "ilike", pattern))
        query = query.order("created_at", desc=True)

        try:
            response = await query.execute()
        except GatewayError as e:
            logger.warning(f"Listing public prompts failed: {e!r}")
            return Result.fail(data_error_from(e, "load prompts"))

        prompts = [Prompt.model_validate(row) for row in response.data]
        return Result.ok(visible(session, prompts))

    @staticmethod
    def featured(prompts: Iterable[Prompt]) -> Optional[Prompt]:
        """The most liked prompt; the later one in the list wins ties."""
        best = None
        for prompt in prompts:
            if best is None or prompt.likes_count >= best.likes_count:
                best = prompt
        return best

    async def list_by_author(
        self, session: Session, visibility: Optional[Visibility] = None
    ) -> Result[list[Prompt], Union[AuthError, DataError]]:
        """The signed-in user's prompts, newest first."""
        identity = require_identity(session)
        if identity.is_error:
            return Result.fail(identity.error)

        query = self.gateway.table(self.table).select(PROMPT_COLUMNS).eq("author_id", identity.value.id)
        if visibility is not None:
            query = query.eq("is_public", visibility == Visibility.PUBLIC)
        query = query.order("created_at", desc=True)

        try:
            response = await query.execute()
        except GatewayError as e:
            logger.warning(f"Listing prompts of {identity.value.id} failed: {e!r}")
            return Result.fail(data_error_from(e, "load your prompts"))

        prompts = [Prompt.model_validate(row) for row in response.data]
        return Result.ok(visible(session, prompts))

    async def get(self, session: Session, prompt_id: str) -> Result[Prompt, DataError]:
        try:
            response = await (
                self.gateway.table(self.table)
                .select(PROMPT_COLUMNS)
                .eq("id", prompt_id)
                .maybe_single()
                .execute()
            )
        except GatewayError as e:
            logger.warning(f"Loading prompt {prompt_id} failed: {e!r}")
            return Result.fail(data_error_from(e, "load prompt"))

        if response.data is None:
            return Result.fail(DataError(DataErrorKind.NOT_FOUND, "Prompt not found"))

        prompt = Prompt.model_validate(response.data)
        if not can_view(session, prompt):
            logger.warning(f"Store returned prompt {prompt_id} the session may not view")
            return Result.fail(DataError(DataErrorKind.NOT_FOUND, "Prompt not found"))
        return Result.ok(prompt)

    async def create(
        self, session: Session, draft: PromptDraft
    ) -> Result[Prompt, Union[AuthError, DataError]]:
        identity = require_identity(session)
        if identity.is_error:
            return Result.fail(identity.error)

        if draft.missing_fields():
            return Result.fail(DataError(DataErrorKind.INVALID, "Title and content are required"))

        try:
            response = await (
                self.gateway.table(self.table)
                .insert(draft.to_row(identity.value.id))
                .select(PROMPT_COLUMNS)
                .single()
                .execute()
            )
        except GatewayError as e:
            logger.warning(f"Creating prompt failed: {e!r}")
            return Result.fail(data_error_from(e, "create prompt"))

        prompt = Prompt.model_validate(response.data)
        logger.info(f"Created prompt {prompt.id} ({prompt.visibility.value})")
        return Result.ok(prompt)

    async def update(
        self, session: Session, prompt: Prompt, patch: PromptPatch
    ) -> Result[Prompt, DataError]:
        """Apply a patch to a prompt the caller owns. author_id is never written."""
        if not can_mutate(session, prompt):
            return Result.fail(DataError(DataErrorKind.FORBIDDEN, "Only the author can edit this prompt"))

        for field in ("title", "content"):
            value = getattr(patch, field)
            if field in patch.model_fields_set and (value is None or not value.strip()):
                return Result.fail(DataError(DataErrorKind.INVALID, f"{field.capitalize()} cannot be empty"))

        try:
            response = await (
                self.gateway.table(self.table)
                .update(patch.to_row())
                .eq("id", prompt.id)
                .eq("author_id", prompt.author_id)
                .select(PROMPT_COLUMNS)
                .execute()
            )
        except GatewayError as e:
            logger.warning(f"Updating prompt {prompt.id} failed: {e!r}")
            return Result.fail(data_error_from(e, "update prompt"))

        if not response.data:
            return Result.fail(DataError(DataErrorKind.NOT_FOUND, "Prompt not found"))
        return Result.ok(Prompt.model_validate(response.data[0]))

    async def delete(self, session: Session, prompt: Prompt) -> Result[None, DataError]:
        if not can_mutate(session, prompt):
            return Result.fail(DataError(DataErrorKind.FORBIDDEN, "Only the author can delete this prompt"))

        try:
            response = await (
                self.gateway.table(self.table)
                .delete()
                .eq("id", prompt.id)
                .eq("author_id", prompt.author_id)
                .execute()
            )
        except GatewayError as e:
            logger.warning(f"Deleting prompt {prompt.id} failed: {e!r}")
            return Result.fail(data_error_from(e, "delete prompt"))

        if not response.data:
            return Result.fail(DataError(DataErrorKind.NOT_FOUND, "Prompt not found"))
        logger.info(f"Deleted prompt {prompt.id}")
        return Result.ok(None)

    async def record_view(self, prompt_id: str) -> Result[int, DataError]:
        """
        Increment views_count, best effort.

        Reads the current count right before writing. Concurrent viewers can
        still lose updates; failures are logged and returned, never raised.
        """
        try:
            current = await (
                self.gateway.table(self.table).select("views_count").eq("id", prompt_id).single().execute()
            )
            views = (current.data.get("views_count") or 0) + 1
            await self.gateway.table(self.table).update({"views_count": views}).eq("id", prompt_id).execute()
        except GatewayError as e:
            logger.debug(f"View count not recorded for {prompt_id}: {e!r}")
            return Result.fail(data_error_from(e, "record view"))
        return Result.ok(views)
