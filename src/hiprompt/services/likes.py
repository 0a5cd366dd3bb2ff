"""
LikeService - like toggling and the likes_count counter.

Toggle protocol (two independent calls, no transaction):
1. Look up the prompt_likes row for (prompt, user)
2. Absent: insert it. Present: delete it.
3. Rewrite prompts.likes_count

Counter strategies (LIKES__COUNTER_STRATEGY):
- increment: read likes_count fresh and write it +1 / -1 (floored at 0)
- recount: write the exact number of prompt_likes rows for the prompt

Neither strategy is atomic. Two clients toggling at once can race, so
likes_count is a display value that may drift from the true edge count;
recount corrects the drift on the next toggle, increment preserves it.
A failed counter write after a successful edge change is logged and the
toggle still reports success with an estimated count.
"""

from typing import Optional, Union

from loguru import logger

from ..auth.rules import require_identity
from ..errors import AuthError, DataError, GatewayError
from ..gateway.base import Gateway
from ..models.entities import LikeEdge, LikeToggle, Prompt
from ..models.session import Session
from ..result import Result
from ..settings import settings
from .common import data_error_from


class LikeService:
    """Reads and toggles likes for the signed-in identity."""

    def __init__(self, gateway: Gateway, counter_strategy: Optional[str] = None):
        self.gateway = gateway
        self.table = "prompt_likes"
        self.counter_strategy = counter_strategy or settings.likes.counter_strategy

    async def _find_edge(self, prompt_id: str, user_id: str) -> Optional[LikeEdge]:
        response = await (
            self.gateway.table(self.table)
            .select("*")
            .eq("prompt_id", prompt_id)
            .eq("user_id", user_id)
            .maybe_single()
            .execute()
        )
        return LikeEdge.model_validate(response.data) if response.data else None

    async def is_liked(self, session: Session, prompt_id: str) -> Result[bool, DataError]:
        """Whether the session's identity likes the prompt (False when anonymous)."""
        if not session.is_authenticated:
            return Result.ok(False)
        try:
            edge = await self._find_edge(prompt_id, session.identity.id)
        except GatewayError as e:
            return Result.fail(data_error_from(e, "check like status"))
        return Result.ok(edge is not None)

    async def toggle_like(
        self, session: Session, prompt: Prompt
    ) -> Result[LikeToggle, Union[AuthError, DataError]]:
        identity = require_identity(session)
        if identity.is_error:
            return Result.fail(identity.error)
        user_id = identity.value.id

        try:
            edge = await self._find_edge(prompt.id, user_id)
            if edge is None:
                await self.gateway.table(self.table).insert(
                    {"prompt_id": prompt.id, "user_id": user_id}
                ).execute()
                liked, delta = True, 1
            else:
                await (
                    self.gateway.table(self.table)
                    .delete()
                    .eq("prompt_id", prompt.id)
                    .eq("user_id", user_id)
                    .execute()
                )
                liked, delta = False, -1
        except GatewayError as e:
            logger.warning(f"Like toggle failed for prompt {prompt.id}: {e!r}")
            return Result.fail(data_error_from(e, "update like"))

        try:
            likes_count = await self._write_counter(prompt.id, delta)
        except GatewayError as e:
            likes_count = max(prompt.likes_count + delta, 0)
            logger.warning(
                f"Like {'added' if liked else 'removed'} on prompt {prompt.id} but likes_count "
                f"was not updated: {e!r}"
            )

        logger.debug(f"Prompt {prompt.id} liked={liked} likes_count={likes_count}")
        return Result.ok(LikeToggle(liked=liked, likes_count=likes_count))

    async def _write_counter(self, prompt_id: str, delta: int) -> int:
        if self.counter_strategy == "recount":
            response = await (
                self.gateway.table(self.table).select("id").eq("prompt_id", prompt_id).count().execute()
            )
            new_count = response.count if response.count is not None else len(response.data)
        else:
            current = await (
                self.gateway.table("prompts").select("likes_count").eq("id", prompt_id).single().execute()
            )
            new_count = max((current.data.get("likes_count") or 0) + delta, 0)

        await self.gateway.table("prompts").update({"likes_count": new_count}).eq("id", prompt_id).execute()
        return new_count
