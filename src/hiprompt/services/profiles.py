"""ProfileService - the signed-in user's profile row and totals."""

from typing import Iterable, Optional, Union

from loguru import logger

from ..auth.rules import require_identity
from ..errors import AuthError, DataError, GatewayError
from ..gateway.base import Gateway
from ..models.entities import Profile, ProfileStats, Prompt
from ..models.session import Session
from ..result import Result
from .common import data_error_from


class ProfileService:
    def __init__(self, gateway: Gateway):
        self.gateway = gateway
        self.table = "profiles"

    async def get_profile(self, session: Session) -> Result[Optional[Profile], Union[AuthError, DataError]]:
        """
        Profile of the signed-in user.

        A missing profile row is not an error: the value is None.
        """
        identity = require_identity(session)
        if identity.is_error:
            return Result.fail(identity.error)

        try:
            response = await (
                self.gateway.table(self.table).select("*").eq("id", identity.value.id).maybe_single().execute()
            )
        except GatewayError as e:
            logger.warning(f"Loading profile {identity.value.id} failed: {e!r}")
            return Result.fail(data_error_from(e, "load profile"))

        return Result.ok(Profile.model_validate(response.data) if response.data else None)

    @staticmethod
    def stats(prompts: Iterable[Prompt]) -> ProfileStats:
        return ProfileStats.from_prompts(prompts)
