"""
SupabaseGateway - the single configured client to the remote store.

Composes the GoTrue auth client and the PostgREST executor over one shared
httpx.AsyncClient. Table calls carry the signed-in user's JWT, so the
store's row-level security is the authoritative access check. A token
about to expire is refreshed before the call that would carry it.

Usage:
    async with create_gateway() as gateway:
        session = await gateway.auth.get_session()
        rows = (await gateway.table("categories").select().order("name").execute()).data
"""

from typing import Optional

import httpx
from loguru import logger

from ..errors import ConfigurationError
from ..settings import SupabaseSettings, settings
from .auth import AuthClient
from .query import PostgrestExecutor, QueryBuilder
from .storage import FileSessionStorage, SessionStorage


class SupabaseGateway:
    """Auth + table access for one Supabase project."""

    def __init__(
        self,
        url: str,
        api_key: str,
        *,
        storage: Optional[SessionStorage] = None,
        timeout: float = 30.0,
        refresh_margin: int = 60,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.url = url.rstrip("/")
        self.api_key = api_key
        self._http = httpx.AsyncClient(timeout=timeout, transport=transport)
        self.auth = AuthClient(
            self._http,
            f"{self.url}/auth/v1",
            api_key,
            storage=storage,
            refresh_margin=refresh_margin,
        )
        self._executor = PostgrestExecutor(
            self._http,
            f"{self.url}/rest/v1",
            api_key,
            token_provider=self._access_token,
        )

    async def _access_token(self) -> Optional[str]:
        """Token for the next table call; an expiring session is refreshed first."""
        session = await self.auth.get_session()
        return session.access_token if session else None

    def table(self, name: str) -> QueryBuilder:
        return QueryBuilder(name, self._executor)

    async def aclose(self) -> None:
        await self._http.aclose()

    async def __aenter__(self) -> "SupabaseGateway":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()


def create_gateway(
    config: Optional[SupabaseSettings] = None,
    *,
    storage: Optional[SessionStorage] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> SupabaseGateway:
    """
    Build the gateway from settings.

    Raises:
        ConfigurationError: URL or anon key missing (or left as placeholder)
    """
    config = config or settings.supabase
    if not config.is_configured():
        raise ConfigurationError(config.missing_fields())

    logger.debug(f"Creating gateway for {config.url}")
    return SupabaseGateway(
        config.url,
        config.anon_key,
        storage=storage or FileSessionStorage(config.session_file),
        timeout=config.timeout,
        refresh_margin=config.refresh_margin,
        transport=transport,
    )
