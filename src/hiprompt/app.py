"""
Composition root.

One gateway, one SessionManager and the services built on them, for the
lifetime of one client run. The session is resolved before the app is
handed out, so callers never observe the unknown state.

Usage:
    async with open_app() as app:
        result = await app.prompts.list_public(app.sessions.session)
"""

from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import AsyncIterator, Callable

from .auth.session_manager import SessionManager
from .gateway.base import Gateway
from .gateway.client import create_gateway
from .services import CategoryService, LikeService, ProfileService, PromptService

GatewayFactory = Callable[[], Gateway]


@dataclass
class App:
    gateway: Gateway
    sessions: SessionManager
    prompts: PromptService
    likes: LikeService
    categories: CategoryService
    profiles: ProfileService

    @classmethod
    def from_gateway(cls, gateway: Gateway) -> "App":
        return cls(
            gateway=gateway,
            sessions=SessionManager(gateway),
            prompts=PromptService(gateway),
            likes=LikeService(gateway),
            categories=CategoryService(gateway),
            profiles=ProfileService(gateway),
        )


@asynccontextmanager
async def open_app(gateway_factory: GatewayFactory = create_gateway) -> AsyncIterator[App]:
    """
    Build the app and resolve the session.

    Raises:
        ConfigurationError: from the default factory when credentials are missing
    """
    gateway = gateway_factory()
    app = App.from_gateway(gateway)
    try:
        await app.sessions.initialize()
        yield app
    finally:
        await app.sessions.close()
        await gateway.aclose()
