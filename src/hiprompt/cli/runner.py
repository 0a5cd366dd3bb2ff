"""
Bridge from click commands to the async app.

Commands hand an async function taking the App to run_with_app(); it opens
the app (resolving the session first), runs the function and exits with
the code it returns. Tests put a gateway factory into the root context
object to run commands against a fake backend.
"""

import asyncio
from typing import Awaitable, Callable

import click

from ..app import App, GatewayFactory, open_app
from ..gateway.client import create_gateway
from . import notify


def gateway_factory(ctx: click.Context) -> GatewayFactory:
    obj = ctx.find_root().obj or {}
    return obj.get("gateway_factory", create_gateway)


def run_with_app(ctx: click.Context, work: Callable[[App], Awaitable[int]]) -> None:
    async def _run() -> int:
        async with open_app(gateway_factory(ctx)) as app:
            return await work(app)

    ctx.exit(asyncio.run(_run()))


def require_signed_in(app: App) -> bool:
    """Print the sign-in notice and return False for anonymous sessions."""
    identity = app.sessions.require_identity()
    if identity.is_error:
        notify.error(identity.error.message)
        click.echo("Sign in with: hiprompt login")
        return False
    return True
