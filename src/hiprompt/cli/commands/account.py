"""
Account commands.

Usage:
    hiprompt login --email ada@example.com
    hiprompt register --email ada@example.com --name "Ada Lovelace"
    hiprompt logout
    hiprompt whoami [--refresh]
"""

import click
from loguru import logger

from ...app import App
from ...auth.validation import registration_problems
from ..nav import nav_actions
from .. import notify
from ..runner import run_with_app


@click.command("login")
@click.option("--email", "-e", prompt=True, help="Account email")
@click.option("--password", "-p", prompt=True, hide_input=True, help="Account password")
@click.pass_context
def login_command(ctx: click.Context, email: str, password: str):
    """Sign in and keep the session for later commands."""

    async def _login(app: App) -> int:
        if app.sessions.session.is_authenticated:
            click.echo(f"Already signed in as {app.sessions.identity.email}")
            return 0

        result = await app.sessions.sign_in(email, password)
        if result.is_error:
            notify.error(result.error.message)
            return 1

        notify.success(f"Signed in as {result.value.display_name}")
        return 0

    run_with_app(ctx, _login)


@click.command("register")
@click.option("--email", "-e", prompt=True, help="Account email")
@click.option("--name", "-n", "full_name", prompt="Full name", help="Display name")
@click.option("--password", "-p", prompt=True, hide_input=True, help="At least 6 characters")
@click.option("--confirm-password", prompt="Confirm password", hide_input=True, help="Repeat the password")
@click.pass_context
def signup_command(ctx: click.Context, email: str, full_name: str, password: str, confirm_password: str):
    """Create an account."""
    problems = registration_problems(email, password, confirm_password, full_name)
    if problems:
        for problem in problems:
            notify.error(problem)
        ctx.exit(1)

    async def _register(app: App) -> int:
        result = await app.sessions.sign_up(email, password, full_name)
        if result.is_error:
            notify.error(result.error.message)
            return 1

        if app.sessions.session.is_authenticated:
            notify.success(f"Welcome, {full_name.strip()}! You are signed in")
        else:
            notify.success("Account created. Check your email to confirm it, then run: hiprompt login")
        return 0

    run_with_app(ctx, _register)


@click.command("logout")
@click.pass_context
def logout_command(ctx: click.Context):
    """Sign out and forget the stored session."""

    async def _logout(app: App) -> int:
        was_signed_in = app.sessions.session.is_authenticated
        result = await app.sessions.sign_out()
        if result.is_error:
            notify.error(result.error.message)
            return 1

        if was_signed_in:
            notify.success("Signed out")
        else:
            click.echo("Not signed in")
        return 0

    run_with_app(ctx, _logout)


@click.command("whoami")
@click.option("--refresh", is_flag=True, help="Reload your account details from the server")
@click.pass_context
def whoami_command(ctx: click.Context, refresh: bool):
    """Show the current session and the actions available to it."""

    async def _whoami(app: App) -> int:
        if refresh and app.sessions.session.is_authenticated:
            result = await app.sessions.refresh_identity()
            if result.is_error:
                notify.error(result.error.message)
                return 1

        session = app.sessions.session
        logger.debug(f"Session state: {session.state.value}")
        if session.is_authenticated:
            click.echo(f"Signed in as {session.identity.display_name} <{session.identity.email}>")
        else:
            click.echo("Not signed in")

        click.echo()
        for action in nav_actions(session):
            click.echo(f"  {action.label:<10} {action.command}")
        return 0

    run_with_app(ctx, _whoami)


def register_commands(cli_group):
    """Register account commands."""
    cli_group.add_command(login_command)
    cli_group.add_command(signup_command)
    cli_group.add_command(logout_command)
    cli_group.add_command(whoami_command)
