"""
Category and profile commands.

Usage:
    hiprompt categories
    hiprompt profile --tab private
"""

import click

from ...app import App
from ...models.entities import Visibility
from ...views import ProfileView
from .. import notify
from ..render import echo_categories, echo_profile, echo_prompt_list
from ..runner import require_signed_in, run_with_app


@click.command("categories")
@click.pass_context
def categories_command(ctx: click.Context):
    """List prompt categories."""

    async def _categories(app: App) -> int:
        result = await app.categories.list_categories()
        if result.is_error:
            notify.error("Failed to load categories")
            return 1
        if not result.value:
            click.echo("No categories yet")
        echo_categories(result.value)
        return 0

    run_with_app(ctx, _categories)


@click.command("profile")
@click.option(
    "--tab",
    type=click.Choice([v.value for v in Visibility]),
    default=Visibility.PUBLIC.value,
    help="Which of your prompts to list",
)
@click.pass_context
def profile_command(ctx: click.Context, tab: str):
    """Show your profile, totals and prompts."""

    async def _profile(app: App) -> int:
        if not require_signed_in(app):
            return 1

        view = ProfileView(app.sessions, app.prompts, app.profiles, on_notice=notify.show)
        view.tab = Visibility(tab)
        try:
            await view.load()
        finally:
            view.close()
        if view.notices:
            return 1

        echo_profile(view.profile, app.sessions.identity.email, view.stats)
        click.echo()
        click.secho(f"{tab.capitalize()} prompts", bold=True)
        echo_prompt_list(view.prompts, empty_message=f"No {tab} prompts yet")
        return 0

    run_with_app(ctx, _profile)


def register_commands(cli_group):
    """Register browse commands."""
    cli_group.add_command(categories_command)
    cli_group.add_command(profile_command)
