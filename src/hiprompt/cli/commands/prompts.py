"""
Prompt commands.

Usage:
    hiprompt prompts list --category Writing --search email
    hiprompt prompts show <id> [--copy]
    hiprompt prompts create --title "..." --content-file prompt.txt --tag ai --tag writing
    hiprompt prompts like <id>
    hiprompt prompts delete <id> --yes
    hiprompt prompts mine --visibility private
"""

from pathlib import Path
from typing import Optional

import click

from ...app import App
from ...models.entities import Visibility
from ...views import CreatePromptView, DiscoverView, PromptDetailView
from .. import notify
from ..render import echo_prompt_detail, echo_prompt_list, prompt_line
from ..runner import require_signed_in, run_with_app


@click.command("list")
@click.option("--category", "-c", help="Category name or id")
@click.option("--search", "-s", help="Match title or description")
@click.pass_context
def list_command(ctx: click.Context, category: Optional[str], search: Optional[str]):
    """Discover public prompts, newest first."""

    async def _list(app: App) -> int:
        view = DiscoverView(app.sessions, app.prompts, app.categories, on_notice=notify.show)
        try:
            # Filters are in place before the one listing query
            if category:
                if not await view.load_categories():
                    return 1
                match = view.find_category(category)
                if match is None:
                    notify.error(f"Unknown category: {category}")
                    return 1
                view.category_id = match.id
            view.search = (search or "").strip()
            await view.load()
        finally:
            view.close()

        if view.notices:
            return 1

        if view.category_id:
            click.secho(f"Category: {view.category_name(view.category_id)}", bold=True)
        if view.featured is not None and view.featured.likes_count > 0:
            click.secho("Featured", bold=True)
            click.echo(prompt_line(view.featured))
            click.echo()
        echo_prompt_list(view.prompts)
        return 0

    run_with_app(ctx, _list)


@click.command("show")
@click.argument("prompt_id")
@click.option("--copy", "copy_only", is_flag=True, help="Print only the prompt text")
@click.pass_context
def show_command(ctx: click.Context, prompt_id: str, copy_only: bool):
    """Show one prompt (counts a view)."""

    async def _show(app: App) -> int:
        view = PromptDetailView(app.sessions, app.prompts, app.likes, prompt_id, on_notice=notify.show)
        try:
            await view.load()
            await view.settle()
        finally:
            view.close()

        if view.prompt is None:
            return 1

        if copy_only:
            click.echo(view.copy_text())
        else:
            echo_prompt_detail(view.prompt, view.likes_count, view.liked, view.can_mutate)
        return 0

    run_with_app(ctx, _show)


@click.command("create")
@click.option("--title", "-t", prompt=True, help="Prompt title")
@click.option("--content", help="Prompt text")
@click.option(
    "--content-file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Read the prompt text from a file",
)
@click.option("--description", "-d", help="Short description")
@click.option("--category", "-c", help="Category name or id")
@click.option("--tag", "tags", multiple=True, help="Tag (repeatable, at most 10)")
@click.option("--private", is_flag=True, help="Only you can see it")
@click.pass_context
def create_command(
    ctx: click.Context,
    title: str,
    content: Optional[str],
    content_file: Optional[Path],
    description: Optional[str],
    category: Optional[str],
    tags: tuple[str, ...],
    private: bool,
):
    """Create a prompt."""
    if content_file is not None:
        content = content_file.read_text()
    if content is None:
        content = click.prompt("Content")

    async def _create(app: App) -> int:
        if not require_signed_in(app):
            return 1

        view = CreatePromptView(app.sessions, app.prompts, app.categories, on_notice=notify.show)
        try:
            await view.load()
            category_id = None
            if category:
                match = view.find_category(category)
                if match is None:
                    notify.error(f"Unknown category: {category}")
                    return 1
                category_id = match.id

            for tag in tags:
                view.add_tag(tag)

            created = await view.submit(
                title, content, description=description, category_id=category_id, is_public=not private
            )
        finally:
            view.close()

        if created is None:
            return 1
        click.echo(prompt_line(created))
        return 0

    run_with_app(ctx, _create)


@click.command("like")
@click.argument("prompt_id")
@click.pass_context
def like_command(ctx: click.Context, prompt_id: str):
    """Like a prompt, or remove your like."""

    async def _like(app: App) -> int:
        if not require_signed_in(app):
            return 1

        view = PromptDetailView(app.sessions, app.prompts, app.likes, prompt_id, on_notice=notify.show)
        try:
            await view.load()
            if view.prompt is None:
                return 1
            toggled = await view.toggle_like()
            await view.settle()
        finally:
            view.close()

        if not toggled:
            return 1
        click.echo(f"{view.likes_count} likes")
        return 0

    run_with_app(ctx, _like)


@click.command("delete")
@click.argument("prompt_id")
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_command(ctx: click.Context, prompt_id: str, yes: bool):
    """Delete one of your prompts."""

    async def _delete(app: App) -> int:
        if not require_signed_in(app):
            return 1

        view = PromptDetailView(app.sessions, app.prompts, app.likes, prompt_id, on_notice=notify.show)
        try:
            await view.load()
            if view.prompt is None:
                return 1
            if view.can_mutate and not yes and not click.confirm(f"Delete '{view.prompt.title}'?"):
                click.echo("Cancelled")
                return 0
            deleted = await view.delete()
            await view.settle()
        finally:
            view.close()

        return 0 if deleted else 1

    run_with_app(ctx, _delete)


@click.command("mine")
@click.option("--visibility", type=click.Choice([v.value for v in Visibility]), help="Only public or private")
@click.pass_context
def mine_command(ctx: click.Context, visibility: Optional[str]):
    """List your own prompts."""

    async def _mine(app: App) -> int:
        if not require_signed_in(app):
            return 1

        result = await app.prompts.list_by_author(
            app.sessions.session, visibility=Visibility(visibility) if visibility else None
        )
        if result.is_error:
            notify.error("Failed to fetch prompts")
            return 1

        echo_prompt_list(result.value, empty_message="You have not created any prompts yet")
        return 0

    run_with_app(ctx, _mine)


def register_commands(prompts_group):
    """Register prompt commands."""
    prompts_group.add_command(list_command)
    prompts_group.add_command(show_command)
    prompts_group.add_command(create_command)
    prompts_group.add_command(like_command)
    prompts_group.add_command(delete_command)
    prompts_group.add_command(mine_command)
