"""Plain-text rendering of prompts, categories and profiles."""

from datetime import datetime
from typing import Iterable, Optional

import click

from ..models.entities import Category, Profile, ProfileStats, Prompt


def format_date(value: datetime) -> str:
    return value.strftime("%b %d, %Y")


def prompt_line(prompt: Prompt) -> str:
    category = prompt.category_name or "Uncategorized"
    lock = "" if prompt.is_public else " [private]"
    return (
        f"{prompt.id}  {prompt.title}{lock}  ({category})  "
        f"♥ {prompt.likes_count}  👁 {prompt.views_count}  {format_date(prompt.created_at)}"
    )


def echo_prompt_list(prompts: list[Prompt], empty_message: str = "No prompts found") -> None:
    if not prompts:
        click.echo(empty_message)
        return
    for prompt in prompts:
        click.echo(prompt_line(prompt))
        if prompt.tags:
            shown = ", ".join(f"#{tag}" for tag in prompt.tags[:3])
            more = f" +{len(prompt.tags) - 3} more" if len(prompt.tags) > 3 else ""
            click.echo(f"    {shown}{more}")


def echo_prompt_detail(prompt: Prompt, likes_count: int, liked: bool, can_mutate: bool) -> None:
    click.secho(prompt.title, bold=True)
    click.echo(f"by {prompt.author_name or 'Anonymous author'}")
    click.echo(
        f"{prompt.category_name or 'Uncategorized'} · {format_date(prompt.created_at)} · "
        f"{prompt.views_count} views · {prompt.visibility.value}"
    )
    if prompt.description:
        click.echo()
        click.echo(prompt.description)
    click.echo()
    click.echo(prompt.content)
    click.echo()
    if prompt.tags:
        click.echo(" ".join(f"#{tag}" for tag in prompt.tags))
    heart = "♥" if liked else "♡"
    click.echo(f"{heart} {likes_count} likes")
    if can_mutate:
        click.echo(f"You own this prompt: hiprompt prompts delete {prompt.id}")


def echo_categories(categories: Iterable[Category]) -> None:
    for category in categories:
        suffix = f" - {category.description}" if category.description else ""
        click.echo(f"{category.id}  {category.name}{suffix}")


def echo_profile(profile: Optional[Profile], email: Optional[str], stats: ProfileStats) -> None:
    name = (profile.full_name or profile.username) if profile else None
    click.secho(name or email or "Anonymous author", bold=True)
    if email:
        click.echo(email)
    if profile:
        click.echo(f"Joined {format_date(profile.created_at)}")
    click.echo(
        f"{stats.total_prompts} prompts ({stats.public_prompts} public, {stats.private_prompts} private) · "
        f"{stats.total_likes} likes · {stats.total_views} views"
    )
