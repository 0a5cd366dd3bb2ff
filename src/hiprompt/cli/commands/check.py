"""
Configuration check.

Usage:
    hiprompt check
"""

import click

from ...settings import settings
from ..boundary import show_setup_instructions
from .. import notify


@click.command("check")
def check_command():
    """Verify that the backend URL and anon key are configured."""
    config = settings.supabase
    if not config.is_configured():
        show_setup_instructions(config.missing_fields())
        raise click.exceptions.Exit(2)

    notify.success(f"Configured for {config.url}")
    click.echo(f"Environment: {settings.environment}")
    click.echo(f"Session file: {config.session_file}")
    click.echo(f"Like counter strategy: {settings.likes.counter_strategy}")


def register_command(cli_group):
    """Register the check command."""
    cli_group.add_command(check_command)
