"""
hiprompt CLI entry point.

Usage:
    hiprompt check
    hiprompt login
    hiprompt prompts list --search email
    hiprompt prompts create --title "Cold email" --content-file email.txt
    hiprompt profile
"""

import sys

import click
from loguru import logger

from ..settings import settings
from .boundary import BoundaryGroup


@click.group(cls=BoundaryGroup)
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
@click.pass_context
def cli(ctx: click.Context, verbose: bool):
    """hiprompt - share, discover and like AI prompts."""
    ctx.ensure_object(dict)
    if verbose:
        logger.remove()
        logger.add(sys.stderr, level="DEBUG")
    else:
        logger.remove()
        logger.add(sys.stderr, level=settings.log_level)


@cli.group()
def prompts():
    """Discover, create, like and delete prompts."""
    pass


# Register commands
from .commands.check import register_command as register_check_command
from .commands.account import register_commands as register_account_commands
from .commands.browse import register_commands as register_browse_commands
from .commands.prompts import register_commands as register_prompt_commands

register_check_command(cli)
register_account_commands(cli)
register_browse_commands(cli)
register_prompt_commands(prompts)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
