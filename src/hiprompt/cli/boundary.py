"""
Top-level fault boundary for the CLI.

- ConfigurationError replaces the whole run with setup instructions (exit 2)
- any other unexpected exception is logged with its traceback and replaced
  by a fallback notice (exit 1)
- click's own exceptions and exits pass through untouched
"""

import click
from loguru import logger

from ..errors import ConfigurationError, UnexpectedError

SETUP_STEPS = [
    "Create a Supabase project (or open an existing one)",
    "Copy the project URL and the anon public key from Project Settings -> API",
    "Export SUPABASE__URL and SUPABASE__ANON_KEY, or put them in a .env file",
    "Run `hiprompt check` to confirm, then retry your command",
]


def show_setup_instructions(missing: list[str]) -> None:
    click.secho("⚠ Missing environment configuration", fg="yellow", bold=True)
    click.echo("hiprompt needs these variables to reach the backend:")
    for name in ("SUPABASE__URL", "SUPABASE__ANON_KEY"):
        status = click.style("missing", fg="red") if name in missing else click.style("configured", fg="green")
        click.echo(f"  {name}: {status}")
    click.echo()
    click.echo("How to fix:")
    for number, step in enumerate(SETUP_STEPS, start=1):
        click.echo(f"  {number}. {step}")


def show_fallback(error: UnexpectedError) -> None:
    click.secho("✗ Something went wrong", fg="red", bold=True)
    click.echo(f"  Error: {error.message}")
    click.echo("  Check your network connection and configuration, then retry.")
    click.echo("  Run with --verbose to see the full traceback.")


class BoundaryGroup(click.Group):
    """click.Group that catches faults escaping any subcommand, once."""

    def invoke(self, ctx: click.Context):
        try:
            return super().invoke(ctx)
        except (click.exceptions.ClickException, click.exceptions.Abort, click.exceptions.Exit):
            raise
        except ConfigurationError as e:
            logger.debug(f"Configuration missing: {e.missing}")
            show_setup_instructions(e.missing)
            ctx.exit(2)
        except Exception as e:
            logger.exception("Unexpected error")
            show_fallback(UnexpectedError(e))
            ctx.exit(1)
