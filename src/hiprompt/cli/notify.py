"""Terminal notifications (the CLI's toasts)."""

import click

from ..views.base import Notice

_STYLES = {
    "success": ("✓", "green"),
    "error": ("✗", "red"),
    "info": ("•", "cyan"),
}


def show(notice: Notice) -> None:
    symbol, color = _STYLES[notice.level]
    click.secho(f"{symbol} {notice.message}", fg=color)


def success(message: str) -> None:
    show(Notice("success", message))


def error(message: str) -> None:
    show(Notice("error", message))


def info(message: str) -> None:
    show(Notice("info", message))
