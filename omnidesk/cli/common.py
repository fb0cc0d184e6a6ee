"""Helpers shared by the CLI command modules."""

from typing import NoReturn

import click
from rich.console import Console
from rich.panel import Panel

from omnidesk.errors import OmnideskError

console = Console()


def error_panel(title: str, error: Exception) -> NoReturn:
    """Print an error panel and exit with status 1."""
    message = error.message if isinstance(error, OmnideskError) else str(error)
    console.print(Panel(
        f"[red]{title}:[/red]\n\n{message}",
        title="[bold red]Error[/bold red]",
        border_style="red",
    ))
    raise SystemExit(1)


def get_companion():
    """Build the application facade from settings on disk."""
    from omnidesk.app import Companion
    from omnidesk.config import load_settings
    from omnidesk.log import setup_logging

    try:
        settings = load_settings()
    except OmnideskError as e:
        error_panel("Failed to load settings", e)

    ctx = click.get_current_context(silent=True)
    if not (ctx and ctx.find_root().obj and ctx.find_root().obj.get("verbose")):
        setup_logging(settings.logging.level)

    return Companion(settings)
