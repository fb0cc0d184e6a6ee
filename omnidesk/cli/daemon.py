"""Daemon control commands for OmniDesk CLI.

Controls the OmniTrade background daemon.
"""

import click
from rich.panel import Panel

from omnidesk.cli.common import console, error_panel, get_companion
from omnidesk.errors import OmnideskError


@click.group()
def daemon() -> None:
    """Control the OmniTrade daemon.

    \b
    Commands:
      status  - Show whether the daemon is running
      start   - Start the daemon
      stop    - Stop the daemon
      logs    - Show recent daemon log lines
    """
    pass


@daemon.command()
def status() -> None:
    """Show whether the daemon is running."""
    try:
        info = get_companion().get_daemon_status()
    except OmnideskError as e:
        error_panel("Failed to read daemon status", e)

    if info.running:
        console.print(Panel(
            f"[green]●[/green] Running\n\n"
            f"PID:    {info.pid}\n"
            f"Uptime: {info.uptime or 'unknown'}",
            title="[bold]Daemon[/bold]",
            border_style="green",
        ))
    else:
        console.print(Panel(
            "[dim]○ Stopped[/dim]\n\n"
            "[dim]Use [cyan]omnidesk daemon start[/cyan] to launch it.[/dim]",
            title="[bold]Daemon[/bold]",
            border_style="dim",
        ))


@daemon.command()
def start() -> None:
    """Start the daemon."""
    console.print("[dim]Starting daemon...[/dim]")
    try:
        get_companion().start_daemon()
    except OmnideskError as e:
        error_panel("Failed to start daemon", e)

    console.print("[green]✓ Daemon started[/green]")


@daemon.command()
def stop() -> None:
    """Stop the daemon."""
    try:
        get_companion().stop_daemon()
    except OmnideskError as e:
        error_panel("Failed to stop daemon", e)

    console.print("[green]✓ Daemon stopped[/green]")


@daemon.command()
@click.option(
    "-n", "--lines",
    default=50,
    type=click.IntRange(min=1),
    help="Number of lines to show (default: 50)",
)
def logs(lines: int) -> None:
    """Show the last lines of the daemon log."""
    try:
        log_lines = get_companion().get_daemon_log(lines)
    except OmnideskError as e:
        error_panel("Failed to read daemon log", e)

    if not log_lines:
        console.print("[dim]No daemon log yet.[/dim]")
        return

    for line in log_lines:
        console.print(line, markup=False, highlight=False)
