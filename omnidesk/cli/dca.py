"""DCA schedule commands for OmniDesk CLI."""

from datetime import datetime

import click
from rich.panel import Panel
from rich.table import Table

from omnidesk.cli.common import console, error_panel, get_companion
from omnidesk.errors import OmnideskError


def _format_millis(millis: int | None) -> str:
    if millis is None:
        return "-"
    return datetime.fromtimestamp(millis / 1000).strftime("%Y-%m-%d %H:%M")


@click.group()
def dca() -> None:
    """View and toggle recurring purchase schedules.

    \b
    Commands:
      list     - Show all schedules
      enable   - Enable a schedule
      disable  - Disable a schedule
    """
    pass


@dca.command("list")
def list_schedules() -> None:
    """Show all DCA schedules."""
    try:
        schedules = get_companion().get_schedules()
    except OmnideskError as e:
        error_panel("Failed to list DCA schedules", e)

    if not schedules:
        console.print(Panel(
            "[dim]No DCA schedules. Create one with the OmniTrade CLI.[/dim]",
            title="[bold]DCA[/bold]",
            border_style="dim",
        ))
        return

    table = Table(title="DCA Schedules", show_header=True, header_style="bold cyan")
    table.add_column("ID", style="dim")
    table.add_column("Asset", style="bold")
    table.add_column("Amount", justify="right")
    table.add_column("Frequency")
    table.add_column("Runs", justify="right")
    table.add_column("Last Run", style="dim")
    table.add_column("Next Run", style="dim")
    table.add_column("Status", justify="center")

    for schedule in schedules:
        table.add_row(
            schedule.id,
            schedule.asset,
            f"${schedule.amount:,.2f}",
            schedule.frequency,
            str(schedule.executions),
            _format_millis(schedule.last_run),
            _format_millis(schedule.next_run),
            "[green]enabled[/green]" if schedule.enabled else "[dim]disabled[/dim]",
        )

    console.print(table)


def _toggle(schedule_id: str, enabled: bool) -> None:
    try:
        get_companion().toggle_schedule(schedule_id, enabled)
    except OmnideskError as e:
        error_panel("Failed to update DCA schedule", e)

    state = "enabled" if enabled else "disabled"
    console.print(f"[green]✓ Schedule {schedule_id} {state}[/green]")


@dca.command()
@click.argument("schedule_id")
def enable(schedule_id: str) -> None:
    """Enable the schedule with SCHEDULE_ID."""
    _toggle(schedule_id, True)


@dca.command()
@click.argument("schedule_id")
def disable(schedule_id: str) -> None:
    """Disable the schedule with SCHEDULE_ID."""
    _toggle(schedule_id, False)
