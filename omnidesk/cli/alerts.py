"""Alert management commands for OmniDesk CLI.

Handles price alert management and on-demand alert checks.
"""

from datetime import datetime

import click
from rich.panel import Panel
from rich.table import Table

from omnidesk.cli.common import console, error_panel, get_companion
from omnidesk.errors import OmnideskError

CONDITIONS = ["above", "below"]


def _format_millis(millis: int | None) -> str:
    if millis is None:
        return "-"
    return datetime.fromtimestamp(millis / 1000).strftime("%Y-%m-%d %H:%M")


@click.group()
def alerts() -> None:
    """Manage price alerts.

    \b
    Examples:
      omnidesk alerts list
      omnidesk alerts add BTC/USDT below 60000
      omnidesk alerts remove alert_1718000000000_ab12cd34
      omnidesk alerts check
    """
    pass


@alerts.command("list")
def list_alerts() -> None:
    """Show all alerts."""
    try:
        items = get_companion().get_alerts()
    except OmnideskError as e:
        error_panel("Failed to list alerts", e)

    if not items:
        console.print(Panel(
            "[dim]No alerts set. Use 'omnidesk alerts add SYMBOL CONDITION PRICE' to create one.[/dim]",
            title="[bold]Alerts[/bold]",
            border_style="dim",
        ))
        return

    table = Table(
        title="Price Alerts",
        show_header=True,
        header_style="bold cyan",
    )

    table.add_column("ID", style="dim")
    table.add_column("Symbol", style="bold")
    table.add_column("Condition")
    table.add_column("Target", justify="right")
    table.add_column("Created", style="dim")
    table.add_column("Status", justify="center")

    for alert in items:
        if alert.triggered:
            status = f"[yellow]✓ {_format_millis(alert.triggered_at)}[/yellow]"
        else:
            status = "[green]●[/green]"

        table.add_row(
            alert.id,
            alert.symbol,
            alert.condition,
            f"${alert.target_price:,.2f}",
            _format_millis(alert.created_at),
            status,
        )

    console.print(table)
    console.print(f"\n[dim]Total: {len(items)} alerts[/dim]")


@alerts.command("add")
@click.argument("symbol")
@click.argument("condition", type=click.Choice(CONDITIONS, case_sensitive=False))
@click.argument("price", type=float)
def add_alert(symbol: str, condition: str, price: float) -> None:
    """Create an alert on SYMBOL when it goes CONDITION PRICE.

    \b
    Examples:
      omnidesk alerts add BTC/USDT above 70000
      omnidesk alerts add ETH/USDT below 2500
    """
    try:
        alert = get_companion().add_alert(symbol.upper(), condition.lower(), price)
    except OmnideskError as e:
        error_panel("Failed to create alert", e)

    console.print(Panel(
        f"[bold green]Alert Created[/bold green]\n\n"
        f"ID:        {alert.id}\n"
        f"Symbol:    {alert.symbol}\n"
        f"Condition: {alert.condition} ${alert.target_price:,.2f}\n"
        f"Exchange:  {alert.exchange}",
        title="[bold]New Alert[/bold]",
        border_style="green",
    ))


@alerts.command("remove")
@click.argument("alert_id")
def remove_alert(alert_id: str) -> None:
    """Remove the alert with ALERT_ID."""
    try:
        get_companion().remove_alert(alert_id)
    except OmnideskError as e:
        error_panel("Failed to remove alert", e)

    console.print(f"[green]✓ Removed alert {alert_id}[/green]")


@alerts.command("check")
def check_alerts() -> None:
    """Fetch current prices and trigger any alerts whose condition is met."""
    companion = get_companion()
    try:
        active = [a for a in companion.get_alerts() if not a.triggered]
        if not active:
            console.print("[dim]No active alerts.[/dim]")
            return

        symbols = sorted({a.symbol for a in active})
        fired = companion.check_alerts(companion.get_prices(symbols))
    except OmnideskError as e:
        error_panel("Failed to check alerts", e)

    if not fired:
        console.print(f"[dim]Checked {len(active)} alerts, none triggered.[/dim]")
        return

    for alert in fired:
        console.print(
            f"[bold yellow]🚨 {alert.symbol} {alert.condition} "
            f"${alert.target_price:,.2f}[/bold yellow] [dim]({alert.id})[/dim]"
        )
