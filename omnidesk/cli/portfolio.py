"""Portfolio commands for OmniDesk CLI."""

from datetime import datetime

import click
from rich.panel import Panel
from rich.table import Table

from omnidesk.cli.common import console, error_panel, get_companion
from omnidesk.errors import OmnideskError


@click.group()
def portfolio() -> None:
    """Show paper and live portfolios."""
    pass


@portfolio.command()
def paper() -> None:
    """Show the paper trading wallet."""
    try:
        wallet = get_companion().get_paper_wallet()
    except OmnideskError as e:
        error_panel("Failed to load paper wallet", e)

    created = datetime.fromtimestamp(wallet.created_at / 1000).strftime("%Y-%m-%d")
    console.print(Panel(
        f"[bold]USDT:[/bold] [green]${wallet.usdt:,.2f}[/green]\n"
        f"[dim]Created: {created}[/dim]",
        title="[bold cyan]Paper Wallet[/bold cyan]",
        border_style="cyan",
    ))

    if not wallet.holdings:
        console.print("[dim]No holdings.[/dim]")
        return

    table = Table(title="Holdings", show_header=True, header_style="bold cyan")
    table.add_column("Asset", style="bold")
    table.add_column("Amount", justify="right")
    table.add_column("Avg Price", justify="right")
    table.add_column("Cost", justify="right")

    for asset, holding in sorted(wallet.holdings.items()):
        table.add_row(
            asset,
            f"{holding.amount:,.8f}",
            f"${holding.avg_buy_price:,.2f}",
            f"${holding.total_cost:,.2f}",
        )

    console.print(table)


@portfolio.command()
@click.argument("exchange")
def live(exchange: str) -> None:
    """Show the live portfolio on EXCHANGE."""
    try:
        data = get_companion().get_live_portfolio(exchange.lower())
    except OmnideskError as e:
        error_panel("Failed to load live portfolio", e)

    console.print(Panel(
        f"[bold]Total value:[/bold] ${data.total_value:,.2f}\n"
        f"[dim]{len(data.holdings)} holdings[/dim]",
        title=f"[bold cyan]{exchange.lower()}[/bold cyan]",
        border_style="cyan",
    ))
