"""Price commands for OmniDesk CLI.

Fetches on-demand prices and streams the background poller's updates.
"""

import click
from rich.table import Table

from omnidesk.cli.common import console, error_panel, get_companion
from omnidesk.errors import OmnideskError
from omnidesk.market import PRICES_UPDATE_EVENT
from omnidesk.models import PriceSnapshot


def build_price_table(snapshots: list[PriceSnapshot], title: str = "Prices") -> Table:
    """Render snapshots as a table."""
    table = Table(title=title, show_header=True, header_style="bold cyan")
    table.add_column("Symbol", style="bold")
    table.add_column("Price", justify="right")
    table.add_column("24h %", justify="right")
    table.add_column("24h Volume", justify="right", style="dim")

    for snap in snapshots:
        if snap.change_24h >= 0:
            change_color = "green"
            arrow = "▲"
        else:
            change_color = "red"
            arrow = "▼"

        table.add_row(
            snap.symbol,
            f"${snap.price:,.4f}" if snap.price < 1 else f"${snap.price:,.2f}",
            f"[{change_color}]{arrow} {snap.change_24h:+.2f}%[/{change_color}]",
            f"${snap.volume_24h:,.0f}",
        )

    return table


@click.group()
def prices() -> None:
    """Fetch and watch market prices."""
    pass


@prices.command()
@click.argument("symbols", nargs=-1, required=True)
def get(symbols: tuple[str, ...]) -> None:
    """Fetch current prices for SYMBOLS (e.g., BTC/USDT ETH/USDT)."""
    companion = get_companion()
    try:
        snapshots = companion.get_prices([s.upper() for s in symbols])
    except OmnideskError as e:
        error_panel("Failed to fetch prices", e)
    finally:
        companion.market.close()

    console.print(build_price_table(snapshots))


@prices.command()
def watch() -> None:
    """Stream prices for the configured symbols until Ctrl+C.

    Prices refresh on the poll interval from settings.toml (default 5s).
    """
    import time
    from rich.live import Live

    companion = get_companion()
    symbols = companion.settings.market.symbols
    interval = companion.settings.market.poll_interval

    console.print(f"[dim]Watching {len(symbols)} symbol(s), refreshing every {interval:g}s...[/dim]\n")

    with Live(console.render_str("[dim]Waiting for prices...[/dim]"), console=console) as live_display:
        def on_update(event: str, snapshots: list[PriceSnapshot]) -> None:
            live_display.update(build_price_table(snapshots, title="Live Prices (Ctrl+C to stop)"))

        companion.subscribe(PRICES_UPDATE_EVENT, on_update)
        try:
            with companion:
                while True:
                    time.sleep(1)
        except KeyboardInterrupt:
            pass

    console.print("\n[dim]Stopped watching.[/dim]")
