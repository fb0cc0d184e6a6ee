"""Configuration commands for OmniDesk CLI.

Shows the redacted config and stores exchange credentials.
"""

import click
from rich.panel import Panel
from rich.table import Table

from omnidesk.cli.common import console, error_panel, get_companion
from omnidesk.errors import OmnideskError


@click.group()
def config() -> None:
    """Show configuration and manage exchange credentials."""
    pass


@config.command()
def show() -> None:
    """Show the configuration with secrets redacted."""
    try:
        cfg = get_companion().get_config()
    except OmnideskError as e:
        error_panel("Failed to load config", e)

    if cfg.exchanges:
        table = Table(title="Exchanges", show_header=True, header_style="bold cyan")
        table.add_column("Exchange", style="bold")
        table.add_column("API Key")
        table.add_column("Secret", style="dim")
        table.add_column("Network")

        for name, cred in sorted(cfg.exchanges.items()):
            table.add_row(
                name,
                cred.api_key,
                cred.secret,
                "[yellow]testnet[/yellow]" if cred.testnet else "mainnet",
            )
        console.print(table)
    else:
        console.print("[dim]No exchanges configured. Use 'omnidesk config set-exchange'.[/dim]")

    if cfg.security:
        console.print(Panel(
            f"Max order size: ${cfg.security.max_order_size:,.2f}\n"
            f"Confirm trades: {'yes' if cfg.security.confirm_trades else 'no'}",
            title="[bold]Security[/bold]",
            border_style="cyan",
        ))

    notifications = cfg.notifications
    if notifications:
        channels = []
        if notifications.native:
            channels.append("native")
        if notifications.telegram and notifications.telegram.enabled:
            channels.append("telegram")
        if notifications.discord and notifications.discord.enabled:
            channels.append("discord")
        console.print(f"[dim]Notifications: {', '.join(channels) or 'none'}[/dim]")


PASSPHRASE_EXCHANGES = ("coinbase", "kucoin", "okx")


@config.command("set-exchange")
@click.argument("name")
@click.option("--api-key", prompt=True, help="Exchange API key.")
@click.option("--secret", prompt=True, hide_input=True, help="Exchange API secret.")
@click.option("--password", default=None, help="API passphrase (coinbase, kucoin, okx).")
@click.option("--testnet", is_flag=True, help="Use the exchange testnet.")
def set_exchange(
    name: str, api_key: str, secret: str, password: str | None, testnet: bool
) -> None:
    """Save API credentials for exchange NAME.

    \b
    Examples:
      omnidesk config set-exchange binance
      omnidesk config set-exchange bybit --testnet
      omnidesk config set-exchange okx --password <passphrase>
    """
    name = name.lower()
    if password is None and name in PASSPHRASE_EXCHANGES:
        password = click.prompt(
            "Passphrase", hide_input=True, default="", show_default=False
        )

    try:
        get_companion().save_exchange(name, api_key, secret, testnet, password)
    except OmnideskError as e:
        error_panel("Failed to save credentials", e)

    console.print(f"[green]✓ Saved credentials for {name}[/green]")
