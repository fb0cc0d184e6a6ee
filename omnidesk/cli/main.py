"""Main CLI entry point for OmniDesk.

This module provides the main click group and lazy loading
of the command modules.
"""

import click
from rich.console import Console

from omnidesk.log import setup_logging

# Console for rich output
console = Console()


class LazyGroup(click.Group):
    """A click Group that lazily loads commands.

    Command modules are only imported when they are invoked.
    """

    def __init__(self, *args, lazy_subcommands: dict[str, str] | None = None, **kwargs):
        """Initialize the lazy group.

        Args:
            lazy_subcommands: Mapping of command names to module paths.
        """
        super().__init__(*args, **kwargs)
        self._lazy_subcommands = lazy_subcommands or {}

    def list_commands(self, ctx: click.Context) -> list[str]:
        """List all available commands."""
        base = super().list_commands(ctx)
        lazy = list(self._lazy_subcommands.keys())
        return sorted(set(base + lazy))

    def get_command(self, ctx: click.Context, cmd_name: str) -> click.Command | None:
        """Get a command by name, lazily loading if needed."""
        if cmd_name in self.commands:
            return self.commands[cmd_name]

        if cmd_name in self._lazy_subcommands:
            return self._lazy_load(cmd_name)

        return None

    def _lazy_load(self, cmd_name: str) -> click.Command:
        """Lazily load a command from its module path."""
        import importlib

        module_path = self._lazy_subcommands[cmd_name]
        module = importlib.import_module(module_path)

        attr = getattr(module, cmd_name, None)
        if not isinstance(attr, click.Command):
            raise click.ClickException(f"Could not find command '{cmd_name}' in {module_path}")

        self.add_command(attr)
        return attr


LAZY_SUBCOMMANDS = {
    "alerts": "omnidesk.cli.alerts",
    "dca": "omnidesk.cli.dca",
    "config": "omnidesk.cli.config",
    "daemon": "omnidesk.cli.daemon",
    "prices": "omnidesk.cli.prices",
    "portfolio": "omnidesk.cli.portfolio",
}


CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}


@click.group(cls=LazyGroup, lazy_subcommands=LAZY_SUBCOMMANDS, context_settings=CONTEXT_SETTINGS)
@click.version_option(package_name="omnidesk")
@click.option("-v", "--verbose", is_flag=True, help="Show debug logging.")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """OmniDesk - local companion for the OmniTrade daemon.

    Manage price alerts, DCA schedules, exchange credentials and the
    background daemon, and watch live prices.

    \b
    Quick Start:
      omnidesk prices watch            # Stream prices every 5s
      omnidesk alerts add BTC/USDT above 70000
      omnidesk daemon status           # Is the daemon running?
    """
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    if verbose:
        setup_logging("DEBUG")


def main() -> None:
    """Main entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
