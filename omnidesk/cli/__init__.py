"""CLI commands for OmniDesk.

This package provides the command-line interface for OmniDesk,
covering alerts, DCA schedules, config, daemon control and prices.
"""

from omnidesk.cli.main import cli, main

__all__ = ["cli", "main"]
