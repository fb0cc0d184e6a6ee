"""Logging setup for OmniDesk."""

import logging

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "omnidesk"


def setup_logging(level: str = "WARNING", console: Console | None = None) -> logging.Logger:
    """Attach a rich handler to the package logger.

    Calling this more than once replaces the previous handler.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ...).
        console: Console to log to. Defaults to stderr.

    Returns:
        The configured package logger.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level.upper())

    for handler in list(logger.handlers):
        if isinstance(handler, RichHandler):
            logger.removeHandler(handler)

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
    )
    handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))
    logger.addHandler(handler)
    logger.propagate = False
    return logger
