"""Logging setup for command line runs."""

import logging
import os

from rich.console import Console
from rich.logging import RichHandler


def configure_logging(level: str | None = None, console: Console | None = None) -> None:
    """Route log records through Rich.

    Args:
        level: Level name (debug/info/warning/error). Falls back to the
            LOG_LEVEL environment variable, then WARNING.
        console: Console to write to (default: stderr)
    """
    if level is None:
        level = os.getenv("LOG_LEVEL", "WARNING")
    logging.basicConfig(
        level=level.upper(),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console or Console(stderr=True), rich_tracebacks=True)],
        force=True,
    )
    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)
