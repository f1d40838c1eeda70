"""Logging setup — Rich handler on stderr."""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler


def setup_logging(log_level: str = "WARNING", console: Console | None = None) -> None:
    """Configure root logging with a rich handler."""
    logging.basicConfig(
        level=log_level.upper(),
        format="%(message)s",
        handlers=[RichHandler(console=console or Console(stderr=True), rich_tracebacks=True)],
    )
