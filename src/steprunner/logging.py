"""Console logging for the steprunner CLI."""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

PROJECT_PREFIX = "steprunner"


def configure_logging(verbose: bool = False, console: Console | None = None) -> RichHandler:
    """Send steprunner log records to stderr through Rich.

    Verbose mode shows DEBUG records, including every class the fast path
    declines and why.
    """
    handler = RichHandler(
        console=console or Console(stderr=True),
        show_time=verbose,
        show_path=verbose,
        rich_tracebacks=True,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))

    logger = logging.getLogger(PROJECT_PREFIX)
    for existing in list(logger.handlers):
        if isinstance(existing, RichHandler):
            logger.removeHandler(existing)
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    return handler
