"""Logging setup.

Modules log through ``logging.getLogger(__name__)``; the CLI calls
``configure_logging`` once to route those records to stderr via rich.
"""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

PACKAGE_LOGGER = "cherrypick_interactive"


def configure_logging(verbose: bool = False, console: Console | None = None) -> logging.Logger:
    """Attach a rich handler to the package logger.

    Args:
        verbose: Log every git command (DEBUG) instead of warnings only
        console: Console to log to (defaults to a stderr console)

    Returns:
        The package logger
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)

    for handler in list(logger.handlers):
        if isinstance(handler, RichHandler):
            logger.removeHandler(handler)

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        markup=False,
        rich_tracebacks=verbose,
    )
    handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))
    logger.addHandler(handler)
    logger.propagate = False
    return logger
