"""Logging configuration with rich formatting for terminal output."""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "addon_audit"


def setup_logging(verbose: bool = False, quiet: bool = False) -> logging.Logger:
    """Configure the ``addon_audit`` logger.

    ``quiet`` wins over ``verbose``: errors only. ``verbose`` enables DEBUG,
    otherwise WARNING and above are shown.
    """

    if quiet:
        level = logging.ERROR
    elif verbose:
        level = logging.DEBUG
    else:
        level = logging.WARNING

    handler = RichHandler(
        console=Console(stderr=True),
        rich_tracebacks=True,
        markup=False,
        show_time=verbose,
        show_path=verbose,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))

    logger = logging.getLogger(LOGGER_NAME)
    for existing in list(logger.handlers):
        logger.removeHandler(existing)
    logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = False
    return logger


__all__ = ["LOGGER_NAME", "setup_logging"]
