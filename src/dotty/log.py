"""Logging setup for dotty."""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "dotty"

_handler: RichHandler | None = None


def configure_logging(verbose: bool = False, *, console: Console | None = None) -> logging.Logger:
    """Send dotty's log records to stderr through rich.

    Safe to call more than once; the handler is installed a single time and
    only its level is adjusted afterwards.
    """

    global _handler

    level = logging.DEBUG if verbose else logging.INFO
    logger = logging.getLogger(LOGGER_NAME)

    if _handler is None:
        _handler = RichHandler(
            console=console or Console(stderr=True),
            show_time=False,
            show_path=False,
            markup=False,
        )
        _handler.setFormatter(logging.Formatter("%(message)s"))
        logger.addHandler(_handler)

    _handler.setLevel(level)
    logger.setLevel(level)
    return logger
