"""Logging setup for the ``git_survey`` package logger."""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

from .config import LogSettings

PACKAGE_LOGGER = "git_survey"


def configure_logging(settings: LogSettings, console: Console | None = None) -> logging.Logger:
    """Attach a single rich handler to the package logger and set its level.

    Only the package logger is touched; calling this again replaces the
    previous handler.
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in list(logger.handlers):
        if isinstance(handler, RichHandler):
            logger.removeHandler(handler)

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
    )
    logger.addHandler(handler)
    logger.setLevel(settings.level)
    logger.propagate = False
    return logger
