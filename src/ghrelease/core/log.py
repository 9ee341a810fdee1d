"""Logging setup for the github-release command line."""

import logging

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "ghrelease"


def log_level(verbosity: int = 0, quiet: bool = False) -> int:
    """Map -v/-q flags to a logging level.

    --quiet silences everything, even errors, unless --verbose is also given.
    """
    if verbosity > 0:
        return logging.DEBUG
    if quiet:
        return logging.CRITICAL + 1
    return logging.INFO


def setup_logging(
    verbosity: int = 0,
    quiet: bool = False,
    console: Console | None = None,
) -> logging.Logger:
    """Attach a single stderr handler to the package logger."""
    handler = RichHandler(
        console=console or Console(stderr=True),
        show_time=verbosity > 0,
        show_path=verbosity > 1,
        markup=False,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))

    logger = logging.getLogger(LOGGER_NAME)
    logger.handlers = [handler]
    logger.setLevel(log_level(verbosity, quiet))
    logger.propagate = False

    if verbosity > 1:
        # Wire-level details from httpx/httpcore
        httpx_logger = logging.getLogger("httpx")
        httpx_logger.handlers = [handler]
        httpx_logger.setLevel(logging.DEBUG)
    return logger
