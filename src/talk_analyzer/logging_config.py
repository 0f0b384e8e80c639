"""Logging setup with rich output on stderr."""

import logging

from rich.console import Console
from rich.logging import RichHandler

ROOT_LOGGER = "talk_analyzer"


def setup_logging(verbose: bool = False, quiet: bool = False) -> logging.Logger:
    """Configure the talk_analyzer logger.

    Args:
        verbose: Enable DEBUG level logging
        quiet: Only show errors
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
        tracebacks_show_locals=verbose,
        markup=True,
        show_time=True,
        show_path=verbose,
    )

    logger = logging.getLogger(ROOT_LOGGER)
    logger.handlers.clear()
    logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = False
    return logger


def get_logger(name: str | None = None) -> logging.Logger:
    """Get a logger inside the talk_analyzer namespace."""
    if name is None:
        return logging.getLogger(ROOT_LOGGER)
    if not name.startswith(ROOT_LOGGER):
        name = f"{ROOT_LOGGER}.{name}"
    return logging.getLogger(name)
