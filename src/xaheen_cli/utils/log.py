"""Logging configuration for the ``xaheen_cli`` logger hierarchy.

Every module logs through ``logging.getLogger(__name__)``; this module
attaches the single output handler to the package root logger.  Rich is
optional here exactly as it is for the console: without it, records go
to a plain stderr ``StreamHandler``.
"""

from __future__ import annotations

import logging
import sys

ROOT_LOGGER_NAME = "xaheen_cli"
_HANDLER_NAME = "xaheen-cli"


def _build_handler() -> logging.Handler:
    try:
        from rich.console import Console
        from rich.logging import RichHandler
    except ModuleNotFoundError:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter("%(levelname)s: %(message)s"))
        return handler

    return RichHandler(
        console=Console(stderr=True),
        show_time=False,
        show_path=False,
        markup=False,
    )


def configure_logging(*, verbose: bool = False, level: str = "INFO") -> logging.Logger:
    """Configure and return the package root logger.

    Safe to call repeatedly: the level is updated on every call, the
    output handler is installed only once.

    Parameters
    ----------
    verbose:
        Force ``DEBUG`` regardless of *level*.
    level:
        Level name used when *verbose* is false.
    """
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(logging.DEBUG if verbose else level.upper())

    if not any(handler.get_name() == _HANDLER_NAME for handler in logger.handlers):
        handler = _build_handler()
        handler.set_name(_HANDLER_NAME)
        logger.addHandler(handler)
    return logger


def reset_logging() -> None:
    """Remove the handler installed by :func:`configure_logging`."""
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    for handler in list(logger.handlers):
        if handler.get_name() == _HANDLER_NAME:
            logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
