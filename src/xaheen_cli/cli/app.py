"""CLI application entry point for xaheen.

This module is the **sole error boundary** for the entire application.
It catches :class:`~xaheen_cli.exceptions.CLIError`, ``KeyboardInterrupt``
(SIGINT and SIGTERM), and any unexpected ``Exception``, logs a
user-facing message, and returns a well-defined exit code.

Architecture notes
------------------
* No routing logic lives here; :class:`~xaheen_cli.cli.parser.CommandParser`
  owns dispatch.
* This module is the only place that translates between the domain world
  and the OS process exit code.
"""

from __future__ import annotations

import argparse
import logging
import signal
import sys
from collections.abc import Sequence
from types import FrameType

from xaheen_cli.cli import exit_codes
from xaheen_cli.cli.console import console
from xaheen_cli.cli.parser import ArgumentParser, CommandParser
from xaheen_cli.exceptions import CLIError
from xaheen_cli.settings import load_settings
from xaheen_cli.utils.log import configure_logging

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Bootstrap options
# ---------------------------------------------------------------------------

def _build_bootstrap_parser() -> argparse.ArgumentParser:
    """Parser for the options needed before routing is set up.

    Only ``--config`` and ``--verbose`` are read here; everything else is
    left for the per-command parsers.
    """
    parser = ArgumentParser(prog="xaheen", add_help=False, allow_abbrev=False)
    parser.add_argument("-v", "--verbose", action="store_true")
    parser.add_argument("--config", default=None)
    return parser


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------

def main(argv: Sequence[str] | None = None) -> int:
    """Run the xaheen CLI.

    Parameters
    ----------
    argv:
        Explicit argument list.  When ``None`` (default), ``sys.argv[1:]``
        is used.

    Returns
    -------
    int
        OS process exit code.
    """
    arguments = list(sys.argv[1:] if argv is None else argv)

    bootstrap, _ = _build_bootstrap_parser().parse_known_args(arguments)
    settings = load_settings(bootstrap.config)
    configure_logging(verbose=bootstrap.verbose, level=settings.log_level)
    logger.debug("Settings loaded from %s", settings.source)

    parser = CommandParser(settings=settings, console=console)
    return parser.parse(arguments)


# ---------------------------------------------------------------------------
# Signals
# ---------------------------------------------------------------------------

def _raise_interrupt(signum: int, frame: FrameType | None) -> None:
    raise KeyboardInterrupt


def _install_signal_handlers() -> None:
    try:
        signal.signal(signal.SIGTERM, _raise_interrupt)
    except ValueError:
        # Not the main thread; leave the default disposition.
        logger.debug("SIGTERM handler not installed")


# ---------------------------------------------------------------------------
# Script-level error boundary
# ---------------------------------------------------------------------------

def cli(argv: Sequence[str] | None = None) -> None:
    """Top-level error boundary invoked by the console-script entry point.

    Wraps :func:`main` and guarantees the process never exits with a raw
    stack trace during normal usage.
    """
    configure_logging()
    _install_signal_handlers()

    try:
        code = main(argv)
    except CLIError as exc:
        logger.error("CLI Error [%s]: %s", exc.code, exc.message)
        if exc.hint:
            console.print(f"Hint: {exc.hint}", markup=False)
        code = exit_codes.GENERAL_ERROR
    except KeyboardInterrupt:
        console.print("\n[yellow]Aborted by user.[/yellow]")
        code = exit_codes.CANCELLED
    except Exception as exc:  # noqa: BLE001
        logger.error("Unexpected error: %s: %s", type(exc).__name__, exc)
        logger.debug("Traceback", exc_info=True)
        code = exit_codes.GENERAL_ERROR
    sys.exit(code)
