"""``xaheen doctor`` — routing and environment diagnostics.

Gathers the state of the command parser (routes, handlers, option
table, aliases) plus the runtime environment and renders a Rich table
summarising whether the CLI is correctly wired.

This module lives in the CLI layer; it renders via Rich and only reads
from the parser it is given.
"""

from __future__ import annotations

import logging
import platform
import sys
from collections.abc import Sequence
from typing import TYPE_CHECKING

from xaheen_cli.cli import exit_codes
from xaheen_cli.cli.console import console
from xaheen_cli.core.options import BASELINE_OPTIONS, validate_option_table
from xaheen_cli.version import __version__

if TYPE_CHECKING:
    from xaheen_cli.cli.parser import CommandParser

logger = logging.getLogger(__name__)

Check = tuple[str, str, str]

OK = "[green]OK[/green]"
WARN = "[yellow]WARN[/yellow]"
FAIL = "[red]FAIL[/red]"


# ---------------------------------------------------------------------------
# Diagnostic collectors
# ---------------------------------------------------------------------------

def _version_check() -> Check:
    return "xaheen", __version__, OK


def _python_version_check() -> Check:
    """Return (label, value, status) for the Python version row."""
    version = platform.python_version()
    ok = sys.version_info[:2] >= (3, 10)
    status = OK if ok else "[red]FAIL (>=3.10 required)[/red]"
    return "Python", version, status


def _os_check() -> Check:
    system_raw = platform.system()
    system_display = {"Darwin": "macOS"}.get(system_raw, system_raw)
    return "OS", f"{system_display} {platform.release()} ({platform.machine()})", OK


def _routes_check(parser: CommandParser) -> tuple[Check, list[str]]:
    report = parser.routes.validate_routes()
    stats = parser.routes.get_statistics()
    value = f"{stats.total_routes} routes / {stats.total_domains} domains"
    # Route warnings are shown with --verbose only.
    for warning in report.warnings:
        logger.debug("Route check: %s", warning)
    return ("Routes", value, FAIL if report.errors else OK), list(report.errors)


def _handlers_check(parser: CommandParser) -> tuple[Check, list[str]]:
    report = parser.factory.validate_handlers()
    value = f"{len(parser.factory.get_registered_domains())} registered"
    if report.errors:
        status = FAIL
    elif report.warnings:
        status = WARN
    else:
        status = OK

    # An unserved domain is a note, not a failure.
    served = set(parser.factory.get_registered_domains())
    unserved = sorted({route.domain for route in parser.routes} - served)
    notes = [*report.errors, *report.warnings]
    if unserved:
        notes.append(f"No handler installed for: {', '.join(unserved)}")
    return ("Handlers", value, status), notes


def _options_check(parser: CommandParser) -> tuple[Check, list[str]]:
    problems = validate_option_table(parser.option_table)
    value = f"{len(BASELINE_OPTIONS)} baseline"
    return ("Options", value, WARN if problems else OK), problems


def _aliases_check(parser: CommandParser) -> Check:
    count = len(parser.alias_resolver.aliases)
    return "Aliases", f"{count} active", OK


def _config_check(parser: CommandParser) -> Check:
    settings = parser.settings
    legacy = "legacy on" if settings.legacy_commands else "legacy off"
    return "Config", f"{settings.source} ({settings.log_level}, {legacy})", OK


def _status_plain(status: str) -> str:
    """Convert rich-markup status to plain text."""
    for word in ("FAIL", "WARN", "OK"):
        if word in status:
            return word
    return status


def _print_plain_doctor_table(checks: list[Check]) -> None:
    print("\nxaheen doctor", file=sys.stderr)
    print("=" * 64, file=sys.stderr)
    print(f"{'Component':<12} {'Value':<40} {'Status':<8}", file=sys.stderr)
    print("-" * 64, file=sys.stderr)
    for label, value, status in checks:
        print(f"{label:<12} {value:<40} {_status_plain(status):<8}", file=sys.stderr)
    print(file=sys.stderr)


# ---------------------------------------------------------------------------
# Public entry points
# ---------------------------------------------------------------------------

def run_doctor(parser: CommandParser) -> int:
    """Execute all diagnostic checks and render a summary table.

    Returns
    -------
    int
        :data:`exit_codes.SUCCESS` when no check fails,
        :data:`exit_codes.GENERAL_ERROR` otherwise.
    """
    routes_row, route_notes = _routes_check(parser)
    handlers_row, handler_notes = _handlers_check(parser)
    options_row, option_notes = _options_check(parser)
    checks = [
        _version_check(),
        _python_version_check(),
        _os_check(),
        _config_check(parser),
        routes_row,
        handlers_row,
        options_row,
        _aliases_check(parser),
    ]
    notes = [*route_notes, *handler_notes, *option_notes]
    has_failure = any("FAIL" in status for _, _, status in checks)

    try:
        from rich.table import Table
        from rich.text import Text
    except ModuleNotFoundError:
        _print_plain_doctor_table(checks)
        for note in notes:
            print(f"  - {note}", file=sys.stderr)
        print("Some checks failed." if has_failure else "All checks passed.", file=sys.stderr)
        return exit_codes.GENERAL_ERROR if has_failure else exit_codes.SUCCESS

    table = Table(
        title="xaheen doctor",
        show_header=True,
        header_style="bold cyan",
        border_style="dim",
    )
    table.add_column("Component", style="bold", min_width=12)
    table.add_column("Value", min_width=20)
    table.add_column("Status", justify="center", min_width=8)
    for label, value, status in checks:
        table.add_row(label, Text(value), status)

    console.print()
    console.print(table)
    for note in notes:
        console.print(f"  - {note}", markup=False)
    console.print()

    if has_failure:
        console.print("[bold red]Some checks failed.[/bold red]")
        return exit_codes.GENERAL_ERROR
    console.print("[bold green]All checks passed.[/bold green]")
    return exit_codes.SUCCESS


class DoctorCommand:
    """Auxiliary ``doctor`` command registered by the command parser."""

    name = "doctor"
    help = "Diagnose the CLI installation and command wiring"

    def run(self, parser: CommandParser, argv: Sequence[str]) -> int:
        from xaheen_cli.cli.parser import ArgumentParser, add_option

        arguments = ArgumentParser(prog=f"xaheen {self.name}", description=self.help)
        for spec in BASELINE_OPTIONS:
            add_option(arguments, spec)
        arguments.parse_args(list(argv))
        return run_doctor(parser)
