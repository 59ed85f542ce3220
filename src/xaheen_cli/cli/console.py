"""Console output helpers with optional Rich support.

Optional UI dependencies are imported lazily so bootstrap paths
(``--help``, ``--version``, error reporting) keep working when Rich is
not installed.  All output goes to stderr.
"""

from __future__ import annotations

import sys
from collections.abc import Sequence
from typing import Any

from xaheen_cli.exceptions import EnvironmentError


def _load_rich_console_class() -> type[Any]:
	"""Return ``rich.console.Console`` class or raise ``EnvironmentError``."""
	try:
		from rich.console import Console
	except ModuleNotFoundError as exc:
		raise EnvironmentError(
			"rich is not installed. Install with: pip install rich",
		) from exc
	return Console


def get_rich_console() -> Any:
	"""Create a Rich console instance targeting stderr."""
	console_class = _load_rich_console_class()
	return console_class(stderr=True)


class _ConsoleProxy:
	"""Minimal ``print``-compatible proxy with Rich fallback."""

	def print(self, *objects: object, markup: bool = True) -> None:
		"""Render with Rich when available, else plain stderr print.

		Pass ``markup=False`` for text containing literal brackets such
		as route patterns (``help [topic]``).
		"""
		try:
			rich_console = get_rich_console()
		except EnvironmentError:
			print(*objects, file=sys.stderr)
			return
		rich_console.print(*objects, markup=markup)

	def table(
		self,
		title: str,
		columns: Sequence[str],
		rows: Sequence[Sequence[str]],
	) -> None:
		"""Render *rows* as a table; cells are plain text, never markup."""
		try:
			from rich.table import Table
			from rich.text import Text
		except ModuleNotFoundError:
			_print_plain_table(title, columns, rows)
			return

		table = Table(
			title=title,
			show_header=True,
			header_style="bold cyan",
			border_style="dim",
		)
		for column in columns:
			table.add_column(column)
		for row in rows:
			table.add_row(*(Text(cell) for cell in row))
		self.print(table)


def _print_plain_table(
	title: str,
	columns: Sequence[str],
	rows: Sequence[Sequence[str]],
) -> None:
	widths = [
		max([len(column), *(len(row[index]) for row in rows)])
		for index, column in enumerate(columns)
	]
	print(f"\n{title}", file=sys.stderr)
	print("  ".join(column.ljust(width) for column, width in zip(columns, widths)), file=sys.stderr)
	print("-" * (sum(widths) + 2 * (len(widths) - 1)), file=sys.stderr)
	for row in rows:
		print("  ".join(cell.ljust(width) for cell, width in zip(row, widths)), file=sys.stderr)
	print(file=sys.stderr)


console = _ConsoleProxy()
