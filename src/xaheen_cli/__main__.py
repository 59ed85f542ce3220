"""Allow ``python -m xaheen_cli`` invocation.

This module simply delegates to the CLI error-boundary entry point so
that ``python -m xaheen_cli`` behaves identically to the ``xaheen``
console script.
"""

from __future__ import annotations

from xaheen_cli.cli.app import cli

if __name__ == "__main__":
    cli()
