"""Shared utilities — logging setup and cross-cutting helpers.

Rules
-----
* No business logic.
* Importable by any layer.
"""

from xaheen_cli.utils.log import configure_logging

__all__: list[str] = ["configure_logging"]
