"""Infrastructure layer — integration with the installed environment.

Rules
-----
* No imports from ``cli``.
* No user-facing output; problems are logged and skipped.
"""

from xaheen_cli.infra.plugins import (
    COMMAND_GROUP,
    DOMAIN_GROUP,
    AuxiliaryCommand,
    discover_commands,
    discover_domain_handlers,
)

__all__: list[str] = [
    "COMMAND_GROUP",
    "DOMAIN_GROUP",
    "AuxiliaryCommand",
    "discover_commands",
    "discover_domain_handlers",
]
