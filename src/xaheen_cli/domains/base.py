"""Convenience base class for domain handlers.

Subclasses declare ``domain`` and ``actions`` and implement one
``handle_<action>`` method per action (hyphens become underscores).
"""

from __future__ import annotations

from collections.abc import Awaitable, Mapping
from typing import Any, ClassVar

from xaheen_cli.core.models import CLICommand
from xaheen_cli.exceptions import UnsupportedActionError


class BaseDomainHandler:
    domain: ClassVar[str] = ""
    actions: ClassVar[tuple[str, ...]] = ()

    def __init__(self, dependencies: Mapping[str, Any]) -> None:
        self.dependencies = dependencies

    def get_supported_actions(self) -> list[str]:
        return list(self.actions)

    def can_handle(self, command: CLICommand) -> bool:
        return command.domain == self.domain and command.action in self.actions

    def execute(self, command: CLICommand) -> Awaitable[int | None] | int | None:
        method = getattr(self, f"handle_{command.action.replace('-', '_')}", None)
        if method is None or command.action not in self.actions:
            raise UnsupportedActionError(
                f"Action '{command.action}' is not supported by the '{self.domain}' domain",
                domain=self.domain,
                action=command.action,
            )
        return method(command)
