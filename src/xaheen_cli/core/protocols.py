"""Protocols (interfaces) consumed by the routing core.

These define the contracts that domain handlers must satisfy.  The core
depends ONLY on these contracts — never on concrete handler
implementations — so domains stay pluggable.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable, Mapping, Sequence
from typing import Any, Protocol, runtime_checkable

from xaheen_cli.core.models import CLICommand

REQUIRED_HANDLER_MEMBERS: tuple[str, ...] = (
    "execute",
    "get_supported_actions",
    "can_handle",
)
"""Callable members every domain handler must expose."""


@runtime_checkable
class DomainHandler(Protocol):
    """Contract for pluggable domain handlers.

    Any object exposing these members satisfies the protocol
    structurally (no explicit inheritance required).
    """

    domain: str
    """Name of the domain this handler serves (e.g. ``"project"``)."""

    def execute(self, command: CLICommand) -> Awaitable[int | None] | int | None:
        """Carry out *command*.  May be a coroutine function.

        An ``int`` result is used as the process exit code.

        Failures must propagate; the routing core never swallows them.
        """
        ...  # pragma: no cover

    def can_handle(self, command: CLICommand) -> bool:
        """Return ``True`` when *command* targets a supported action."""
        ...  # pragma: no cover

    def get_supported_actions(self) -> Sequence[str]:
        """Return the actions this handler implements."""
        ...  # pragma: no cover


class Initializable(ABC):
    """Opt-in capability for handlers needing asynchronous setup.

    Handlers subclass this explicitly; the handler factory detects the
    capability with :func:`isinstance` and awaits :meth:`initialize`
    with the global dependency bag before the first dispatch.
    """

    @abstractmethod
    async def initialize(self, dependencies: Mapping[str, Any]) -> None:
        """Prepare the handler using the shared *dependencies*."""


HandlerConstructor = Callable[[Mapping[str, Any]], DomainHandler]
"""Factory callable (usually the handler class) taking a dependency bag."""
