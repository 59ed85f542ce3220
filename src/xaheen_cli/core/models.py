"""Domain models for the routing engine.

All models are **frozen** dataclasses — immutable value objects with no
behaviour beyond data access.  Mapping fields are wrapped in read-only
proxies so a :class:`CLICommand` handed to a domain handler cannot be
mutated in place; redirection builds a new value with
:func:`dataclasses.replace`.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Optional, Union


def _freeze(mapping: Mapping[str, Any] | None) -> Mapping[str, Any]:
    return MappingProxyType(dict(mapping or {}))


# ---------------------------------------------------------------------------
# Canonical request
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class CLICommand:
    """Handler-facing representation of one resolved invocation."""

    domain: str
    """Functional area, e.g. ``project``."""

    action: str
    """Verb within the domain, e.g. ``create``."""

    target: str | None = None
    """First positional argument, if any."""

    arguments: Mapping[str, Any] = field(default_factory=dict)
    """Positional values keyed by name; always contains ``target``."""

    options: Mapping[str, Any] = field(default_factory=dict)
    """Parsed option values keyed by destination name."""

    def __post_init__(self) -> None:
        object.__setattr__(self, "arguments", _freeze(self.arguments))
        object.__setattr__(self, "options", _freeze(self.options))


RouteHandler = Callable[[CLICommand], Union[int, None, Awaitable[Optional[int]]]]
"""Callable bound to a route.

May return an awaitable; an ``int`` result (direct or awaited) is the
process exit code, anything else means success.
"""


# ---------------------------------------------------------------------------
# Route
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Route:
    """Immutable description of one invocable pattern."""

    pattern: str
    domain: str
    action: str
    handler: RouteHandler | None = field(default=None, compare=False, repr=False)
    legacy: Mapping[str, tuple[str, ...]] = field(default_factory=dict)
    """Prior CLI generation name → verbs that must resolve to this route."""

    description: str = ""

    def __post_init__(self) -> None:
        frozen = {name: tuple(verbs) for name, verbs in (self.legacy or {}).items()}
        object.__setattr__(self, "legacy", MappingProxyType(frozen))

    def legacy_verbs(self, cli_name: str) -> tuple[str, ...]:
        """Return the legacy verbs registered for *cli_name* (may be empty)."""
        return self.legacy.get(cli_name, ())

    @property
    def summary(self) -> str:
        """One-line description used by help listings."""
        return self.description or f"Execute {self.domain} {self.action}"


# ---------------------------------------------------------------------------
# Aliases
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class Alias:
    """A short token expanding to a canonical command string."""

    alias: str
    original_command: str
    """Canonical ``"<domain> <action> [target]"`` string."""

    description: str


@dataclass(frozen=True, slots=True)
class AliasResolution:
    """Outcome of resolving alias tokens."""

    resolved: bool
    command: CLICommand | None = None


# ---------------------------------------------------------------------------
# Diagnostics
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class ValidationReport:
    """Result of a non-throwing validation pass."""

    is_valid: bool
    errors: tuple[str, ...] = ()
    warnings: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class RegistryStatistics:
    """Read-only snapshot of the route registry."""

    total_routes: int
    total_domains: int
    routes_by_domain: Mapping[str, int]
    patterns: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class FactoryStatistics:
    """Read-only snapshot of the handler factory."""

    registered_domains: int
    cached_instances: int
    domains: tuple[str, ...]
    global_dependency_keys: tuple[str, ...]
