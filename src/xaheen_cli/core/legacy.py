"""Legacy command mapping for the two earlier CLI generations.

Routes declare, per prior CLI name, the verbs that used to invoke them
(``xaheen create`` → ``project create``, ``xala init`` → ``project
create``).  The mapper answers "which current route did this old verb
mean?" by scanning the registry; it never mutates routes.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from xaheen_cli.core.models import Route
from xaheen_cli.core.route_registry import RouteRegistry

LEGACY_CLIS: tuple[str, ...] = ("xaheen", "xala")
"""Earlier CLI generations, in lookup order."""

MAX_LEGACY_WORDS: int = 2
"""Longest multi-word legacy verb (e.g. ``generate component``)."""


@dataclass(frozen=True, slots=True)
class LegacyMatch:
    """A legacy verb resolved to a current route."""

    route: Route
    cli_name: str
    verb: str
    consumed: int
    """Number of argv tokens making up the legacy verb."""


class LegacyMapper:
    """Resolves legacy verbs against a :class:`RouteRegistry`."""

    def __init__(self, registry: RouteRegistry) -> None:
        self._registry = registry

    def find_route_by_legacy(self, cli_name: str, verb: str) -> Route | None:
        """Return the first route listing *verb* under *cli_name*, else ``None``."""
        for route in self._registry.all_routes():
            if verb in route.legacy_verbs(cli_name):
                return route
        return None

    def resolve(self, tokens: Sequence[str]) -> LegacyMatch | None:
        """Match the leading argv *tokens* against every legacy verb.

        Longer verbs win (``bundle list`` before ``bundle``), and the
        ``xaheen`` generation is consulted before ``xala``.
        """
        words: list[str] = []
        for token in tokens[:MAX_LEGACY_WORDS]:
            if token.startswith("-"):
                break
            words.append(token)

        for length in range(len(words), 0, -1):
            verb = " ".join(words[:length])
            for cli_name in LEGACY_CLIS:
                route = self.find_route_by_legacy(cli_name, verb)
                if route is not None:
                    return LegacyMatch(
                        route=route,
                        cli_name=cli_name,
                        verb=verb,
                        consumed=length,
                    )
        return None
