"""Route registry — pattern → :class:`Route` mapping with a domain index.

The registry is populated once during single-threaded startup and is
read-only afterwards, so it carries no locking.

Guarantees
----------
* ``pattern`` is unique: re-registering a pattern overwrites the
  previous route (last write wins) and logs a warning.
* The per-domain index never holds two routes with the same pattern;
  an overwrite replaces the index entry in place.
* :meth:`RouteRegistry.validate_routes` never raises.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator

from xaheen_cli.core.models import CLICommand, RegistryStatistics, Route, ValidationReport
from xaheen_cli.core.patterns import has_placeholders

logger = logging.getLogger(__name__)


class RouteRegistry:
    """Owns every registered :class:`Route` and indexes them by domain."""

    def __init__(self) -> None:
        self._routes: dict[str, Route] = {}
        self._by_domain: dict[str, list[Route]] = {}

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def register_route(self, route: Route) -> None:
        """Insert *route*, overwriting any route with the same pattern."""
        previous = self._routes.get(route.pattern)
        if previous is not None:
            logger.warning(
                "Route pattern %r already registered for %s %s; overwriting",
                route.pattern,
                previous.domain,
                previous.action,
            )
            if previous.domain != route.domain:
                self._unindex(previous)

        self._routes[route.pattern] = route
        self._index(route)

    def register_routes(self, routes: Iterable[Route]) -> None:
        """Register *routes* in order; later entries win on collision."""
        for route in routes:
            self.register_route(route)

    def _index(self, route: Route) -> None:
        bucket = self._by_domain.setdefault(route.domain, [])
        for position, existing in enumerate(bucket):
            if existing.pattern == route.pattern:
                bucket[position] = route
                return
        bucket.append(route)

    def _unindex(self, route: Route) -> None:
        bucket = self._by_domain.get(route.domain)
        if bucket is None:
            return
        bucket[:] = [existing for existing in bucket if existing.pattern != route.pattern]
        if not bucket:
            del self._by_domain[route.domain]

    def clear(self) -> None:
        """Drop every route (test/reset use only)."""
        self._routes.clear()
        self._by_domain.clear()

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def get_route(self, pattern: str) -> Route | None:
        return self._routes.get(pattern)

    def has_route(self, pattern: str) -> bool:
        return pattern in self._routes

    def all_routes(self) -> list[Route]:
        """Every route in registration order."""
        return list(self._routes.values())

    def get_routes_by_domain(self, domain: str) -> list[Route]:
        """Routes of *domain* in registration order; empty when unknown."""
        return list(self._by_domain.get(domain, ()))

    def get_routes_by_action(self, action: str) -> list[Route]:
        return [route for route in self._routes.values() if route.action == action]

    def get_domains(self) -> list[str]:
        return list(self._by_domain)

    def find_routes(self, query: str) -> list[Route]:
        """Case-insensitive substring search over pattern, domain and action."""
        needle = query.lower()
        return [
            route
            for route in self._routes.values()
            if needle in route.pattern.lower()
            or needle in route.domain.lower()
            or needle in route.action.lower()
        ]

    def find_route_for_command(self, command: CLICommand) -> Route | None:
        """Locate the route serving an alias-resolved *command*.

        Tries ``"<domain> <action> [<target>]"`` as a substring of each
        pattern first, then falls back to the first route with the same
        ``{domain, action}``.  The substring test is deliberately loose:
        an unrelated pattern that happens to contain the composed string
        wins over the exact ``{domain, action}`` route.
        """
        composed = f"{command.domain} {command.action}"
        if command.target:
            composed = f"{composed} {command.target}"

        for route in self._routes.values():
            if composed in route.pattern:
                return route

        for route in self._routes.values():
            if route.domain == command.domain and route.action == command.action:
                return route
        return None

    # ------------------------------------------------------------------
    # Diagnostics
    # ------------------------------------------------------------------

    def validate_routes(self) -> ValidationReport:
        """Check every route for required fields and suspicious patterns."""
        errors: list[str] = []
        warnings: list[str] = []

        for pattern, route in self._routes.items():
            if not route.domain:
                errors.append(f"Route {pattern!r} is missing a domain")
            if not route.action:
                errors.append(f"Route {pattern!r} is missing an action")
            if route.handler is None or not callable(route.handler):
                errors.append(f"Route {pattern!r} is missing a handler")
            if " " in pattern and not has_placeholders(pattern):
                warnings.append(
                    f"Route {pattern!r} contains spaces but no parameter placeholders",
                )

        return ValidationReport(
            is_valid=not errors,
            errors=tuple(errors),
            warnings=tuple(warnings),
        )

    def get_statistics(self) -> RegistryStatistics:
        return RegistryStatistics(
            total_routes=len(self._routes),
            total_domains=len(self._by_domain),
            routes_by_domain={domain: len(routes) for domain, routes in self._by_domain.items()},
            patterns=tuple(self._routes),
        )

    # ------------------------------------------------------------------
    # Container protocol
    # ------------------------------------------------------------------

    def __len__(self) -> int:
        return len(self._routes)

    def __contains__(self, pattern: object) -> bool:
        return pattern in self._routes

    def __iter__(self) -> Iterator[Route]:
        return iter(list(self._routes.values()))
