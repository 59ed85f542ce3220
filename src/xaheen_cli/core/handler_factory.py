"""Handler factory — lazy, cached construction of domain handlers.

Handler *constructors* are registered per domain eagerly at startup;
the handler *instance* for a domain is only built on the first
:meth:`HandlerFactory.create_handler` call for that domain and then
cached for the rest of the process.

Guarantees
----------
* Two ``create_handler`` calls for one domain return the same object
  unless ``register_handler`` ran for that domain in between.
* Construction failures surface as
  :class:`~xaheen_cli.exceptions.HandlerConstructionError` naming the
  domain.
* :meth:`HandlerFactory.validate_handlers` never touches the cache.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any

from xaheen_cli.core.models import FactoryStatistics, ValidationReport
from xaheen_cli.core.protocols import (
    REQUIRED_HANDLER_MEMBERS,
    DomainHandler,
    HandlerConstructor,
    Initializable,
)
from xaheen_cli.exceptions import HandlerConstructionError

logger = logging.getLogger(__name__)


class HandlerFactory:
    """Registry of handler constructors plus a per-domain instance cache."""

    def __init__(self) -> None:
        self._constructors: dict[str, HandlerConstructor] = {}
        self._instances: dict[str, DomainHandler] = {}
        self._global_dependencies: dict[str, Any] = {}

    # ------------------------------------------------------------------
    # Dependencies
    # ------------------------------------------------------------------

    def set_global_dependencies(self, dependencies: Mapping[str, Any]) -> None:
        """Shallow-merge *dependencies* into the process-wide bag."""
        self._global_dependencies.update(dependencies)

    @property
    def global_dependencies(self) -> Mapping[str, Any]:
        return MappingProxyType(dict(self._global_dependencies))

    # ------------------------------------------------------------------
    # Registration / construction
    # ------------------------------------------------------------------

    def register_handler(self, domain: str, constructor: HandlerConstructor) -> None:
        """Record *constructor* for *domain*, evicting any cached instance."""
        if not callable(constructor):
            raise TypeError(f"Handler constructor for {domain!r} is not callable")
        self._constructors[domain] = constructor
        if self._instances.pop(domain, None) is not None:
            logger.debug("Evicted cached handler for domain %r", domain)

    def create_handler(
        self,
        domain: str,
        extra_dependencies: Mapping[str, Any] | None = None,
    ) -> DomainHandler:
        """Return the cached handler for *domain*, constructing it if needed.

        Raises
        ------
        HandlerConstructionError
            If no constructor is registered for *domain* or the
            constructor raises.
        """
        cached = self._instances.get(domain)
        if cached is not None:
            return cached

        constructor = self._constructors.get(domain)
        if constructor is None:
            raise HandlerConstructionError(
                f"No handler registered for domain '{domain}'",
                domain=domain,
                hint=f"Install a plugin providing the '{domain}' domain.",
            )

        dependencies = {**self._global_dependencies, **(extra_dependencies or {})}
        try:
            handler = constructor(dependencies)
        except Exception as exc:
            raise HandlerConstructionError(
                f"Failed to create handler for domain '{domain}': {exc}",
                domain=domain,
            ) from exc

        self._instances[domain] = handler
        logger.debug("Created handler for domain %r", domain)
        return handler

    def has_handler(self, domain: str) -> bool:
        return domain in self._constructors

    def get_handler(self, domain: str) -> DomainHandler | None:
        """Return the cached instance for *domain* without creating one."""
        return self._instances.get(domain)

    def get_registered_domains(self) -> list[str]:
        return list(self._constructors)

    def clear_cache(self) -> None:
        """Evict every cached instance (test/reset use only)."""
        self._instances.clear()

    # ------------------------------------------------------------------
    # Async initialisation
    # ------------------------------------------------------------------

    async def initialize_handlers(self) -> None:
        """Initialise every cached :class:`Initializable` handler concurrently.

        The first failure propagates; partial success is not tolerated.
        """
        dependencies = self.global_dependencies
        pending = [
            handler.initialize(dependencies)
            for handler in self._instances.values()
            if isinstance(handler, Initializable)
        ]
        if not pending:
            return
        logger.debug("Initialising %d handler(s)", len(pending))
        await asyncio.gather(*pending)

    # ------------------------------------------------------------------
    # Diagnostics
    # ------------------------------------------------------------------

    def validate_handlers(self) -> ValidationReport:
        """Trial-construct every registered handler with an empty bag."""
        errors: list[str] = []
        warnings: list[str] = []

        for domain, constructor in self._constructors.items():
            try:
                instance = constructor({})
            except Exception as exc:  # noqa: BLE001
                errors.append(f"Handler for {domain!r} failed to construct: {exc}")
                continue

            missing = [
                member
                for member in REQUIRED_HANDLER_MEMBERS
                if not callable(getattr(instance, member, None))
            ]
            if missing:
                errors.append(
                    f"Handler for {domain!r} is missing: {', '.join(missing)}",
                )

            reported = getattr(instance, "domain", None)
            if reported != domain:
                warnings.append(
                    f"Handler registered as {domain!r} reports domain {reported!r}",
                )

        return ValidationReport(
            is_valid=not errors,
            errors=tuple(errors),
            warnings=tuple(warnings),
        )

    def get_statistics(self) -> FactoryStatistics:
        return FactoryStatistics(
            registered_domains=len(self._constructors),
            cached_instances=len(self._instances),
            domains=tuple(self._constructors),
            global_dependency_keys=tuple(self._global_dependencies),
        )
