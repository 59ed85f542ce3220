"""Core layer — routing data structures and resolution logic.

Rules
-----
* No ``print()`` calls and no Rich rendering.
* No filesystem or network I/O.
* No imports from ``cli``, ``infra`` or ``domains``.
* Diagnostics go through module loggers only.
"""

from xaheen_cli.core.aliases import DEFAULT_ALIASES, AliasResolver
from xaheen_cli.core.handler_factory import HandlerFactory
from xaheen_cli.core.legacy import LEGACY_CLIS, LegacyMapper, LegacyMatch
from xaheen_cli.core.models import (
    Alias,
    AliasResolution,
    CLICommand,
    FactoryStatistics,
    RegistryStatistics,
    Route,
    ValidationReport,
)
from xaheen_cli.core.options import BASELINE_OPTIONS, DOMAIN_OPTIONS, OptionSpec
from xaheen_cli.core.protocols import DomainHandler, Initializable
from xaheen_cli.core.route_registry import RouteRegistry
from xaheen_cli.core.routes import ROUTE_DEFINITIONS, build_route_table

__all__: list[str] = [
    "BASELINE_OPTIONS",
    "DEFAULT_ALIASES",
    "DOMAIN_OPTIONS",
    "LEGACY_CLIS",
    "ROUTE_DEFINITIONS",
    "Alias",
    "AliasResolution",
    "AliasResolver",
    "CLICommand",
    "DomainHandler",
    "FactoryStatistics",
    "HandlerFactory",
    "Initializable",
    "LegacyMapper",
    "LegacyMatch",
    "OptionSpec",
    "RegistryStatistics",
    "Route",
    "RouteRegistry",
    "ValidationReport",
    "build_route_table",
]
