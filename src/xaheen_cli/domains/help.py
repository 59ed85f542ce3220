"""Built-in ``help`` domain — command listings, search, examples, aliases.

Reads the route registry and alias resolver from the dependency bag;
with an empty bag (as during handler validation) it simply has nothing
to list.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any, ClassVar

from xaheen_cli.cli import exit_codes
from xaheen_cli.core.models import CLICommand, Route
from xaheen_cli.core.route_registry import RouteRegistry
from xaheen_cli.domains.base import BaseDomainHandler

logger = logging.getLogger(__name__)

EXAMPLES: Mapping[str, tuple[tuple[str, str], ...]] = {
    "getting-started": (
        ("xaheen project create my-app", "Create a Next.js project with defaults"),
        ("xaheen make:model User --migration", "Add a model with its migration"),
        ("xaheen make:controller UserController --resource", "Add a resource controller"),
    ),
    "project": (
        ("xaheen project create my-app", "Create a new project with default settings"),
        ("xaheen project create shop --bundle e-commerce --norwegian", "Create from a service bundle"),
        ("xaheen project create blog --framework react --backend express", "Pick framework and backend"),
        ("xaheen project validate", "Validate the current project"),
    ),
    "make": (
        ("xaheen make:model User", "Create a basic model"),
        ("xaheen make:model Product --migration --controller --factory", "Model with related files"),
        ("xaheen make:model Order --all", "Model with every related file"),
        ("xaheen make:controller ProductController --resource", "Resource controller"),
        ("xaheen make:component Button --test --with-stories", "Component with tests and stories"),
    ),
    "ai": (
        ('xaheen ai generate "login form with validation"', "Generate code from a prompt"),
        ('xaheen make:component Card --ai --description "Product card"', "AI-assisted component"),
        ("xaheen mcp suggestions performance", "Performance suggestions from MCP analysis"),
    ),
    "mcp": (
        ("xaheen mcp connect", "Connect to the MCP server"),
        ("xaheen mcp analyze --path ./my-project", "Analyze a specific project"),
        ("xaheen mcp test --suites connectivity --fail-fast", "Run selected MCP test suites"),
    ),
    "deploy": (
        ("xaheen deploy --strategy blue-green", "Generate deployment configuration"),
        ("xaheen deploy docker --build --tag v1.2.0", "Build a Docker image"),
        ("xaheen deploy kubernetes --apply --namespace staging", "Apply manifests"),
        ("xaheen deploy helm --rollback", "Roll back the last Helm release"),
    ),
    "security": (
        ("xaheen security-scan --types code,secrets", "Scan code and secrets"),
        ("xaheen security-audit --standards owasp,nsm --format markdown", "Audit against standards"),
        ("xaheen license-compliance", "Check dependency licenses"),
    ),
}


class HelpHandler(BaseDomainHandler):
    """Renders help from the live route registry."""

    domain: ClassVar[str] = "help"
    actions: ClassVar[tuple[str, ...]] = ("show", "search", "examples", "aliases")

    def __init__(self, dependencies: Mapping[str, Any]) -> None:
        super().__init__(dependencies)
        registry = dependencies.get("registry")
        self._registry: RouteRegistry = registry if registry is not None else RouteRegistry()
        self._aliases = dependencies.get("aliases")
        self._console = dependencies.get("console")

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    def handle_show(self, command: CLICommand) -> int:
        topic = command.target
        if not topic:
            self._render_routes("Available commands", self._registry.all_routes())
            self._out("Run 'xaheen help <topic>' for a domain, or 'xaheen aliases' for shortcuts.")
            return exit_codes.SUCCESS

        routes = self._registry.get_routes_by_domain(topic)
        if not routes:
            routes = [route for route in self._registry.all_routes() if route.pattern.split()[0] == topic]
        if not routes:
            self._out(f"No help found for '{topic}'.")
            return self._suggest(topic)

        self._render_routes(f"Commands for '{topic}'", routes)
        if topic in EXAMPLES:
            self._out(f"Run 'xaheen help examples {topic}' for usage examples.")
        return exit_codes.SUCCESS

    def handle_search(self, command: CLICommand) -> int:
        query = command.arguments.get("query") or command.target or ""
        matches = self._registry.find_routes(query)
        if not matches:
            self._out(f"No commands match '{query}'.")
            return exit_codes.GENERAL_ERROR
        self._render_routes(f"Commands matching '{query}'", matches)
        return exit_codes.SUCCESS

    def handle_examples(self, command: CLICommand) -> int:
        topic = command.target
        if topic and topic not in EXAMPLES:
            self._out(f"No examples for '{topic}'. Topics: {', '.join(EXAMPLES)}")
            return exit_codes.GENERAL_ERROR

        topics = [topic] if topic else list(EXAMPLES)
        rows = [
            [example, description]
            for name in topics
            for example, description in EXAMPLES[name]
        ]
        self._table(f"Examples: {topic}" if topic else "Examples", ["Command", "Description"], rows)
        return exit_codes.SUCCESS

    def handle_aliases(self, command: CLICommand) -> int:
        if self._aliases is None:
            self._out("No aliases configured.")
            return exit_codes.SUCCESS
        self._out(self._aliases.show_alias_help())
        return exit_codes.SUCCESS

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def _suggest(self, topic: str) -> int:
        candidates = self._registry.find_routes(topic)[:5]
        if candidates:
            self._out("Did you mean: " + ", ".join(f"xaheen {route.pattern}" for route in candidates))
        return exit_codes.GENERAL_ERROR

    def _render_routes(self, title: str, routes: Iterable[Route]) -> None:
        rows = [[f"xaheen {route.pattern}", route.summary] for route in routes]
        self._table(title, ["Command", "Description"], rows)

    def _table(self, title: str, columns: list[str], rows: list[list[str]]) -> None:
        if self._console is None:
            logger.debug("No console available; skipping table %r", title)
            return
        self._console.table(title, columns, rows)

    def _out(self, text: str) -> None:
        if self._console is None:
            logger.debug("No console available; dropping output: %s", text)
            return
        self._console.print(text, markup=False)
