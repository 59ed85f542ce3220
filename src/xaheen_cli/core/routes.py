"""Compiled-in route table.

:data:`ROUTE_DEFINITIONS` lists every command the CLI ships with, minus
handlers.  :func:`build_route_table` binds each definition to a
delegate that fetches the domain handler from a
:class:`~xaheen_cli.core.handler_factory.HandlerFactory` at dispatch
time, so no handler module is imported until its domain is invoked.
"""

from __future__ import annotations

import inspect
from dataclasses import replace

from xaheen_cli.core.handler_factory import HandlerFactory
from xaheen_cli.core.models import CLICommand, Route, RouteHandler
from xaheen_cli.exceptions import UnsupportedActionError


def _route(
    pattern: str,
    domain: str,
    action: str,
    description: str,
    *,
    xaheen: tuple[str, ...] = (),
    xala: tuple[str, ...] = (),
) -> Route:
    legacy = {name: verbs for name, verbs in (("xaheen", xaheen), ("xala", xala)) if verbs}
    return Route(
        pattern=pattern,
        domain=domain,
        action=action,
        legacy=legacy,
        description=description,
    )


ROUTE_DEFINITIONS: tuple[Route, ...] = (
    # project
    _route("project create <name>", "project", "create", "Create a new project",
           xaheen=("create",), xala=("init",)),
    _route("project validate", "project", "validate", "Validate the current project",
           xaheen=("validate", "doctor")),
    # app (monorepo apps)
    _route("app create <name>", "app", "create", "Create an app in the monorepo",
           xaheen=("create-app",)),
    _route("app list", "app", "list", "List monorepo apps"),
    _route("app add <name>", "app", "add", "Add an existing app to the monorepo"),
    # package (monorepo packages)
    _route("package create <name>", "package", "create", "Create a package in the monorepo",
           xaheen=("create-package",)),
    _route("package list", "package", "list", "List monorepo packages"),
    _route("package add <name>", "package", "add", "Add an existing package to the monorepo"),
    # service
    _route("service add <service>", "service", "add", "Add a service to the project",
           xaheen=("add",)),
    _route("service remove <service>", "service", "remove", "Remove a service from the project",
           xaheen=("remove",)),
    _route("service list", "service", "list", "List available services",
           xaheen=("bundle list",)),
    # component
    _route("component generate <description>", "component", "generate",
           "Generate a component from a description",
           xala=("generate component", "components generate")),
    _route("component create <name>", "component", "create", "Create a component",
           xala=("create component",)),
    # page
    _route("page generate <description>", "page", "generate", "Generate a page from a description",
           xala=("generate page", "pages generate")),
    _route("page create <name>", "page", "create", "Create a page",
           xala=("create page",)),
    _route("page list", "page", "list", "List pages"),
    # model
    _route("model generate <name>", "model", "generate", "Generate a data model",
           xaheen=("generate-model",), xala=("model generate",)),
    _route("model create <name>", "model", "create", "Create a data model",
           xaheen=("create-model",)),
    _route("model scaffold <name>", "model", "scaffold", "Scaffold a model with related files"),
    _route("model migrate", "model", "migrate", "Run model migrations"),
    # make:* generators
    _route("make:model <name>", "make", "model", "Make a model"),
    _route("make:controller <name>", "make", "controller", "Make a controller"),
    _route("make:service <name>", "make", "service", "Make a service"),
    _route("make:component <name>", "make", "component", "Make a component"),
    _route("make:migration <name>", "make", "migration", "Make a migration"),
    _route("make:seeder <name>", "make", "seeder", "Make a seeder"),
    _route("make:factory <name>", "make", "factory", "Make a factory"),
    _route("make:crud <name>", "make", "crud", "Make a full CRUD resource"),
    _route("make:analyze <filepath>", "make", "analyze", "Analyze a generated file"),
    # theme
    _route("theme create <name>", "theme", "create", "Create a theme",
           xala=("themes create",)),
    _route("theme list", "theme", "list", "List themes",
           xala=("themes list",)),
    # template
    _route("template list", "template", "list", "List templates"),
    _route("template create", "template", "create", "Create a template"),
    _route("template extend <parent>", "template", "extend", "Extend a parent template"),
    _route("template compose", "template", "compose", "Compose templates"),
    _route("template init", "template", "init", "Initialise template support"),
    _route("template generate <name>", "template", "generate", "Generate from a template"),
    # ai
    _route("ai generate <prompt>", "ai", "generate", "Generate code from a prompt",
           xala=("ai generate",)),
    _route("ai code <prompt>", "ai", "code", "Generate a code snippet from a prompt"),
    _route("ai service <description>", "ai", "service", "Generate a service from a description"),
    _route("ai fix-tests", "ai", "fix-tests", "Repair failing tests"),
    _route("ai norwegian <prompt>", "ai", "norwegian", "Generate Norwegian-compliant code"),
    _route("ai index", "ai", "index", "Index the codebase for AI context"),
    # build
    _route("build", "component", "build", "Build the project",
           xala=("build",)),
    # mcp
    _route("mcp connect", "mcp", "connect", "Connect to an MCP server"),
    _route("mcp index", "mcp", "index", "Index the project for MCP"),
    _route("mcp analyze", "mcp", "analyze", "Analyze the project"),
    _route("mcp suggestions [category]", "mcp", "suggestions", "Show improvement suggestions"),
    _route("mcp context", "mcp", "context", "Show the indexed project context"),
    _route("mcp generate <name>", "mcp", "generate", "Generate a component via MCP"),
    _route("mcp list [platform]", "mcp", "list", "List available MCP components"),
    _route("mcp info [platform]", "mcp", "info", "Show MCP server information"),
    _route("mcp disconnect", "mcp", "disconnect", "Disconnect from the MCP server"),
    _route("mcp deploy", "mcp", "deploy", "Deploy the MCP server"),
    _route("mcp test [suite]", "mcp", "test", "Run MCP server tests"),
    # registry
    _route("registry add <components...>", "registry", "add", "Add registry components"),
    _route("registry list", "registry", "list", "List registry components"),
    _route("registry info <component>", "registry", "info", "Show registry component details"),
    _route("registry search <query>", "registry", "search", "Search the component registry"),
    _route("registry build", "registry", "build", "Build the component registry"),
    _route("registry serve", "registry", "serve", "Serve the component registry"),
    # help
    _route("help [topic]", "help", "show", "Show help for a topic"),
    _route("help search <query>", "help", "search", "Search available commands"),
    _route("help examples [topic]", "help", "examples", "Show usage examples"),
    _route("aliases", "help", "aliases", "List command aliases"),
    # docs
    _route("docs generate [type]", "docs", "generate", "Generate project documentation",
           xaheen=("generate docs", "docs")),
    _route("docs portal", "docs", "portal", "Generate the documentation portal"),
    _route("docs onboarding", "docs", "onboarding", "Generate onboarding guides"),
    _route("docs sync", "docs", "sync", "Synchronise documentation"),
    _route("docs watch", "docs", "watch", "Regenerate documentation on change"),
    # security
    _route("security-audit", "security", "audit", "Run a security audit",
           xaheen=("audit",)),
    _route("compliance-report", "security", "compliance", "Generate a compliance report",
           xaheen=("compliance",)),
    _route("license-compliance [project]", "security", "license-compliance",
           "Check dependency license compliance",
           xaheen=("license-scan", "license-check")),
    _route("security-scan [project-path]", "security", "scan", "Run a security scan",
           xaheen=("scan",)),
    # templates
    _route("modernize [target]", "templates", "modernize", "Modernize templates",
           xaheen=("modernize-templates", "upgrade-templates")),
    # deploy
    _route("deploy", "deploy", "generate", "Generate deployment configuration",
           xaheen=("deployment", "deploy-config")),
    _route("deploy version", "deploy", "version", "Manage release versions"),
    _route("deploy docker", "deploy", "docker", "Build or scan Docker images"),
    _route("deploy kubernetes", "deploy", "kubernetes", "Generate or apply Kubernetes manifests"),
    _route("deploy helm", "deploy", "helm", "Manage Helm releases"),
    _route("deploy monitoring", "deploy", "monitoring", "Set up or query monitoring"),
    _route("deploy status", "deploy", "status", "Show deployment status"),
)


def make_delegate(factory: HandlerFactory) -> RouteHandler:
    """Return the route handler that forwards commands to domain handlers.

    The delegate resolves the handler for ``command.domain`` on every
    call, initialises cached handlers, then executes.  The handler's
    result is passed through as the exit code; failures propagate
    unchanged.
    """

    async def dispatch(command: CLICommand) -> int | None:
        handler = factory.create_handler(command.domain)
        await factory.initialize_handlers()

        if not handler.can_handle(command):
            supported = ", ".join(handler.get_supported_actions()) or "none"
            raise UnsupportedActionError(
                f"Action '{command.action}' is not supported by the '{command.domain}' domain",
                domain=command.domain,
                action=command.action,
                hint=f"Supported actions: {supported}",
            )

        result = handler.execute(command)
        if inspect.isawaitable(result):
            result = await result
        return result

    return dispatch


def build_route_table(factory: HandlerFactory) -> list[Route]:
    """Bind every entry of :data:`ROUTE_DEFINITIONS` to *factory*."""
    delegate = make_delegate(factory)
    return [replace(route, handler=delegate) for route in ROUTE_DEFINITIONS]
