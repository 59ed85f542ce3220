"""Command parser — the orchestrator turning argv into handler calls.

Startup wires the routing core together once per process:

1. domain handler constructors (built-in + ``xaheen_cli.domains`` plugins)
   are registered with the :class:`HandlerFactory`;
2. the static route table is registered, each route receiving its own
   ``argparse`` parser carrying the baseline and domain options;
3. aliases are registered (collisions and unresolvable aliases skipped);
4. auxiliary commands (``doctor`` + ``xaheen_cli.commands`` plugins)
   are registered;
5. the global dependency bag is published to the factory.

Dispatch order for one invocation: alias, auxiliary command, longest
literal-word route match, legacy verb, group help for a bare command
word, otherwise
:class:`~xaheen_cli.exceptions.UnknownCommandError`.  Baseline options
typed before the command word are moved behind it first.

Guarantees
----------
* Constructing :class:`CommandParser` twice returns the same object;
  only the first construction initialises.
* Registration problems are logged and skipped, never raised.
* Handler failures propagate to the caller unchanged.
"""

from __future__ import annotations

import argparse
import asyncio
import enum
import inspect
import logging
from collections.abc import Awaitable, Iterable, Mapping, Sequence
from dataclasses import dataclass, replace
from typing import Any, ClassVar, NoReturn

from xaheen_cli.cli import exit_codes
from xaheen_cli.cli.console import console as default_console
from xaheen_cli.core.aliases import DEFAULT_ALIASES, AliasResolver
from xaheen_cli.core.handler_factory import HandlerFactory
from xaheen_cli.core.legacy import LegacyMapper
from xaheen_cli.core.models import Alias, CLICommand, Route
from xaheen_cli.core.options import (
    BASELINE_OPTIONS,
    DOMAIN_OPTIONS,
    OptionSpec,
    options_for,
    validate_option_table,
)
from xaheen_cli.core.patterns import Parameter, RoutePattern, parse_pattern
from xaheen_cli.core.protocols import HandlerConstructor
from xaheen_cli.core.route_registry import RouteRegistry
from xaheen_cli.core.routes import build_route_table
from xaheen_cli.exceptions import CLIError, InvalidArgumentsError, UnknownCommandError
from xaheen_cli.infra.plugins import AuxiliaryCommand, discover_commands, discover_domain_handlers
from xaheen_cli.settings import RuntimeSettings
from xaheen_cli.version import __version__

logger = logging.getLogger(__name__)

PROG = "xaheen"
HELP_FLAGS = frozenset({"-h", "--help"})
VERSION_FLAGS = frozenset({"-V", "--version"})


class ParserState(enum.Enum):
    UNINITIALIZED = "uninitialized"
    INITIALIZING = "initializing"
    READY = "ready"


class ArgumentParser(argparse.ArgumentParser):
    """``argparse`` parser raising :class:`InvalidArgumentsError` on misuse."""

    def error(self, message: str) -> NoReturn:
        raise InvalidArgumentsError(
            f"{self.prog}: {message}",
            hint=f"Run '{self.prog} --help' for usage.",
        )


def add_option(parser: argparse.ArgumentParser, spec: OptionSpec) -> None:
    """Translate one :class:`OptionSpec` into an ``add_argument`` call."""
    kwargs: dict[str, Any] = {"dest": spec.dest, "help": spec.help}
    if spec.kind == "value":
        kwargs.update(default=spec.default, metavar=spec.metavar)
    elif spec.kind == "optional":
        kwargs.update(nargs="?", const=spec.const, default=spec.default, metavar=spec.metavar)
    elif spec.kind == "flag":
        kwargs.update(action="store_true", default=bool(spec.default))
    elif spec.kind == "toggle":
        kwargs.update(action=argparse.BooleanOptionalAction, default=spec.default)
    elif spec.kind == "negated":
        kwargs.update(action="store_false", default=True)
    else:
        raise ValueError(f"Unknown option kind {spec.kind!r} for {spec.flags[0]}")
    parser.add_argument(*spec.flags, **kwargs)


def _add_positional(parser: argparse.ArgumentParser, dest: str, parameter: Parameter) -> None:
    if parameter.variadic:
        nargs = "+" if parameter.required else "*"
    else:
        nargs = None if parameter.required else "?"
    parser.add_argument(dest, metavar=parameter.name, nargs=nargs)


def _alias_arguments(pattern: RoutePattern, target: str | None, supplied: Sequence[str]) -> dict[str, Any]:
    """Map alias positionals onto *pattern*'s parameters like a direct route."""
    arguments: dict[str, Any] = {}
    for index, parameter in enumerate(pattern.parameters):
        if parameter.variadic:
            arguments[parameter.dest] = tuple(supplied[index:])
        else:
            arguments[parameter.dest] = supplied[index] if index < len(supplied) else None
    return {"target": target, **arguments}


async def _await(awaitable: Awaitable[Any]) -> Any:
    return await awaitable


def split_leading_options(tokens: Sequence[str]) -> tuple[list[str], list[str]]:
    """Separate baseline options typed before the command word.

    ``xaheen -v --config x.json project create shop`` becomes
    ``(["project", "create", "shop"], ["-v", "--config", "x.json"])`` so
    the caller can re-append the options after the command tokens.
    """
    known = {flag for spec in BASELINE_OPTIONS for flag in spec.option_strings}
    takes_value = {flag for spec in BASELINE_OPTIONS if spec.kind == "value" for flag in spec.flags}

    leading: list[str] = []
    index = 0
    while index < len(tokens):
        token = tokens[index]
        name = token.split("=", 1)[0]
        if name not in known:
            break
        leading.append(token)
        index += 1
        if name in takes_value and "=" not in token and index < len(tokens):
            leading.append(tokens[index])
            index += 1
    return list(tokens[index:]), leading


@dataclass(frozen=True, slots=True)
class CompiledRoute:
    """A registered route with its parsed pattern and argv parser."""

    route: Route
    pattern: RoutePattern
    parser: argparse.ArgumentParser
    positionals: tuple[tuple[Parameter, str], ...]
    """Pattern parameters paired with their internal argparse dests."""


class CommandParser:
    """Process-wide orchestrator.  See module docstring for the flow.

    Parameters
    ----------
    settings:
        Runtime settings; defaults to :class:`RuntimeSettings` defaults.
    console:
        Output sink published to handlers as ``console``.
    handlers:
        ``{domain: constructor}``; ``None`` means built-ins plus
        discovered plugins.
    routes:
        Routes to register; ``None`` means the compiled-in table.
    aliases:
        Alias set; ``None`` means :data:`DEFAULT_ALIASES`.
    commands:
        Auxiliary commands; ``None`` means ``doctor`` plus plugins.
    option_table:
        Per-domain option additions.
    """

    _instance: ClassVar[CommandParser | None] = None

    def __new__(cls, *args: Any, **kwargs: Any) -> CommandParser:
        if cls._instance is None:
            instance = super().__new__(cls)
            instance._state = ParserState.UNINITIALIZED
            cls._instance = instance
        return cls._instance

    def __init__(
        self,
        settings: RuntimeSettings | None = None,
        *,
        console: Any = None,
        handlers: Mapping[str, HandlerConstructor] | None = None,
        routes: Iterable[Route] | None = None,
        aliases: Iterable[Alias] | None = None,
        commands: Iterable[AuxiliaryCommand] | None = None,
        option_table: Mapping[tuple[str, str | None], tuple[OptionSpec, ...]] = DOMAIN_OPTIONS,
    ) -> None:
        if self._state is not ParserState.UNINITIALIZED:
            logger.debug("Command parser already %s; reusing", self._state.value)
            return

        self._state = ParserState.INITIALIZING
        try:
            self._settings = settings or RuntimeSettings()
            self._console = console or default_console
            self._option_table = option_table
            self._registry = RouteRegistry()
            self._factory = HandlerFactory()
            self._legacy_mapper = LegacyMapper(self._registry)
            self._compiled: dict[str, CompiledRoute] = {}
            self._verb_owners: dict[str, str] = {}
            self._commands: dict[str, AuxiliaryCommand] = {}
            self._alias_resolver = AliasResolver((), self.find_route_for_command)

            self._register_handlers(handlers)
            self._register_routes(build_route_table(self._factory) if routes is None else routes)
            self._register_aliases(DEFAULT_ALIASES if aliases is None else aliases)
            self._register_commands(commands)
            self._factory.set_global_dependencies(
                {
                    "settings": self._settings,
                    "console": self._console,
                    "registry": self._registry,
                    "aliases": self._alias_resolver,
                },
            )
        except BaseException:
            self._state = ParserState.UNINITIALIZED
            raise

        self._state = ParserState.READY
        logger.debug(
            "Command parser ready: %d routes, %d aliases, %d commands",
            len(self._registry),
            len(self._alias_resolver.aliases),
            len(self._commands),
        )

    @classmethod
    def get_instance(cls) -> CommandParser:
        """Return the process-wide parser, constructing it with defaults if needed."""
        return cls._instance if cls._instance is not None else cls()

    @classmethod
    def reset(cls) -> None:
        """Discard the process-wide parser (test use only)."""
        cls._instance = None

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def state(self) -> ParserState:
        return self._state

    @property
    def settings(self) -> RuntimeSettings:
        return self._settings

    @property
    def console(self) -> Any:
        return self._console

    @property
    def option_table(self) -> Mapping[tuple[str, str | None], tuple[OptionSpec, ...]]:
        return self._option_table

    @property
    def routes(self) -> RouteRegistry:
        return self._registry

    @property
    def factory(self) -> HandlerFactory:
        return self._factory

    @property
    def alias_resolver(self) -> AliasResolver:
        return self._alias_resolver

    @property
    def legacy_mapper(self) -> LegacyMapper:
        return self._legacy_mapper

    @property
    def commands(self) -> Mapping[str, AuxiliaryCommand]:
        return dict(self._commands)

    def find_route_for_command(self, command: CLICommand) -> Route | None:
        return self._registry.find_route_for_command(command)

    def find_route_by_legacy(self, cli_name: str, verb: str) -> Route | None:
        return self._legacy_mapper.find_route_by_legacy(cli_name, verb)

    def command_names(self) -> list[str]:
        """Every top-level token: route verbs, aliases and auxiliary commands."""
        names = [*self._verb_owners, *(alias.alias for alias in self._alias_resolver.aliases)]
        names.extend(self._commands)
        return names

    # ------------------------------------------------------------------
    # Startup
    # ------------------------------------------------------------------

    def _register_handlers(self, handlers: Mapping[str, HandlerConstructor] | None) -> None:
        if handlers is None:
            from xaheen_cli.domains import BUILTIN_HANDLERS

            handlers = dict(BUILTIN_HANDLERS)
            for domain, constructor in discover_domain_handlers().items():
                if domain in handlers:
                    logger.warning("Plugin for built-in domain %r ignored", domain)
                    continue
                handlers[domain] = constructor

        for domain, constructor in handlers.items():
            try:
                self._factory.register_handler(domain, constructor)
            except TypeError as exc:
                logger.warning("Skipping handler for domain %r: %s", domain, exc)

    def _register_routes(self, routes: Iterable[Route]) -> None:
        for problem in validate_option_table(self._option_table):
            logger.warning("Option table: %s", problem)

        for route in routes:
            try:
                self._register_route(route)
            except Exception as exc:  # noqa: BLE001
                logger.warning("Skipping route %r: %s", getattr(route, "pattern", route), exc)

    def _register_route(self, route: Route) -> None:
        pattern = parse_pattern(route.pattern)
        if self._registry.has_route(route.pattern):
            logger.debug("Route %r already registered; skipping", route.pattern)
            return

        owner = self._verb_owners.get(pattern.verb)
        if owner is not None and owner != route.domain:
            logger.warning(
                "Skipping route %r: command %r already belongs to domain %r",
                route.pattern,
                pattern.verb,
                owner,
            )
            return

        compiled = self._compile(route, pattern)
        self._verb_owners.setdefault(pattern.verb, route.domain)
        self._registry.register_route(route)
        self._compiled[route.pattern] = compiled

    def _compile(self, route: Route, pattern: RoutePattern) -> CompiledRoute:
        parser = ArgumentParser(
            prog=f"{PROG} {' '.join(pattern.words)}",
            description=route.summary,
        )
        positionals = []
        for index, parameter in enumerate(pattern.parameters):
            dest = f"_arg{index}"
            _add_positional(parser, dest, parameter)
            positionals.append((parameter, dest))
        for spec in options_for(route.domain, route.action, self._option_table):
            add_option(parser, spec)
        return CompiledRoute(route=route, pattern=pattern, parser=parser, positionals=tuple(positionals))

    def _register_aliases(self, aliases: Iterable[Alias]) -> None:
        accepted: list[Alias] = []
        seen: set[str] = set()
        for alias in aliases:
            try:
                if self._accept_alias(alias, seen):
                    accepted.append(alias)
                    seen.add(alias.alias)
            except Exception as exc:  # noqa: BLE001
                logger.warning("Failed to register alias %r: %s", getattr(alias, "alias", alias), exc)

        self._alias_resolver = AliasResolver(accepted, self.find_route_for_command)

    def _accept_alias(self, alias: Alias, seen: set[str]) -> bool:
        if alias.alias in self._settings.disabled_aliases:
            logger.debug("Alias %r disabled by configuration", alias.alias)
            return False
        if alias.alias in self._verb_owners or alias.alias in seen:
            logger.warning("Alias %r conflicts with an existing command; skipping", alias.alias)
            return False
        expanded = AliasResolver.expand(alias)
        if expanded is None or self.find_route_for_command(expanded) is None:
            logger.warning(
                "Alias %r does not resolve to a known command (%s); skipping",
                alias.alias,
                alias.original_command,
            )
            return False
        return True

    def _register_commands(self, commands: Iterable[AuxiliaryCommand] | None) -> None:
        if commands is None:
            from xaheen_cli.cli.doctor import DoctorCommand

            commands = [DoctorCommand(), *discover_commands()]

        for command in commands:
            try:
                name = command.name
                if name in self._verb_owners or self._alias_resolver.is_alias(name) or name in self._commands:
                    logger.warning("Command %r conflicts with an existing command; skipping", name)
                    continue
                self._commands[name] = command
            except Exception as exc:  # noqa: BLE001
                logger.warning("Failed to register command %r: %s", command, exc)

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def parse(self, argv: Sequence[str]) -> int:
        """Dispatch *argv* (without the program name) and return an exit code."""
        words, leading = split_leading_options(argv)
        if not words or words[0] in HELP_FLAGS:
            self._console.print(self.format_help(), markup=False)
            return exit_codes.SUCCESS
        if words[0] in VERSION_FLAGS:
            self._console.print(f"{PROG} {__version__}", markup=False)
            return exit_codes.SUCCESS

        tokens = [*words, *leading]
        head = tokens[0]
        if self._alias_resolver.is_alias(head):
            return self._dispatch_alias(head, tokens[1:])

        command = self._commands.get(head)
        if command is not None:
            logger.debug("Running auxiliary command %r", head)
            return command.run(self, tokens[1:])

        compiled = self._match(tokens)
        if compiled is not None:
            return self._dispatch_route(compiled, tokens[len(compiled.pattern.words):])

        if self._settings.legacy_commands:
            legacy = self._legacy_mapper.resolve(tokens)
            if legacy is not None:
                logger.warning(
                    "'%s %s' is deprecated; use '%s %s' instead",
                    legacy.cli_name,
                    legacy.verb,
                    PROG,
                    legacy.route.pattern,
                )
                return self._dispatch_route(
                    self._compiled[legacy.route.pattern],
                    tokens[legacy.consumed:],
                )

        if head in self._verb_owners and (len(words) == 1 or words[1] in HELP_FLAGS):
            self._console.print(self.format_group_help(head), markup=False)
            return exit_codes.SUCCESS

        raise UnknownCommandError(
            f"Unknown command: {' '.join(token for token in tokens[:2] if not token.startswith('-'))}",
            hint=self._suggest(head),
        )

    def _match(self, tokens: Sequence[str]) -> CompiledRoute | None:
        """Return the route whose literal words form the longest argv prefix."""
        best: CompiledRoute | None = None
        for compiled in self._compiled.values():
            words = compiled.pattern.words
            if tuple(tokens[: len(words)]) != words:
                continue
            if best is None or len(words) > len(best.pattern.words):
                best = compiled
        return best

    def _dispatch_route(self, compiled: CompiledRoute, rest: Sequence[str]) -> int:
        namespace = compiled.parser.parse_args(list(rest))
        command = self._build_command(compiled, vars(namespace))
        logger.debug("Dispatching %s %s (target=%r)", command.domain, command.action, command.target)
        return self._invoke(compiled.route, command)

    @staticmethod
    def _build_command(compiled: CompiledRoute, values: dict[str, Any]) -> CLICommand:
        arguments: dict[str, Any] = {}
        target: str | None = None
        for index, (parameter, dest) in enumerate(compiled.positionals):
            value = values.pop(dest)
            if parameter.variadic:
                value = tuple(value or ())
            arguments[parameter.dest] = value
            if index == 0:
                target = (value[0] if value else None) if parameter.variadic else value

        return CLICommand(
            domain=compiled.route.domain,
            action=compiled.route.action,
            target=target,
            arguments={"target": target, **arguments},
            options=values,
        )

    def _dispatch_alias(self, token: str, rest: Sequence[str]) -> int:
        alias = self._alias_resolver.get_alias(token)
        parser = self._alias_parser(alias) if alias else ArgumentParser(prog=f"{PROG} {token}")
        namespace, unknown = parser.parse_known_args(list(rest))
        if unknown:
            logger.debug("Ignoring unrecognised arguments for alias %r: %s", token, " ".join(unknown))

        values = vars(namespace)
        targets = values.pop("targets", [])
        resolution = self._alias_resolver.process_arguments([token, *targets])
        if not resolution.resolved or resolution.command is None:
            logger.error("Failed to resolve alias: %s", token)
            return exit_codes.GENERAL_ERROR

        route = self.find_route_for_command(resolution.command)
        if route is None or route.handler is None:
            original = alias.original_command if alias else token
            logger.error("No handler found for aliased command: %s", original)
            return exit_codes.GENERAL_ERROR

        preset = alias is not None and len(alias.original_command.split()) > 2
        supplied = [resolution.command.target, *targets] if preset else list(targets)
        command = replace(
            resolution.command,
            arguments=_alias_arguments(parse_pattern(route.pattern), resolution.command.target, supplied),
            options=values,
        )
        logger.debug("Alias %r resolved to %s %s", token, command.domain, command.action)
        return self._invoke(route, command)

    def _alias_parser(self, alias: Alias) -> argparse.ArgumentParser:
        parser = ArgumentParser(
            prog=f"{PROG} {alias.alias}",
            description=f"{alias.description} (alias for {alias.original_command})",
        )
        parser.add_argument("targets", metavar="target", nargs="*")
        parts = alias.original_command.split()
        domain, action = (parts[0], parts[1]) if len(parts) >= 2 else ("", "")
        for spec in options_for(domain, action, self._option_table):
            add_option(parser, spec)
        return parser

    @staticmethod
    def _invoke(route: Route, command: CLICommand) -> int:
        if route.handler is None:
            raise CLIError(
                f"Route '{route.pattern}' has no handler",
                domain=route.domain,
                action=route.action,
            )
        result = route.handler(command)
        if inspect.isawaitable(result):
            result = asyncio.run(_await(result))
        if isinstance(result, int) and not isinstance(result, bool):
            return result
        return exit_codes.SUCCESS

    # ------------------------------------------------------------------
    # Help
    # ------------------------------------------------------------------

    def _suggest(self, head: str) -> str:
        candidates = self._registry.find_routes(head)[:3]
        if candidates:
            return "Did you mean: " + ", ".join(f"{PROG} {route.pattern}" for route in candidates)
        return f"Run '{PROG} --help' to list available commands."

    def format_group_help(self, verb: str) -> str:
        """Return the listing of every route under the top-level *verb*."""
        routes = [c.route for c in self._compiled.values() if c.pattern.verb == verb]
        width = max(len(route.pattern) for route in routes)
        lines = [f"Usage: {PROG} {verb} <command> [options]", "", "Commands:"]
        lines.extend(f"  {route.pattern:<{width}}  {route.summary}" for route in routes)
        return "\n".join(lines)

    def format_help(self) -> str:
        """Return the top-level overview shown for ``xaheen --help``."""
        routes = [compiled.route for compiled in self._compiled.values()]
        width = max([len(route.pattern) for route in routes] + [len(name) for name in self._commands] + [10])

        lines = [
            f"Usage: {PROG} <domain> <action> [target] [options]",
            f"       {PROG} <alias> [target] [options]",
            "",
            "Commands:",
        ]
        lines.extend(f"  {route.pattern:<{width}}  {route.summary}" for route in routes)
        lines.extend(f"  {name:<{width}}  {command.help}" for name, command in self._commands.items())
        if self._alias_resolver.aliases:
            lines.append("")
            lines.append("Aliases: " + ", ".join(alias.alias for alias in self._alias_resolver.aliases))
        lines.extend(
            [
                "",
                "Options accepted by every command:",
                "  -v, --verbose    Enable verbose logging",
                "  --dry-run        Show what would be done without executing",
                "  --config PATH    Path to configuration file",
                "",
                f"Run '{PROG} <command> --help' for command options.",
            ],
        )
        return "\n".join(lines)
