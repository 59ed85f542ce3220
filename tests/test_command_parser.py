"""Tests for the command parser orchestrator (cli/parser.py)."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from typing import Any

import pytest

from conftest import AsyncRecordingHandler, RecordingConsole, RecordingHandler, make_route
from xaheen_cli.cli.parser import CommandParser, ParserState
from xaheen_cli.core.models import Alias, CLICommand
from xaheen_cli.core.options import OptionSpec
from xaheen_cli.core.routes import ROUTE_DEFINITIONS
from xaheen_cli.exceptions import CLIError, InvalidArgumentsError, UnknownCommandError
from xaheen_cli.settings import RuntimeSettings
from xaheen_cli.version import __version__

DOMAINS = (
    "project", "app", "package", "service", "component", "page", "model", "make",
    "theme", "template", "ai", "mcp", "registry", "help", "docs", "security",
    "templates", "deploy",
)


class CatchAllHandler(RecordingHandler):
    def can_handle(self, command: CLICommand) -> bool:
        return True


class EchoCommand:
    name = "echo"
    help = "Echo the remaining arguments"

    def __init__(self, name: str = "echo", result: int = 3) -> None:
        self.name = name
        self.result = result
        self.calls: list[tuple[Any, list[str]]] = []

    def run(self, parser: Any, argv: Sequence[str]) -> int:
        self.calls.append((parser, list(argv)))
        return self.result


@pytest.fixture
def handlers() -> dict[str, CatchAllHandler]:
    return {domain: CatchAllHandler({}, domain=domain) for domain in DOMAINS}


@pytest.fixture
def wired(
    build_parser: Callable[..., CommandParser],
    handlers: dict[str, CatchAllHandler],
) -> Callable[..., CommandParser]:
    """Build a parser over the full route table with recording handlers."""

    def build(**kwargs: Any) -> CommandParser:
        kwargs.setdefault(
            "handlers",
            {domain: (lambda deps, handler=handler: handler) for domain, handler in handlers.items()},
        )
        return build_parser(**kwargs)

    return build


def _last(handler: RecordingHandler) -> CLICommand:
    assert handler.executed, "handler was not executed"
    return handler.executed[-1]


# ---------------------------------------------------------------------------
# Lifecycle
# ---------------------------------------------------------------------------

class TestLifecycle:
    def test_singleton(self, build_parser: Callable[..., CommandParser]) -> None:
        first = build_parser(settings=RuntimeSettings(log_level="DEBUG"))
        second = CommandParser(settings=RuntimeSettings(log_level="ERROR"))
        assert first is second
        assert second.settings.log_level == "DEBUG"
        assert CommandParser.get_instance() is first

    def test_reset_discards_instance(self, build_parser: Callable[..., CommandParser]) -> None:
        first = build_parser()
        CommandParser.reset()
        assert build_parser() is not first

    def test_ready_after_construction(self, build_parser: Callable[..., CommandParser]) -> None:
        assert build_parser().state is ParserState.READY

    def test_failed_initialisation_can_be_retried(self, build_parser: Callable[..., CommandParser]) -> None:
        def broken_routes():  # type: ignore[no-untyped-def]
            raise RuntimeError("route table unavailable")
            yield  # pragma: no cover

        with pytest.raises(RuntimeError, match="route table unavailable"):
            build_parser(routes=broken_routes())
        assert CommandParser.get_instance().state is ParserState.UNINITIALIZED

        assert build_parser().state is ParserState.READY

    def test_registers_full_table(self, wired: Callable[..., CommandParser]) -> None:
        parser = wired()
        assert len(parser.routes) == len(ROUTE_DEFINITIONS)
        assert parser.alias_resolver.is_alias("c")
        assert parser.commands == {}

    def test_global_dependencies(self, wired: Callable[..., CommandParser], recording_console: RecordingConsole) -> None:
        settings = RuntimeSettings()
        parser = wired(settings=settings)
        deps = parser.factory.global_dependencies
        assert set(deps) == {"settings", "console", "registry", "aliases"}
        assert deps["settings"] is settings
        assert deps["console"] is recording_console
        assert deps["registry"] is parser.routes
        assert deps["aliases"] is parser.alias_resolver

    def test_command_names(self, wired: Callable[..., CommandParser]) -> None:
        names = wired(commands=[EchoCommand()]).command_names()
        assert {"project", "make:model", "c", "k8s", "echo"} <= set(names)

    def test_find_route_by_legacy(self, wired: Callable[..., CommandParser]) -> None:
        route = wired().find_route_by_legacy("xaheen", "create")
        assert route is not None
        assert route.pattern == "project create <name>"


# ---------------------------------------------------------------------------
# Startup registration
# ---------------------------------------------------------------------------

class TestRegistration:
    def test_verb_owned_by_other_domain(
        self,
        build_parser: Callable[..., CommandParser],
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        parser = build_parser(
            routes=[make_route("demo run", "demo", "run"), make_route("demo stop", "other", "stop")],
            aliases=[],
        )
        assert parser.routes.has_route("demo run")
        assert not parser.routes.has_route("demo stop")
        assert "already belongs to domain 'demo'" in caplog.text

    def test_duplicate_pattern_keeps_first(self, build_parser: Callable[..., CommandParser]) -> None:
        first = make_route("demo run", "demo", "run", description="first")
        parser = build_parser(
            routes=[first, make_route("demo run", "demo", "run", description="second")],
            aliases=[],
        )
        assert len(parser.routes) == 1
        assert parser.routes.get_route("demo run") is first

    def test_malformed_pattern_skipped(
        self,
        build_parser: Callable[..., CommandParser],
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        parser = build_parser(routes=[make_route("demo <name> tail", "demo", "run")], aliases=[])
        assert len(parser.routes) == 0
        assert "Skipping route 'demo <name> tail'" in caplog.text

    def test_uncallable_handler_skipped(
        self,
        build_parser: Callable[..., CommandParser],
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        parser = build_parser(handlers={"project": "not callable"})
        assert not parser.factory.has_handler("project")
        assert "Skipping handler for domain 'project'" in caplog.text

    def test_plugin_cannot_replace_builtin_domain(
        self,
        build_parser: Callable[..., CommandParser],
        monkeypatch: pytest.MonkeyPatch,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        from xaheen_cli.domains.help import HelpHandler

        monkeypatch.setattr(
            "xaheen_cli.cli.parser.discover_domain_handlers",
            lambda: {"help": CatchAllHandler, "project": CatchAllHandler},
        )
        parser = build_parser(handlers=None)
        assert isinstance(parser.factory.create_handler("help"), HelpHandler)
        assert isinstance(parser.factory.create_handler("project"), CatchAllHandler)
        assert "Plugin for built-in domain 'help' ignored" in caplog.text

    def test_option_table_problems_logged(
        self,
        build_parser: Callable[..., CommandParser],
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        build_parser(
            routes=[make_route("demo run", "demo", "run")],
            aliases=[],
            option_table={("demo", None): (OptionSpec(("--dry-run",), "again"),)},
        )
        assert "Option table:" in caplog.text

    def test_alias_colliding_with_verb(
        self,
        wired: Callable[..., CommandParser],
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        parser = wired(aliases=[Alias("project", "project validate", "shadow")])
        assert not parser.alias_resolver.is_alias("project")
        assert "conflicts with an existing command" in caplog.text

    def test_broken_alias_does_not_abort_startup(
        self,
        wired: Callable[..., CommandParser],
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        parser = wired(
            aliases=[
                Alias("bad", None, "broken"),  # type: ignore[arg-type]
                Alias("v", "project validate", "Validate the current project"),
            ],
        )
        assert parser.state is ParserState.READY
        assert not parser.alias_resolver.is_alias("bad")
        assert parser.alias_resolver.is_alias("v")
        assert "Failed to register alias 'bad'" in caplog.text

    def test_broken_command_does_not_abort_startup(
        self,
        build_parser: Callable[..., CommandParser],
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        class NamelessCommand:
            help = "No name"

            @property
            def name(self) -> str:
                raise RuntimeError("name unavailable")

            def run(self, parser: Any, argv: Sequence[str]) -> int:
                return 0

        echo = EchoCommand()
        parser = build_parser(routes=[], aliases=[], commands=[NamelessCommand(), echo])

        assert list(parser.commands) == ["echo"]
        assert "Failed to register command" in caplog.text
        assert "name unavailable" in caplog.text

    def test_duplicate_alias_keeps_first(
        self,
        wired: Callable[..., CommandParser],
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        parser = wired(
            aliases=[Alias("q", "project validate", "first"), Alias("q", "project create", "second")],
        )
        alias = parser.alias_resolver.get_alias("q")
        assert alias is not None
        assert alias.description == "first"
        assert "'q' conflicts" in caplog.text

    def test_unresolvable_alias(
        self,
        wired: Callable[..., CommandParser],
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        parser = wired(aliases=[Alias("zz", "nothing here", "broken"), Alias("one", "lonely", "x")])
        assert parser.alias_resolver.aliases == ()
        assert "'zz' does not resolve to a known command" in caplog.text
        assert "'one' does not resolve" in caplog.text

    def test_disabled_alias(self, wired: Callable[..., CommandParser]) -> None:
        parser = wired(settings=RuntimeSettings(disabled_aliases=frozenset({"c", "k8s"})))
        assert not parser.alias_resolver.is_alias("c")
        assert not parser.alias_resolver.is_alias("k8s")
        assert parser.alias_resolver.is_alias("g")

    def test_command_collisions(
        self,
        wired: Callable[..., CommandParser],
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        parser = wired(
            commands=[EchoCommand("project"), EchoCommand("c"), EchoCommand("echo"), EchoCommand("echo")],
        )
        assert list(parser.commands) == ["echo"]
        assert caplog.text.count("conflicts with an existing command") == 3

    def test_default_commands_include_doctor(
        self,
        wired: Callable[..., CommandParser],
        monkeypatch: pytest.MonkeyPatch,
    ) -> None:
        monkeypatch.setattr("xaheen_cli.cli.parser.discover_commands", lambda: [EchoCommand()])
        parser = wired(commands=None)
        assert list(parser.commands) == ["doctor", "echo"]


# ---------------------------------------------------------------------------
# Route dispatch
# ---------------------------------------------------------------------------

class TestRouteDispatch:
    def test_arguments_and_options(
        self,
        wired: Callable[..., CommandParser],
        handlers: dict[str, CatchAllHandler],
    ) -> None:
        code = wired().parse(["project", "create", "shop", "--framework", "vue", "--norwegian"])

        assert code == 0
        command = _last(handlers["project"])
        assert (command.domain, command.action, command.target) == ("project", "create", "shop")
        assert dict(command.arguments) == {"target": "shop", "name": "shop"}
        assert command.options["framework"] == "vue"
        assert command.options["norwegian"] is True
        assert command.options["platform"] == "web"
        assert command.options["package_manager"] == "pnpm"
        assert command.options["dry_run"] is False
        assert command.options["verbose"] is False
        assert command.options["config"] is None

    def test_route_without_parameters(
        self,
        wired: Callable[..., CommandParser],
        handlers: dict[str, CatchAllHandler],
    ) -> None:
        wired().parse(["project", "validate", "--dry-run"])
        command = _last(handlers["project"])
        assert command.action == "validate"
        assert command.target is None
        assert dict(command.arguments) == {"target": None}
        assert command.options["dry_run"] is True

    def test_optional_parameter_absent(
        self,
        wired: Callable[..., CommandParser],
        handlers: dict[str, CatchAllHandler],
    ) -> None:
        wired().parse(["security-scan"])
        command = _last(handlers["security"])
        assert command.action == "scan"
        assert command.target is None
        assert command.arguments["project_path"] is None

    def test_positional_and_option_may_share_a_name(
        self,
        wired: Callable[..., CommandParser],
        handlers: dict[str, CatchAllHandler],
    ) -> None:
        wired().parse(["modernize", "legacy/", "--target", "*.tpl"])
        command = _last(handlers["templates"])
        assert command.target == "legacy/"
        assert command.arguments["target"] == "legacy/"
        assert command.options["target"] == "*.tpl"

    def test_longest_literal_match_wins(
        self,
        wired: Callable[..., CommandParser],
        handlers: dict[str, CatchAllHandler],
    ) -> None:
        parser = wired()

        parser.parse(["help", "search", "deploy"])
        search = _last(handlers["help"])
        assert search.action == "search"
        assert search.arguments["query"] == "deploy"

        parser.parse(["help", "deploy"])
        show = _last(handlers["help"])
        assert show.action == "show"
        assert show.target == "deploy"

    def test_colon_verb(self, wired: Callable[..., CommandParser], handlers: dict[str, CatchAllHandler]) -> None:
        wired().parse(["make:model", "User", "--migration"])
        command = _last(handlers["make"])
        assert (command.action, command.target) == ("model", "User")
        assert command.options["migration"] is True
        assert command.options["controller"] is False

    def test_variadic_parameter(
        self,
        wired: Callable[..., CommandParser],
        handlers: dict[str, CatchAllHandler],
    ) -> None:
        wired().parse(["registry", "add", "button", "card", "dialog"])
        command = _last(handlers["registry"])
        assert command.target == "button"
        assert command.arguments["components"] == ("button", "card", "dialog")

    def test_variadic_required(self, wired: Callable[..., CommandParser]) -> None:
        with pytest.raises(InvalidArgumentsError):
            wired().parse(["registry", "add"])

    def test_toggle_options(
        self,
        wired: Callable[..., CommandParser],
        handlers: dict[str, CatchAllHandler],
    ) -> None:
        parser = wired()

        parser.parse(["security-scan"])
        assert _last(handlers["security"]).options["ai_enhanced"] is True

        parser.parse(["security-scan", "--no-ai-enhanced"])
        assert _last(handlers["security"]).options["ai_enhanced"] is False

    def test_negated_option(
        self,
        wired: Callable[..., CommandParser],
        handlers: dict[str, CatchAllHandler],
    ) -> None:
        parser = wired()

        parser.parse(["deploy"])
        assert _last(handlers["deploy"]).options["interactive"] is True

        parser.parse(["deploy", "--no-interactive", "--strategy", "canary"])
        command = _last(handlers["deploy"])
        assert command.action == "generate"
        assert command.options["interactive"] is False
        assert command.options["strategy"] == "canary"

    @pytest.mark.parametrize(
        ("argv", "expected"),
        [
            ([], None),
            (["--rollback"], "previous"),
            (["--rollback", "7"], "7"),
        ],
    )
    def test_optional_value_option(
        self,
        wired: Callable[..., CommandParser],
        handlers: dict[str, CatchAllHandler],
        argv: list[str],
        expected: str | None,
    ) -> None:
        wired().parse(["deploy", "kubernetes", *argv])
        command = _last(handlers["deploy"])
        assert command.action == "kubernetes"
        assert command.options["rollback"] == expected
        assert command.options["namespace"] is None

    def test_missing_required_argument(self, wired: Callable[..., CommandParser]) -> None:
        with pytest.raises(InvalidArgumentsError) as exc_info:
            wired().parse(["project", "create"])
        assert "xaheen project create" in exc_info.value.message
        assert exc_info.value.hint is not None

    def test_unknown_option(self, wired: Callable[..., CommandParser]) -> None:
        with pytest.raises(InvalidArgumentsError, match="--bogus"):
            wired().parse(["project", "create", "shop", "--bogus"])

    def test_option_for_other_action_rejected(self, wired: Callable[..., CommandParser]) -> None:
        with pytest.raises(InvalidArgumentsError):
            wired().parse(["project", "validate", "--framework", "vue"])


# ---------------------------------------------------------------------------
# Handler results
# ---------------------------------------------------------------------------

class TestHandlerResults:
    def test_int_result_is_exit_code(self, build_parser: Callable[..., CommandParser]) -> None:
        parser = build_parser(handlers={"project": lambda deps: RecordingHandler(deps, result=2)})
        assert parser.parse(["project", "validate"]) == 2

    @pytest.mark.parametrize("result", [None, True, "done"])
    def test_non_int_result_is_success(self, build_parser: Callable[..., CommandParser], result: Any) -> None:
        parser = build_parser(handlers={"project": lambda deps: RecordingHandler(deps, result=result)})
        assert parser.parse(["project", "validate"]) == 0

    def test_async_handler(self, build_parser: Callable[..., CommandParser]) -> None:
        parser = build_parser(handlers={"project": lambda deps: AsyncRecordingHandler(deps, result=4)})

        assert parser.parse(["project", "create", "shop"]) == 4

        handler = parser.factory.get_handler("project")
        assert isinstance(handler, AsyncRecordingHandler)
        assert _last(handler).target == "shop"
        assert len(handler.initialized_with) == 1
        assert "registry" in handler.initialized_with[0]

    def test_handler_receives_global_dependencies(self, build_parser: Callable[..., CommandParser]) -> None:
        parser = build_parser(handlers={"project": RecordingHandler})
        parser.parse(["project", "validate"])
        handler = parser.factory.get_handler("project")
        assert isinstance(handler, RecordingHandler)
        assert handler.dependencies["settings"] is parser.settings

    def test_handler_failure_propagates(self, build_parser: Callable[..., CommandParser]) -> None:
        class Exploding(RecordingHandler):
            def execute(self, command: CLICommand) -> None:
                raise RuntimeError("disk full")

        parser = build_parser(handlers={"project": Exploding})
        with pytest.raises(RuntimeError, match="disk full"):
            parser.parse(["project", "validate"])

    def test_route_without_handler(self, build_parser: Callable[..., CommandParser]) -> None:
        parser = build_parser(routes=[make_route("demo run", "demo", "run", handler=None)], aliases=[])
        with pytest.raises(CLIError, match="has no handler") as exc_info:
            parser.parse(["demo", "run"])
        assert exc_info.value.domain == "demo"

    def test_direct_route_handler(self, build_parser: Callable[..., CommandParser]) -> None:
        received: list[CLICommand] = []

        def handler(command: CLICommand) -> int:
            received.append(command)
            return 5

        parser = build_parser(routes=[make_route("demo run [what]", "demo", "run", handler=handler)], aliases=[])
        assert parser.parse(["demo", "run", "fast"]) == 5
        assert received[0].target == "fast"


# ---------------------------------------------------------------------------
# Aliases
# ---------------------------------------------------------------------------

class TestAliasDispatch:
    def test_alias_with_options(
        self,
        wired: Callable[..., CommandParser],
        handlers: dict[str, CatchAllHandler],
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        caplog.set_level(logging.DEBUG, logger="xaheen_cli")

        code = wired().parse(["c", "Button", "--dry-run", "--bogus"])

        assert code == 0
        command = _last(handlers["component"])
        assert (command.domain, command.action, command.target) == ("component", "create", "Button")
        assert command.options["dry_run"] is True
        assert "bogus" not in command.options
        assert "Ignoring unrecognised arguments for alias 'c': --bogus" in caplog.text

    def test_alias_uses_domain_options(
        self,
        wired: Callable[..., CommandParser],
        handlers: dict[str, CatchAllHandler],
    ) -> None:
        wired().parse(["k8s", "--apply", "--namespace", "prod"])
        command = _last(handlers["deploy"])
        assert command.action == "kubernetes"
        assert command.target is None
        assert command.options["apply"] is True
        assert command.options["namespace"] == "prod"

    def test_preset_target(
        self,
        wired: Callable[..., CommandParser],
        handlers: dict[str, CatchAllHandler],
    ) -> None:
        wired().parse(["auth", "oauth"])
        command = _last(handlers["service"])
        assert (command.action, command.target) == ("add", "auth")

    def test_alias_positional_target(
        self,
        wired: Callable[..., CommandParser],
        handlers: dict[str, CatchAllHandler],
    ) -> None:
        wired().parse(["new", "shop"])
        command = _last(handlers["project"])
        assert (command.action, command.target) == ("create", "shop")

    def test_alias_arguments_match_direct_route(
        self,
        wired: Callable[..., CommandParser],
        handlers: dict[str, CatchAllHandler],
    ) -> None:
        parser = wired()
        parser.parse(["component", "create", "Button"])
        parser.parse(["c", "Button"])

        direct, aliased = handlers["component"].executed
        assert dict(aliased.arguments) == dict(direct.arguments) == {"target": "Button", "name": "Button"}

    def test_alias_fills_variadic_parameter(
        self,
        wired: Callable[..., CommandParser],
        handlers: dict[str, CatchAllHandler],
    ) -> None:
        parser = wired(aliases=[Alias("ra", "registry add", "Add registry components")])
        parser.parse(["registry", "add", "button", "card"])
        parser.parse(["ra", "button", "card"])

        direct, aliased = handlers["registry"].executed
        assert dict(aliased.arguments) == dict(direct.arguments)
        assert aliased.arguments["components"] == ("button", "card")

    def test_preset_target_fills_first_parameter(
        self,
        wired: Callable[..., CommandParser],
        handlers: dict[str, CatchAllHandler],
    ) -> None:
        wired().parse(["auth"])
        command = _last(handlers["service"])
        assert dict(command.arguments) == {"target": "auth", "service": "auth"}

    def test_alias_without_route_handler(
        self,
        build_parser: Callable[..., CommandParser],
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        parser = build_parser(
            routes=[make_route("demo run", "demo", "run", handler=None)],
            aliases=[Alias("dr", "demo run", "Run the demo")],
        )
        assert parser.parse(["dr"]) == 1
        assert "No handler found for aliased command: demo run" in caplog.text

    def test_alias_that_stops_resolving(
        self,
        wired: Callable[..., CommandParser],
        monkeypatch: pytest.MonkeyPatch,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        from xaheen_cli.core.aliases import AliasResolver
        from xaheen_cli.core.models import AliasResolution

        parser = wired()
        monkeypatch.setattr(AliasResolver, "process_arguments", lambda self, tokens: AliasResolution(resolved=False))

        assert parser.parse(["c", "Button"]) == 1
        assert "Failed to resolve alias: c" in caplog.text

    def test_alias_route_lookup_miss(
        self,
        wired: Callable[..., CommandParser],
        monkeypatch: pytest.MonkeyPatch,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        parser = wired()
        monkeypatch.setattr(CommandParser, "find_route_for_command", lambda self, command: None)

        assert parser.parse(["c", "Button"]) == 1
        assert "No handler found for aliased command: component create" in caplog.text


# ---------------------------------------------------------------------------
# Legacy verbs
# ---------------------------------------------------------------------------

class TestLegacyDispatch:
    def test_legacy_verb_dispatches_with_warning(
        self,
        wired: Callable[..., CommandParser],
        handlers: dict[str, CatchAllHandler],
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        assert wired().parse(["init", "shop", "--gdpr"]) == 0

        command = _last(handlers["project"])
        assert (command.action, command.target) == ("create", "shop")
        assert command.options["gdpr"] is True
        assert "'xala init' is deprecated; use 'xaheen project create <name>' instead" in caplog.text

    def test_multi_word_legacy_verb(
        self,
        wired: Callable[..., CommandParser],
        handlers: dict[str, CatchAllHandler],
    ) -> None:
        wired().parse(["generate", "component", "a login form"])
        command = _last(handlers["component"])
        assert (command.action, command.target) == ("generate", "a login form")

    def test_bare_legacy_verb_before_group_help(
        self,
        wired: Callable[..., CommandParser],
        handlers: dict[str, CatchAllHandler],
        recording_console: RecordingConsole,
    ) -> None:
        wired().parse(["docs"])
        assert _last(handlers["docs"]).action == "generate"
        assert recording_console.lines == []

    def test_auxiliary_command_beats_legacy_verb(
        self,
        wired: Callable[..., CommandParser],
        handlers: dict[str, CatchAllHandler],
    ) -> None:
        doctor = EchoCommand("doctor", result=0)
        wired(commands=[doctor]).parse(["doctor"])
        assert len(doctor.calls) == 1
        assert handlers["project"].executed == []

    def test_legacy_disabled(self, wired: Callable[..., CommandParser]) -> None:
        parser = wired(settings=RuntimeSettings(legacy_commands=False))
        with pytest.raises(UnknownCommandError):
            parser.parse(["init", "shop"])


# ---------------------------------------------------------------------------
# Auxiliary commands
# ---------------------------------------------------------------------------

class TestAuxiliaryCommands:
    def test_runs_with_parser_and_rest(self, wired: Callable[..., CommandParser]) -> None:
        echo = EchoCommand()
        parser = wired(commands=[echo])

        assert parser.parse(["echo", "a", "--b"]) == 3
        assert echo.calls == [(parser, ["a", "--b"])]


# ---------------------------------------------------------------------------
# Help, version, unknown commands
# ---------------------------------------------------------------------------

class TestHelpAndErrors:
    @pytest.mark.parametrize("argv", [[], ["--help"], ["-h"]])
    def test_top_level_help(
        self,
        wired: Callable[..., CommandParser],
        recording_console: RecordingConsole,
        argv: list[str],
    ) -> None:
        assert wired(commands=[EchoCommand()]).parse(argv) == 0
        text = recording_console.text
        assert text.startswith("Usage: xaheen <domain> <action>")
        assert "project create <name>" in text
        assert "echo" in text
        assert "Aliases: " in text
        assert "--dry-run" in text

    @pytest.mark.parametrize("flag", ["--version", "-V"])
    def test_version(self, wired: Callable[..., CommandParser], recording_console: RecordingConsole, flag: str) -> None:
        assert wired().parse([flag]) == 0
        assert recording_console.lines == [f"xaheen {__version__}"]

    @pytest.mark.parametrize("argv", [["project"], ["project", "--help"], ["mcp"]])
    def test_group_help(
        self,
        wired: Callable[..., CommandParser],
        recording_console: RecordingConsole,
        argv: list[str],
    ) -> None:
        assert wired().parse(argv) == 0
        text = recording_console.text
        assert text.startswith(f"Usage: xaheen {argv[0]} <command>")
        assert f"{argv[0]} " in text

    def test_group_help_lists_only_that_verb(
        self,
        wired: Callable[..., CommandParser],
        recording_console: RecordingConsole,
    ) -> None:
        wired().parse(["project"])
        text = recording_console.text
        assert "project create <name>" in text
        assert "project validate" in text
        assert "app create" not in text

    def test_unknown_command(self, wired: Callable[..., CommandParser]) -> None:
        with pytest.raises(UnknownCommandError) as exc_info:
            wired().parse(["frobnicate", "now", "--fast"])
        assert exc_info.value.message == "Unknown command: frobnicate now"
        assert exc_info.value.hint == "Run 'xaheen --help' to list available commands."

    def test_unknown_command_suggests_similar(self, wired: Callable[..., CommandParser]) -> None:
        with pytest.raises(UnknownCommandError) as exc_info:
            wired().parse(["deplo"])
        hint = exc_info.value.hint or ""
        assert hint.startswith("Did you mean: ")
        assert "xaheen deploy" in hint

    def test_unknown_action_under_known_verb(self, wired: Callable[..., CommandParser]) -> None:
        with pytest.raises(UnknownCommandError, match="project explode"):
            wired().parse(["project", "explode"])


# ---------------------------------------------------------------------------
# Options before the command word
# ---------------------------------------------------------------------------

class TestLeadingOptions:
    @pytest.mark.parametrize(
        ("argv", "words", "leading"),
        [
            (["project", "validate"], ["project", "validate"], []),
            (["-v", "project", "validate"], ["project", "validate"], ["-v"]),
            (["--config", "x.json", "--dry-run", "deploy"], ["deploy"], ["--config", "x.json", "--dry-run"]),
            (["--config=x.json", "deploy"], ["deploy"], ["--config=x.json"]),
            (["--verbose"], [], ["--verbose"]),
            (["--framework", "vue"], ["--framework", "vue"], []),
        ],
    )
    def test_split(self, argv: list[str], words: list[str], leading: list[str]) -> None:
        from xaheen_cli.cli.parser import split_leading_options

        assert split_leading_options(argv) == (words, leading)

    def test_route_receives_leading_options(
        self,
        wired: Callable[..., CommandParser],
        handlers: dict[str, CatchAllHandler],
    ) -> None:
        wired().parse(["-v", "--config", "x.json", "project", "create", "shop"])
        command = _last(handlers["project"])
        assert command.target == "shop"
        assert command.options["verbose"] is True
        assert command.options["config"] == "x.json"

    def test_alias_receives_leading_options(
        self,
        wired: Callable[..., CommandParser],
        handlers: dict[str, CatchAllHandler],
    ) -> None:
        wired().parse(["--dry-run", "c", "Button"])
        command = _last(handlers["component"])
        assert command.target == "Button"
        assert command.options["dry_run"] is True

    def test_only_options_shows_help(
        self,
        wired: Callable[..., CommandParser],
        recording_console: RecordingConsole,
    ) -> None:
        assert wired().parse(["--verbose"]) == 0
        assert recording_console.text.startswith("Usage: xaheen")

    def test_version_after_leading_option(
        self,
        wired: Callable[..., CommandParser],
        recording_console: RecordingConsole,
    ) -> None:
        assert wired().parse(["-v", "--version"]) == 0
        assert recording_console.lines == [f"xaheen {__version__}"]
