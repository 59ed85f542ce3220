"""Shared pytest fixtures and configuration for the xaheen-cli test suite.

Guidelines
----------
* No network access and no real plugins in any test.
* Every test starts with a fresh command parser singleton.
* Handlers are fakes that record the commands they receive.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator, Mapping, Sequence
from typing import Any

import pytest

from xaheen_cli.cli.parser import CommandParser
from xaheen_cli.core.models import CLICommand, Route
from xaheen_cli.core.protocols import Initializable
from xaheen_cli.utils.log import reset_logging


# ---------------------------------------------------------------------------
# Isolation
# ---------------------------------------------------------------------------

@pytest.fixture(autouse=True)
def _isolate(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    for name in ("XAHEEN_CONFIG", "XAHEEN_LOG_LEVEL", "XAHEEN_LEGACY_COMMANDS"):
        monkeypatch.delenv(name, raising=False)
    CommandParser.reset()
    yield
    CommandParser.reset()
    reset_logging()


# ---------------------------------------------------------------------------
# Fakes
# ---------------------------------------------------------------------------

class RecordingHandler:
    """Domain handler double recording every executed command."""

    def __init__(
        self,
        dependencies: Mapping[str, Any],
        *,
        domain: str = "project",
        actions: Sequence[str] = ("create", "validate"),
        result: Any = None,
    ) -> None:
        self.dependencies = dependencies
        self.domain = domain
        self.actions = tuple(actions)
        self.result = result
        self.executed: list[CLICommand] = []

    def get_supported_actions(self) -> list[str]:
        return list(self.actions)

    def can_handle(self, command: CLICommand) -> bool:
        return command.action in self.actions

    def execute(self, command: CLICommand) -> Any:
        self.executed.append(command)
        return self.result


class AsyncRecordingHandler(RecordingHandler, Initializable):
    """Async variant that also records initialisation."""

    def __init__(self, dependencies: Mapping[str, Any], **kwargs: Any) -> None:
        super().__init__(dependencies, **kwargs)
        self.initialized_with: list[Mapping[str, Any]] = []

    async def initialize(self, dependencies: Mapping[str, Any]) -> None:
        self.initialized_with.append(dependencies)

    async def execute(self, command: CLICommand) -> Any:  # type: ignore[override]
        self.executed.append(command)
        return self.result


class RecordingConsole:
    """Console double capturing printed text and tables."""

    def __init__(self) -> None:
        self.lines: list[str] = []
        self.tables: list[tuple[str, list[str], list[list[str]]]] = []

    def print(self, *objects: object, markup: bool = True) -> None:
        self.lines.append(" ".join(str(item) for item in objects))

    def table(self, title: str, columns: Sequence[str], rows: Sequence[Sequence[str]]) -> None:
        self.tables.append((title, list(columns), [list(row) for row in rows]))

    @property
    def text(self) -> str:
        parts = list(self.lines)
        for title, _, rows in self.tables:
            parts.append(title)
            parts.extend("  ".join(row) for row in rows)
        return "\n".join(parts)


def make_route(pattern: str, domain: str, action: str, **kwargs: Any) -> Route:
    kwargs.setdefault("handler", lambda command: None)
    return Route(pattern=pattern, domain=domain, action=action, **kwargs)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def recording_console() -> RecordingConsole:
    return RecordingConsole()


@pytest.fixture
def project_handler() -> RecordingHandler:
    return RecordingHandler({}, domain="project", actions=("create", "validate"))


@pytest.fixture
def build_parser(recording_console: RecordingConsole) -> Callable[..., CommandParser]:
    """Build a command parser with no plugins and a recording console."""

    def build(**kwargs: Any) -> CommandParser:
        kwargs.setdefault("console", recording_console)
        kwargs.setdefault("commands", [])
        if "handlers" not in kwargs:
            kwargs["handlers"] = {}
        return CommandParser(**kwargs)

    return build
