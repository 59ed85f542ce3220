"""Entry-point discovery for domain handlers and auxiliary commands.

Two entry-point groups are consulted:

``xaheen_cli.domains``
    name = domain, object = handler constructor (usually the class).
``xaheen_cli.commands``
    object = an :class:`AuxiliaryCommand` instance, or a class producing
    one when called without arguments.

A plugin that fails to load is logged and skipped; discovery itself
never raises.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from importlib import metadata
from typing import Any, Protocol, runtime_checkable

from xaheen_cli.core.protocols import HandlerConstructor

logger = logging.getLogger(__name__)

DOMAIN_GROUP = "xaheen_cli.domains"
COMMAND_GROUP = "xaheen_cli.commands"


@runtime_checkable
class AuxiliaryCommand(Protocol):
    """Top-level command that bypasses route dispatch (e.g. ``doctor``)."""

    name: str
    help: str

    def run(self, parser: Any, argv: Sequence[str]) -> int:
        """Execute with the command parser and the remaining argv."""
        ...  # pragma: no cover


def iter_entry_points(group: str) -> Iterable[metadata.EntryPoint]:
    return metadata.entry_points().select(group=group)


def _load(entry_point: metadata.EntryPoint) -> Any | None:
    try:
        return entry_point.load()
    except Exception as exc:  # noqa: BLE001
        logger.warning(
            "Failed to load plugin %r from %s: %s",
            entry_point.name,
            entry_point.value,
            exc,
        )
        return None


def discover_domain_handlers() -> dict[str, HandlerConstructor]:
    """Return ``{domain: constructor}`` for every installed domain plugin."""
    handlers: dict[str, HandlerConstructor] = {}
    for entry_point in iter_entry_points(DOMAIN_GROUP):
        constructor = _load(entry_point)
        if constructor is None:
            continue
        if not callable(constructor):
            logger.warning("Domain plugin %r is not callable; skipping", entry_point.name)
            continue
        if entry_point.name in handlers:
            logger.warning("Domain %r provided by more than one plugin; keeping the first", entry_point.name)
            continue
        handlers[entry_point.name] = constructor
        logger.debug("Discovered domain plugin %r", entry_point.name)
    return handlers


def discover_commands() -> list[AuxiliaryCommand]:
    """Return every installed auxiliary command."""
    commands: list[AuxiliaryCommand] = []
    for entry_point in iter_entry_points(COMMAND_GROUP):
        plugin = _load(entry_point)
        if plugin is None:
            continue
        if isinstance(plugin, type):
            try:
                plugin = plugin()
            except Exception as exc:  # noqa: BLE001
                logger.warning("Command plugin %r failed to initialise: %s", entry_point.name, exc)
                continue
        if not isinstance(plugin, AuxiliaryCommand):
            logger.warning("Command plugin %r lacks name/help/run; skipping", entry_point.name)
            continue
        commands.append(plugin)
        logger.debug("Discovered command plugin %r", plugin.name)
    return commands
