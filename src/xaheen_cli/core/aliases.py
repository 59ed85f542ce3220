"""Alias resolution — short tokens expanding to canonical commands.

An alias such as ``c`` stands for a canonical command string
``"<domain> <action> [preset target]"``.  Resolution turns the alias
tokens of one invocation into a :class:`~xaheen_cli.core.models.CLICommand`
and confirms, through the injected route lookup, that the command maps
to a known ``{domain, action}`` pair.

The resolver holds no reference to the route registry itself; it only
sees the lookup callable the orchestrator uses for alias dispatch.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from typing import Optional

from xaheen_cli.core.models import Alias, AliasResolution, CLICommand, Route

RouteLookup = Callable[[CLICommand], Optional[Route]]

DEFAULT_ALIASES: tuple[Alias, ...] = (
    Alias("c", "component create", "Create a component"),
    Alias("g", "component generate", "Generate a component from a description"),
    Alias("p", "page create", "Create a page"),
    Alias("m", "model generate", "Generate a data model"),
    Alias("s", "service add", "Add a service to the project"),
    Alias("auth", "service add auth", "Add the authentication service"),
    Alias("ls", "service list", "List available services"),
    Alias("new", "project create", "Create a new project"),
    Alias("v", "project validate", "Validate the current project"),
    Alias("gen", "ai generate", "Generate code from a prompt"),
    Alias("d", "deploy generate", "Generate deployment configuration"),
    Alias("k8s", "deploy kubernetes", "Generate or apply Kubernetes manifests"),
    Alias("sec", "security scan", "Run a security scan"),
    Alias("doc", "docs generate", "Generate project documentation"),
    Alias("t", "theme create", "Create a theme"),
)


class AliasResolver:
    """Expands alias tokens into canonical commands.

    Parameters
    ----------
    aliases:
        The configured alias set.  Later duplicates of a token win.
    lookup:
        Route lookup used to decide whether an expanded command maps to
        a known ``{domain, action}`` pair.
    """

    def __init__(self, aliases: Iterable[Alias], lookup: RouteLookup) -> None:
        self._aliases: dict[str, Alias] = {alias.alias: alias for alias in aliases}
        self._lookup = lookup

    @property
    def aliases(self) -> tuple[Alias, ...]:
        return tuple(self._aliases.values())

    def get_alias(self, token: str) -> Alias | None:
        return self._aliases.get(token)

    def is_alias(self, token: str) -> bool:
        return token in self._aliases

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------

    @staticmethod
    def expand(alias: Alias, positionals: Sequence[str] = ()) -> CLICommand | None:
        """Build the command *alias* stands for, or ``None`` if malformed.

        A target baked into the canonical string takes precedence over
        the first positional token supplied on the command line.
        """
        parts = alias.original_command.split()
        if len(parts) < 2:
            return None

        domain, action, *preset = parts
        if preset:
            target: str | None = " ".join(preset)
        else:
            target = positionals[0] if positionals else None

        return CLICommand(
            domain=domain,
            action=action,
            target=target,
            arguments={"target": target},
        )

    def process_arguments(self, tokens: Sequence[str]) -> AliasResolution:
        """Resolve ``[alias, *positionals]`` into a command."""
        if not tokens:
            return AliasResolution(resolved=False)

        alias = self._aliases.get(tokens[0])
        if alias is None:
            return AliasResolution(resolved=False)

        positionals = [token for token in tokens[1:] if not token.startswith("-")]
        command = self.expand(alias, positionals)
        if command is None or self._lookup(command) is None:
            return AliasResolution(resolved=False)
        return AliasResolution(resolved=True, command=command)

    # ------------------------------------------------------------------
    # Help
    # ------------------------------------------------------------------

    def show_alias_help(self) -> str:
        """Return an aligned plain-text listing of every alias."""
        if not self._aliases:
            return "No aliases configured."

        aliases = sorted(self._aliases.values(), key=lambda item: item.alias)
        alias_width = max(len(item.alias) for item in aliases)
        command_width = max(len(item.original_command) for item in aliases)

        lines = ["Available aliases:", ""]
        for item in aliases:
            lines.append(
                f"  {item.alias:<{alias_width}}  ->  "
                f"{item.original_command:<{command_width}}  {item.description}",
            )
        lines.append("")
        lines.append("Usage: xaheen <alias> [target] [options]")
        return "\n".join(lines)
