"""Runtime settings for xaheen-cli.

Settings come from an optional JSON configuration file and a handful of
environment variables; environment values win over the file.

Lookup order for the file:

1. ``--config PATH`` on the command line
2. ``$XAHEEN_CONFIG``
3. ``./xaheen.config.json`` when it exists

An explicitly named file must exist.  The whole parsed document is kept
in :attr:`RuntimeSettings.values` so domain handlers can read their own
sections; only the ``cli`` section is interpreted here.
"""

from __future__ import annotations

import json
import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any

from xaheen_cli.exceptions import ConfigurationError
from xaheen_cli.version import __version__

CONFIG_ENV_VAR = "XAHEEN_CONFIG"
LOG_LEVEL_ENV_VAR = "XAHEEN_LOG_LEVEL"
LEGACY_ENV_VAR = "XAHEEN_LEGACY_COMMANDS"
DEFAULT_CONFIG_FILENAME = "xaheen.config.json"

LOG_LEVELS: tuple[str, ...] = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")

_TRUE = frozenset({"1", "true", "yes", "on"})
_FALSE = frozenset({"0", "false", "no", "off"})


@dataclass(frozen=True)
class RuntimeSettings:
    config_path: Path | None = None
    log_level: str = "INFO"
    legacy_commands: bool = True
    disabled_aliases: frozenset[str] = frozenset()
    values: Mapping[str, Any] = field(default_factory=dict)
    cli_version: str = __version__

    @property
    def source(self) -> str:
        """Human-readable origin of these settings."""
        return str(self.config_path) if self.config_path else "defaults"


# ---------------------------------------------------------------------------
# File handling
# ---------------------------------------------------------------------------

def _locate_config(
    config_path: str | Path | None,
    environ: Mapping[str, str],
    cwd: Path,
) -> Path | None:
    explicit = config_path or environ.get(CONFIG_ENV_VAR)
    if explicit:
        path = Path(explicit).expanduser()
        if not path.is_file():
            raise ConfigurationError(
                f"Configuration file not found: {path}",
                hint="Check the --config argument or the XAHEEN_CONFIG variable.",
            )
        return path

    candidate = cwd / DEFAULT_CONFIG_FILENAME
    return candidate if candidate.is_file() else None


def _read_config(path: Path) -> dict[str, Any]:
    try:
        document = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ConfigurationError(
            f"Invalid JSON in {path}: {exc.msg} (line {exc.lineno})",
        ) from exc
    except OSError as exc:
        raise ConfigurationError(f"Cannot read configuration file {path}: {exc}") from exc

    if not isinstance(document, dict):
        raise ConfigurationError(f"Configuration file {path} must contain a JSON object")
    return document


# ---------------------------------------------------------------------------
# Value coercion
# ---------------------------------------------------------------------------

def _log_level(value: Any, origin: str) -> str:
    level = str(value).upper()
    if level not in LOG_LEVELS:
        raise ConfigurationError(
            f"Invalid log level {value!r} in {origin}",
            hint=f"Use one of: {', '.join(LOG_LEVELS)}.",
        )
    return level


def _flag(value: Any, origin: str) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE:
        return True
    if text in _FALSE:
        return False
    raise ConfigurationError(f"Expected a boolean for {origin}, got {value!r}")


def _names(value: Any, origin: str) -> frozenset[str]:
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise ConfigurationError(f"Expected a list of strings for {origin}")
    return frozenset(value)


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------

def load_settings(
    config_path: str | Path | None = None,
    environ: Mapping[str, str] | None = None,
    cwd: Path | None = None,
) -> RuntimeSettings:
    """Build :class:`RuntimeSettings` from file and environment.

    Raises
    ------
    ConfigurationError
        If an explicitly named file is missing, the file is not a JSON
        object, or a recognised key holds an invalid value.
    """
    env = os.environ if environ is None else environ
    path = _locate_config(config_path, env, cwd or Path.cwd())
    document = _read_config(path) if path else {}

    section = document.get("cli", {})
    if not isinstance(section, dict):
        raise ConfigurationError(f"The 'cli' section of {path} must be an object")

    log_level = "INFO"
    legacy_commands = True
    disabled_aliases: frozenset[str] = frozenset()

    if "logLevel" in section:
        log_level = _log_level(section["logLevel"], "cli.logLevel")
    if "legacyCommands" in section:
        legacy_commands = _flag(section["legacyCommands"], "cli.legacyCommands")
    if "disabledAliases" in section:
        disabled_aliases = _names(section["disabledAliases"], "cli.disabledAliases")

    if env.get(LOG_LEVEL_ENV_VAR):
        log_level = _log_level(env[LOG_LEVEL_ENV_VAR], LOG_LEVEL_ENV_VAR)
    if env.get(LEGACY_ENV_VAR):
        legacy_commands = _flag(env[LEGACY_ENV_VAR], LEGACY_ENV_VAR)

    return RuntimeSettings(
        config_path=path,
        log_level=log_level,
        legacy_commands=legacy_commands,
        disabled_aliases=disabled_aliases,
        values=MappingProxyType(document),
    )
