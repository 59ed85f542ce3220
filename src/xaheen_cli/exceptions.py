"""Custom exception hierarchy for xaheen-cli.

Every failure that is meant to reach the user as a structured error
inherits from :class:`CLIError`, which carries a machine-readable
``code`` next to the human message.  The CLI error boundary logs the
code and exits with status ``1``; any other exception is treated as
unstructured and reported generically.

Hierarchy
---------
CLIError
├── UnknownCommandError
├── InvalidArgumentsError
├── UnsupportedActionError
├── HandlerConstructionError
├── ConfigurationError
└── EnvironmentError
"""

from __future__ import annotations


class CLIError(Exception):
    """Base exception for all structured xaheen errors.

    Parameters
    ----------
    message:
        Human-readable description of the failure.
    code:
        Stable machine-readable identifier (e.g. ``UNKNOWN_COMMAND``).
    domain, action:
        The command being processed when the error occurred, if known.
    hint:
        Optional actionable guidance shown below the error message.
    """

    default_code: str = "CLI_ERROR"

    def __init__(
        self,
        message: str,
        code: str | None = None,
        *,
        domain: str | None = None,
        action: str | None = None,
        hint: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message: str = message
        self.code: str = code or self.default_code
        self.domain: str | None = domain
        self.action: str | None = action
        self.hint: str | None = hint


# --- Routing ---------------------------------------------------------------

class UnknownCommandError(CLIError):
    """Raised when argv matches no route, alias, or legacy verb."""

    default_code = "UNKNOWN_COMMAND"


class InvalidArgumentsError(CLIError):
    """Raised when a matched command receives malformed arguments."""

    default_code = "INVALID_ARGUMENTS"


# --- Handlers --------------------------------------------------------------

class UnsupportedActionError(CLIError):
    """Raised when a domain handler declines the requested action."""

    default_code = "UNSUPPORTED_ACTION"


class HandlerConstructionError(CLIError):
    """Raised when a domain handler cannot be constructed."""

    default_code = "HANDLER_CONSTRUCTION_FAILED"


# --- Environment / configuration -------------------------------------------

class ConfigurationError(CLIError):
    """Raised when the configuration file is missing or malformed."""

    default_code = "INVALID_CONFIG"


class EnvironmentError(CLIError):
    """Raised when a required runtime dependency is not available."""

    default_code = "ENVIRONMENT"
