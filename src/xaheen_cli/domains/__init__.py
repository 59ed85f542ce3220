"""Built-in domain handlers.

Handlers here follow the same contract as third-party domain plugins
(:class:`~xaheen_cli.core.protocols.DomainHandler`) and receive their
collaborators through the dependency bag.

Rules
-----
* Import from ``core``; from ``cli`` only the console.
* Never call ``sys.exit``; return an exit code or raise.
"""

from xaheen_cli.domains.base import BaseDomainHandler
from xaheen_cli.domains.help import HelpHandler

BUILTIN_HANDLERS = {
    HelpHandler.domain: HelpHandler,
}
"""Domain name → constructor for the handlers shipped with the CLI."""

__all__: list[str] = ["BUILTIN_HANDLERS", "BaseDomainHandler", "HelpHandler"]
