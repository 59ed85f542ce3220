"""xaheen-cli — command routing and dispatch engine for the xaheen CLI.

Turns ``xaheen <domain> <action> [target] [options]`` invocations into
calls against pluggable domain handlers.
"""

from xaheen_cli.version import __version__

__all__: list[str] = ["__version__"]
