"""Exit-code constants used by the CLI layer.

Every exit path uses one of these values rather than a bare integer.
"""

from __future__ import annotations

SUCCESS: int = 0
"""Command completed without error."""

GENERAL_ERROR: int = 1
"""Any caught failure: structured, unexpected, or unresolved input."""

CRITICAL_FINDING: int = 2
"""Reserved for handlers reporting a critical finding (e.g. a failed audit)."""

CANCELLED: int = 0
"""User pressed Ctrl+C or the process received SIGTERM."""
