"""CLI layer — argument parsing, dispatch, and the error boundary.

This package is the outermost layer of the application.  It may import
from ``core``, ``infra``, ``domains`` and ``utils``; only the built-in
domain handlers import from it, and only :mod:`xaheen_cli.cli.console`.
"""
