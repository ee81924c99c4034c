"""Command-line inspector for fail cause codes."""

from dcfail.cli.main import app, cli_main

__all__ = ["app", "cli_main"]
