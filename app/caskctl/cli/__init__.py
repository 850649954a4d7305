"""CLI package for caskctl.

This package contains the Typer application and all subcommands.
"""

from caskctl.cli.main import app

__all__ = ["app"]
