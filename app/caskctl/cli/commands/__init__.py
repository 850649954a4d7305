"""CLI commands for caskctl.

This package contains all subcommand implementations.
"""

from caskctl.cli.commands import check, ignore, upgrade

__all__ = ["check", "ignore", "upgrade"]
