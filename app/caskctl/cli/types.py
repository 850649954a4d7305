"""Shared types and utilities for CLI commands.

This module provides common enums and helper functions used across
multiple CLI command modules to avoid code duplication.
"""

from enum import Enum

import typer

from caskctl.core.config import CaskctlConfig, ConfigError, load_config
from caskctl.managers.homebrew import HomebrewManager
from caskctl.utils.formatting import print_error

# Exit code for runs that could not start or finish at all
EXIT_FATAL = 2


class OutputFormat(str, Enum):
    """Output format options."""

    TABLE = "table"
    JSON = "json"


def load_config_or_exit() -> CaskctlConfig:
    """Load the config file, exiting with EXIT_FATAL on errors.

    Raises:
        typer.Exit: If the config file is invalid.
    """
    try:
        return load_config()
    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(code=EXIT_FATAL) from e


def get_manager(config: CaskctlConfig, dry_run: bool = False) -> HomebrewManager:
    """Create the Homebrew manager for a command.

    Args:
        config: Loaded configuration.
        dry_run: Whether mutating commands should only be simulated.

    Returns:
        Configured HomebrewManager.
    """
    return HomebrewManager(dry_run=dry_run, extra_failure_phrases=config.extra_failure_phrases)
