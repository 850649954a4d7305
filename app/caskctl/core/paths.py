"""XDG-compliant path management for caskctl.

This module provides standardized paths following the XDG Base Directory
Specification for configuration, plus resolution of the ignore file.

XDG defaults:
- Config: ~/.config/caskctl/
"""

import os
from pathlib import Path

# Application identifier for directory naming
APP_NAME = "caskctl"

# Ignore file used when nothing else is configured, relative to the working directory
DEFAULT_IGNORE_FILE = ".cask-ignore"

# Environment variable overriding the ignore file location
IGNORE_FILE_ENV = "CASKCTL_IGNORE_FILE"


def _get_xdg_dir(env_var: str, default_subdir: str) -> Path:
    """Get XDG directory respecting environment variable override.

    Args:
        env_var: XDG environment variable name (e.g., "XDG_CONFIG_HOME").
        default_subdir: Default subdirectory under home (e.g., ".config").

    Returns:
        Path to the application-specific directory.
    """
    base = os.environ.get(env_var)
    if base:
        return Path(base) / APP_NAME
    return Path.home() / default_subdir / APP_NAME


def get_config_dir() -> Path:
    """Get the configuration directory path.

    Returns:
        Path to ~/.config/caskctl/ (or XDG_CONFIG_HOME/caskctl/).
    """
    return _get_xdg_dir("XDG_CONFIG_HOME", ".config")


def get_config_path() -> Path:
    """Get the main configuration file path.

    Returns:
        Path to ~/.config/caskctl/config.toml.
    """
    return get_config_dir() / "config.toml"


def get_user_theme_path() -> Path:
    """Get the user theme configuration path.

    Returns:
        Path to ~/.config/caskctl/theme.toml.
    """
    return get_config_dir() / "theme.toml"


def resolve_ignore_path(
    explicit: Path | str | None = None,
    configured: Path | str | None = None,
) -> Path:
    """Resolve which ignore file to read.

    Priority:
    1. Explicit path (CLI option)
    2. CASKCTL_IGNORE_FILE environment variable
    3. ``ignore_file`` from config.toml
    4. DEFAULT_IGNORE_FILE in the working directory

    Args:
        explicit: Path given on the command line, if any.
        configured: Path from the config file, if any.

    Returns:
        User-expanded path to the ignore file. The file may not exist.
    """
    for candidate in (explicit, os.environ.get(IGNORE_FILE_ENV), configured):
        if candidate:
            return Path(candidate).expanduser()
    return Path(DEFAULT_IGNORE_FILE)
