"""caskctl configuration.

Optional settings are read from ~/.config/caskctl/config.toml. Every
setting can also be given on the command line or, for the ignore file,
remediation switch and verbosity, through an environment variable;
those take precedence over the file.
"""

import tomllib
from pathlib import Path
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from caskctl.core.paths import get_config_path


class CaskctlConfig(BaseModel):
    """Settings for an upgrade run.

    Attributes:
        ignore_file: Ignore file path (None = CASKCTL_IGNORE_FILE or .cask-ignore).
        skip_remediation: Skip health scan and remediation entirely.
        greedy: Include casks that update themselves.
        update: Run ``brew update`` before upgrading.
        cleanup: Run ``brew cleanup`` and ``brew autoremove`` afterwards.
        appdir: Directory casks install app bundles into.
        extra_failure_phrases: Additional phrases marking brew output as failed.
    """

    model_config = ConfigDict(extra="forbid")

    ignore_file: Annotated[
        str | None,
        Field(description="Path to the ignore file"),
    ] = None
    skip_remediation: Annotated[
        bool,
        Field(description="Skip health scan and remediation"),
    ] = False
    greedy: Annotated[
        bool,
        Field(description="Include auto-updating casks"),
    ] = True
    update: Annotated[
        bool,
        Field(description="Run brew update first"),
    ] = True
    cleanup: Annotated[
        bool,
        Field(description="Run brew cleanup afterwards"),
    ] = True
    appdir: Annotated[
        str,
        Field(min_length=1, description="Applications directory"),
    ] = "/Applications"
    extra_failure_phrases: Annotated[
        list[str],
        Field(default_factory=list, description="Additional failure phrases"),
    ]


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigParseError(ConfigError):
    """Raised when the config file is not valid TOML."""


def load_config(path: Path | None = None) -> CaskctlConfig:
    """Load configuration from a TOML file.

    A missing file is not an error: defaults are returned.

    Args:
        path: Path to the config file. If None, uses the default config path.

    Returns:
        Validated CaskctlConfig object.

    Raises:
        ConfigParseError: If the TOML syntax is invalid.
        ConfigError: If the file cannot be read or the content doesn't match the schema.
    """
    config_path = path or get_config_path()

    if not config_path.exists():
        return CaskctlConfig()

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigParseError(f"Invalid TOML syntax in {config_path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Failed to read config {config_path}: {e}") from e

    try:
        return CaskctlConfig.model_validate(data)
    except (ValueError, ValidationError) as e:
        raise ConfigError(f"Invalid config content in {config_path}: {e}") from e
