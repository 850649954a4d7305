"""Console color theme.

Colors come from built-in defaults, optionally overridden by the
``[colors]`` table of ~/.config/caskctl/theme.toml:

    [colors]
    upgraded = "#00ff00"
    failed = "#ff0000"

An unreadable or invalid theme file never stops a run; the defaults are
used instead.
"""

import logging
import tomllib
from functools import cache
from pathlib import Path
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from rich.theme import Theme

from caskctl.core.paths import get_user_theme_path

logger = logging.getLogger(__name__)

HexColor = Annotated[str, Field(pattern=r"^#(?:[0-9a-fA-F]{3}){1,2}$")]


class ThemeColors(BaseModel):
    """Hex colors used for console output (#RGB or #RRGGBB)."""

    model_config = ConfigDict(extra="forbid", str_strip_whitespace=True)

    text: HexColor = "#ffffff"
    muted: HexColor = "#b2bec3"
    header: HexColor = "#69B9A1"
    border: HexColor = "#29526d"
    success: HexColor = "#03b971"
    warning: HexColor = "#f5b332"
    error: HexColor = "#f53263"
    info: HexColor = "#0ec1c8"

    # Upgrade outcomes and health issues
    upgraded: HexColor = "#c1ff62"
    excluded: HexColor = "#faf870"
    failed: HexColor = "#f53263"
    issue: HexColor = "#d44ebc"


def read_color_overrides(path: Path) -> dict[str, str]:
    """Return the string entries of the ``[colors]`` table in a TOML file.

    Missing, unreadable or malformed files yield no overrides.
    """
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except FileNotFoundError:
        return {}
    except (OSError, tomllib.TOMLDecodeError) as e:
        logger.warning("Ignoring theme file %s: %s", path, e)
        return {}

    colors = data.get("colors", {})
    if not isinstance(colors, dict):
        logger.warning("Ignoring theme file %s: 'colors' must be a table", path)
        return {}
    return {key: value for key, value in colors.items() if isinstance(value, str)}


def load_theme(path: Path | None = None) -> ThemeColors:
    """Build theme colors from the defaults and the user's overrides.

    Args:
        path: Theme file to read. Defaults to the user theme path.
    """
    theme_path = path or get_user_theme_path()
    overrides = read_color_overrides(theme_path)
    if not overrides:
        return ThemeColors()

    try:
        return ThemeColors.model_validate(overrides)
    except ValidationError as e:
        logger.warning("Invalid colors in %s, using defaults: %s", theme_path, e)
        return ThemeColors()


def get_rich_theme(colors: ThemeColors | None = None) -> Theme:
    """Map theme colors to the Rich style names used by caskctl."""
    c = colors or load_theme()
    return Theme(
        {
            "text": c.text,
            "muted": c.muted,
            "header": c.header,
            "bold_header": f"bold {c.header}",
            "border": c.border,
            "success": c.success,
            "warning": c.warning,
            "error": f"bold {c.error}",
            "info": c.info,
            "upgraded": c.upgraded,
            "excluded": c.excluded,
            "failed": f"bold {c.failed}",
            "issue": c.issue,
            "package.name": f"bold {c.text}",
        }
    )


@cache
def get_theme() -> Theme:
    """Return the Rich theme, loading it on first use."""
    return get_rich_theme()
