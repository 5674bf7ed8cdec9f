"""Color theme for the mrclean CLI.

The palette is layered: the bundled ``data/theme.toml`` first, then any
keys set in ``~/.config/mrclean/theme.toml``. Each pattern category gets
its own style so tables and the scan line can color items by category.
"""

import logging
import re
import tomllib
from collections.abc import Iterator
from functools import cache
from importlib import resources
from pathlib import Path

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator
from rich.theme import Theme

from mrclean.core.paths import get_user_theme_path
from mrclean.models.pattern import PatternCategory

logger = logging.getLogger(__name__)

_HEX_COLOR = re.compile(r"#(?:[0-9a-fA-F]{3}){1,2}")


class ThemeColors(BaseModel):
    """Palette used by the CLI. Every value is a ``#RGB`` or ``#RRGGBB`` color."""

    model_config = ConfigDict(extra="forbid")

    # Messages and chrome
    text: str = "#ffffff"
    muted: str = "#b2bec3"
    header: str = "#69B9A1"
    border: str = "#29526d"
    success: str = "#03b971"
    warning: str = "#f5b332"
    error: str = "#f53263"
    info: str = "#0ec1c8"

    # Item columns
    directory: str = "#0e8ac8"
    file: str = "#c1ff62"
    size: str = "#faf870"

    # One per PatternCategory, see category_style()
    category_dependencies: str = "#d44ebc"
    category_build_outputs: str = "#0e8ac8"
    category_cache: str = "#0ec1c8"
    category_ide: str = "#69B9A1"
    category_logs: str = "#f5b332"
    category_other: str = "#b2bec3"

    @field_validator("*", mode="before")
    @classmethod
    def _check_hex(cls, value: object) -> str:
        if not isinstance(value, str) or not _HEX_COLOR.fullmatch(value.strip()):
            msg = f"expected a #RGB or #RRGGBB color, got {value!r}"
            raise ValueError(msg)
        return value.strip()


def category_style(category: PatternCategory) -> str:
    """Rich style name for a pattern category."""
    return f"category_{category.value}"


def _theme_layers() -> Iterator[Path]:
    yield Path(str(resources.files("mrclean.data").joinpath("theme.toml")))
    yield get_user_theme_path()


def _read_colors(path: Path) -> dict[str, str]:
    """Return the string entries of the ``[colors]`` table in ``path``.

    A missing file yields an empty table. Unreadable or malformed files
    are logged and also yield an empty table.
    """
    try:
        with open(path, "rb") as f:
            table = tomllib.load(f).get("colors", {})
    except FileNotFoundError:
        return {}
    except (OSError, tomllib.TOMLDecodeError) as e:
        logger.warning("Ignoring theme file %s: %s", path, e)
        return {}

    if not isinstance(table, dict):
        logger.warning("Ignoring theme file %s: [colors] is not a table", path)
        return {}
    return {key: value for key, value in table.items() if isinstance(value, str)}


def load_theme() -> ThemeColors:
    """Merge all theme layers into a validated palette.

    Later layers override earlier ones key by key. If the merged palette
    does not validate, the built-in defaults are used instead.
    """
    merged: dict[str, str] = {}
    for layer in _theme_layers():
        merged.update(_read_colors(layer))

    try:
        return ThemeColors.model_validate(merged)
    except ValidationError as e:
        logger.warning("Invalid theme, falling back to defaults: %s", e)
        return ThemeColors()


def get_rich_theme(colors: ThemeColors | None = None) -> Theme:
    """Build the Rich theme used by every console.

    Each palette entry is exposed as a style of the same name. Errors and
    directories are bold; ``bold_header`` and ``dim`` are used by tables.
    """
    colors = colors or load_theme()
    styles = colors.model_dump()
    styles.update(
        error=f"bold {colors.error}",
        directory=f"bold {colors.directory}",
        bold_header=f"bold {colors.header}",
        dim=colors.muted,
    )
    return Theme(styles)


@cache
def get_theme() -> Theme:
    """Rich theme built once per process."""
    return get_rich_theme()
