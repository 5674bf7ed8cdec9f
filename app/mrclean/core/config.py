"""Configuration file I/O.

Loads ``.mc.toml`` (searched upward from the working directory) or the
global ``config.toml``, validates it with the Pydantic models, and writes
default configurations for ``mrclean init``.
"""

import logging
import os
import tomllib
from dataclasses import dataclass
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Any

import tomli_w
from pydantic import ValidationError

from mrclean.core.paths import PROJECT_CONFIG_NAME, get_global_config_path
from mrclean.errors import MrCleanError
from mrclean.models.config import Config
from mrclean.models.pattern import PatternSource
from mrclean.patterns.matcher import PatternMatcher

logger = logging.getLogger(__name__)


class ConfigError(MrCleanError):
    """Base exception for configuration errors."""


class ConfigNotFoundError(ConfigError):
    """Raised when an explicitly requested config file does not exist."""


class ConfigParseError(ConfigError):
    """Raised when a config file is not valid TOML."""


class ConfigValidationError(ConfigError):
    """Raised when config content does not match the schema."""


@dataclass(frozen=True, slots=True)
class LoadedConfig:
    """A validated configuration and where it came from.

    Attributes:
        config: The validated configuration.
        source_path: File it was read from, or None for built-in defaults.
    """

    config: Config
    source_path: Path | None = None

    @property
    def pattern_source(self) -> PatternSource:
        """Source tag for the patterns of this configuration."""
        if self.source_path is None:
            return PatternSource.BUILTIN
        return PatternSource.CONFIG


def find_config_file(start: Path | None = None) -> Path | None:
    """Find the nearest project config file.

    Args:
        start: Directory to start from. Defaults to the working directory.

    Returns:
        Path to the first ``.mc.toml`` found in ``start`` or one of its
        parents, or None.
    """
    current = (start or Path.cwd()).absolute()
    for directory in (current, *current.parents):
        candidate = directory / PROJECT_CONFIG_NAME
        if candidate.is_file():
            return candidate
    return None


def load_config(path: Path | None = None, start: Path | None = None) -> LoadedConfig:
    """Load the effective configuration.

    Resolution order:
    1. ``path``, if given (it must exist)
    2. The nearest ``.mc.toml`` from ``start`` upward
    3. The global config file
    4. Built-in defaults

    Args:
        path: Explicit config file.
        start: Directory to search upward from. Defaults to the working directory.

    Returns:
        LoadedConfig with the validated configuration and its source.

    Raises:
        ConfigNotFoundError: If ``path`` is given but does not exist.
        ConfigParseError: If the TOML syntax is invalid.
        ConfigValidationError: If the content doesn't match the schema.
    """
    if path is not None:
        if not path.is_file():
            raise ConfigNotFoundError(f"Config file not found: {path}")
        return LoadedConfig(config=read_config(path), source_path=path)

    project_path = find_config_file(start)
    if project_path is not None:
        logger.debug("Using project config %s", project_path)
        return LoadedConfig(config=read_config(project_path), source_path=project_path)

    global_path = get_global_config_path()
    if global_path.is_file():
        logger.debug("Using global config %s", global_path)
        return LoadedConfig(config=read_config(global_path), source_path=global_path)

    logger.debug("No config file found, using built-in defaults")
    return LoadedConfig(config=Config())


def read_config(path: Path) -> Config:
    """Read and validate a single config file.

    Raises:
        ConfigParseError: If the TOML syntax is invalid.
        ConfigValidationError: If the content doesn't match the schema.
        ConfigError: If the file cannot be read.
    """
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigParseError(f"Invalid TOML syntax in {path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Failed to read config {path}: {e}") from e

    try:
        return Config.model_validate(data)
    except ValidationError as e:
        raise ConfigValidationError(f"Invalid config content in {path}: {e}") from e


def config_to_dict(config: Config) -> dict[str, Any]:
    """Convert a Config to a dictionary suitable for TOML serialization."""
    return config.model_dump(mode="json")


def config_to_toml(config: Config) -> str:
    """Render a Config as TOML text."""
    return tomli_w.dumps(config_to_dict(config))


def save_config(config: Config, path: Path) -> Path:
    """Save a config to a TOML file.

    The file is written atomically by first writing to a temporary file
    in the same directory and then using os.replace() for atomic rename.

    Args:
        config: Configuration to save.
        path: Destination file.

    Returns:
        Path where the config was saved.

    Raises:
        ConfigError: If the file cannot be written.
    """
    tmp_path: Path | None = None
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with NamedTemporaryFile(
            mode="wb",
            dir=path.parent,
            delete=False,
            suffix=".tmp",
        ) as f:
            tmp_path = Path(f.name)
            tomli_w.dump(config_to_dict(config), f)
        os.replace(tmp_path, path)
    except OSError as e:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        raise ConfigError(f"Failed to write config {path}: {e}") from e

    logger.info("Wrote config to %s", path)
    return path


def build_matcher(
    loaded: LoadedConfig,
    exclude: list[str] | None = None,
    include: list[str] | None = None,
    preserve_env: bool = False,
) -> PatternMatcher:
    """Compile the configured patterns plus command-line overrides.

    Configured patterns are tagged with the config's source; patterns
    that only the command line contributes are appended afterwards and
    tagged as CLI patterns.

    Raises:
        PatternCompileError: If any pattern is invalid.
    """
    base = loaded.config.patterns
    matcher = PatternMatcher.compile(
        base.directories,
        base.files,
        base.exclude,
        source=loaded.pattern_source,
    )

    merged = loaded.config.merge_cli_args(exclude, include, preserve_env).patterns
    matcher.add_exclude_patterns(p for p in merged.exclude if p not in base.exclude)
    matcher.add_include_patterns(
        [
            *(p for p in merged.directories if p not in base.directories),
            *(p for p in merged.files if p not in base.files),
        ]
    )
    return matcher


def require_config(path: Path | None = None) -> LoadedConfig:
    """Load the configuration or exit with a helpful error message.

    Convenience wrapper around load_config() for CLI commands.

    Args:
        path: Optional explicit config file.

    Returns:
        Loaded and validated configuration.

    Raises:
        typer.Exit: If the configuration cannot be loaded.
    """
    import typer

    from mrclean.utils.formatting import print_error, print_info

    try:
        return load_config(path)
    except ConfigNotFoundError as e:
        print_error(str(e))
        print_info("Run 'mrclean init' to create a config file.")
        raise typer.Exit(code=1) from e
    except ConfigError as e:
        print_error(f"Failed to load config: {e}")
        raise typer.Exit(code=1) from e
