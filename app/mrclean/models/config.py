"""Configuration models.

Defines the Pydantic models for ``.mc.toml`` and the global
``config.toml``. Every section and key is optional; missing values take
the built-in defaults.
"""

import os
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field

from mrclean.patterns.builtin import BUILTIN_PATTERNS
from mrclean.patterns.matcher import is_file_pattern

# Excludes added by --preserve-env
ENV_FILE_PATTERNS: tuple[str, ...] = (".env", ".env.example")


def _default_threads() -> int:
    return os.cpu_count() or 4


class PatternConfig(BaseModel):
    """Pattern section of the configuration.

    Attributes:
        directories: Globs matched against directory names.
        files: Globs matched against file names.
        exclude: Globs that veto any match.
    """

    model_config = ConfigDict(extra="forbid")

    directories: Annotated[
        list[str],
        Field(default_factory=BUILTIN_PATTERNS.directory_patterns, description="Directory globs"),
    ]
    files: Annotated[
        list[str],
        Field(default_factory=BUILTIN_PATTERNS.file_patterns, description="File globs"),
    ]
    exclude: Annotated[
        list[str],
        Field(default_factory=BUILTIN_PATTERNS.exclude_patterns, description="Exclusion globs"),
    ]


class OptionsConfig(BaseModel):
    """Behavior options.

    Attributes:
        parallel_threads: Worker threads for scanning and cleaning.
        require_confirmation: Ask before deleting.
        show_statistics: Print the timing breakdown after cleaning.
        preserve_symlinks: Do not follow symbolic links while scanning.
    """

    model_config = ConfigDict(extra="forbid")

    parallel_threads: Annotated[
        int,
        Field(default_factory=_default_threads, ge=1, description="Worker threads"),
    ]
    require_confirmation: Annotated[bool, Field(description="Ask before deleting")] = True
    show_statistics: Annotated[bool, Field(description="Print detailed statistics")] = True
    preserve_symlinks: Annotated[bool, Field(description="Do not follow symlinks")] = True


class SafetyConfig(BaseModel):
    """Safety checks run before scanning.

    Attributes:
        check_git_repo: Refuse to run outside a git work tree.
        max_depth: Maximum traversal depth below the root.
        min_free_space_gb: Minimum free space on the target filesystem.
    """

    model_config = ConfigDict(extra="forbid")

    check_git_repo: Annotated[bool, Field(description="Require a git repository")] = True
    max_depth: Annotated[int, Field(ge=0, description="Maximum traversal depth")] = 10
    min_free_space_gb: Annotated[
        float,
        Field(ge=0, description="Minimum free space in decimal GB"),
    ] = 1.0


class Config(BaseModel):
    """Complete mrclean configuration."""

    model_config = ConfigDict(extra="forbid")

    patterns: Annotated[PatternConfig, Field(default_factory=PatternConfig)]
    options: Annotated[OptionsConfig, Field(default_factory=OptionsConfig)]
    safety: Annotated[SafetyConfig, Field(default_factory=SafetyConfig)]

    def merge_cli_args(
        self,
        exclude: list[str] | None = None,
        include: list[str] | None = None,
        preserve_env: bool = False,
    ) -> "Config":
        """Return a copy with command-line patterns appended.

        Includes that look like file names (contain ``.`` or ``*``) are
        added to the file list, all others to the directory list. Patterns
        already present are not added twice.

        Args:
            exclude: Extra exclusion globs.
            include: Extra include globs.
            preserve_env: Also exclude ``.env`` and ``.env.example``.

        Returns:
            New Config; this instance is left unchanged.
        """
        patterns = self.patterns.model_copy(deep=True)

        extra_excludes = list(exclude or [])
        if preserve_env:
            extra_excludes.extend(ENV_FILE_PATTERNS)
        for pattern in extra_excludes:
            if pattern not in patterns.exclude:
                patterns.exclude.append(pattern)

        for pattern in include or []:
            target = patterns.files if is_file_pattern(pattern) else patterns.directories
            if pattern not in target:
                target.append(pattern)

        return self.model_copy(update={"patterns": patterns})
