"""Pattern domain models.

Defines the closed set of pattern categories and sources, the compiled
rule type held by the matcher, and the match descriptor it produces.
"""

import re
from dataclasses import dataclass, field
from enum import Enum


class PatternCategory(str, Enum):
    """Category used to group matched items for reporting.

    Attributes:
        DEPENDENCIES: Installed dependencies (node_modules, vendor, .venv).
        BUILD_OUTPUTS: Build outputs (dist, build, target, .next, out).
        CACHE: Tool caches (.turbo, .pytest_cache, coverage).
        IDE: IDE and editor metadata (.idea, .vscode).
        LOGS: Log files.
        OTHER: Anything without a built-in category.
    """

    DEPENDENCIES = "dependencies"
    BUILD_OUTPUTS = "build_outputs"
    CACHE = "cache"
    IDE = "ide"
    LOGS = "logs"
    OTHER = "other"

    @property
    def label(self) -> str:
        """Short human-readable label for display."""
        return _CATEGORY_LABELS[self]


_CATEGORY_LABELS: dict[PatternCategory, str] = {
    PatternCategory.DEPENDENCIES: "Dependencies",
    PatternCategory.BUILD_OUTPUTS: "Build",
    PatternCategory.CACHE: "Cache",
    PatternCategory.IDE: "IDE",
    PatternCategory.LOGS: "Logs",
    PatternCategory.OTHER: "Other",
}


class PatternSource(str, Enum):
    """Where a pattern came from."""

    BUILTIN = "builtin"
    CONFIG = "config"
    CLI = "cli"


class FileTypeHint(str, Enum):
    """File type of an entry as seen by the walker, used to pick pattern lists."""

    DIRECTORY = "directory"
    FILE = "file"
    SYMLINK = "symlink"
    UNKNOWN = "unknown"


@dataclass(frozen=True, slots=True)
class MatchResult:
    """Details of the rule that selected an entry.

    Attributes:
        pattern: Glob text of the matching rule.
        priority: Position of the rule in its list (lower wins).
        source: Where the rule was defined.
        category: Reporting category of the rule.
    """

    pattern: str
    priority: int
    source: PatternSource
    category: PatternCategory


@dataclass(frozen=True, slots=True)
class PatternRule:
    """A compiled single-segment glob rule.

    Instances are immutable once built so a matcher holding them can be
    shared across scanning threads without locking.

    Attributes:
        pattern: Original glob text.
        priority: Index of the rule in its configured list.
        category: Reporting category.
        source: Where the rule was defined.
        regex: Compiled, fully anchored expression for ``pattern``.
    """

    pattern: str
    priority: int
    category: PatternCategory
    source: PatternSource
    regex: re.Pattern[str] = field(repr=False, compare=False)

    def matches(self, name: str) -> bool:
        """Check whether a base name matches this rule."""
        return self.regex.match(name) is not None

    def to_match(self) -> MatchResult:
        """Build the match descriptor for this rule."""
        return MatchResult(
            pattern=self.pattern,
            priority=self.priority,
            source=self.source,
            category=self.category,
        )
