"""Built-in cleaning patterns.

Each include pattern carries the category it is reported under. Glob
syntax is single-segment: patterns are matched against an entry's base
name, never against a full path.
"""

from dataclasses import dataclass

from mrclean.models.pattern import PatternCategory

_D = PatternCategory.DEPENDENCIES
_B = PatternCategory.BUILD_OUTPUTS
_C = PatternCategory.CACHE
_I = PatternCategory.IDE
_L = PatternCategory.LOGS
_O = PatternCategory.OTHER


@dataclass(frozen=True, slots=True)
class PatternSet:
    """A named set of directory, file and exclude patterns.

    Attributes:
        directories: (pattern, category) pairs matched against directories.
        files: (pattern, category) pairs matched against files.
        exclude: Patterns that veto any match.
    """

    directories: tuple[tuple[str, PatternCategory], ...]
    files: tuple[tuple[str, PatternCategory], ...]
    exclude: tuple[str, ...]

    def directory_patterns(self) -> list[str]:
        """Directory glob strings in declaration order."""
        return [pattern for pattern, _ in self.directories]

    def file_patterns(self) -> list[str]:
        """File glob strings in declaration order."""
        return [pattern for pattern, _ in self.files]

    def exclude_patterns(self) -> list[str]:
        """Exclude glob strings in declaration order."""
        return list(self.exclude)

    def category_for(self, pattern: str) -> PatternCategory:
        """Look up the category of a pattern.

        Args:
            pattern: Glob text exactly as configured.

        Returns:
            The built-in category, or OTHER for unknown patterns.
        """
        for known, category in (*self.directories, *self.files):
            if known == pattern:
                return category
        return PatternCategory.OTHER


BUILTIN_PATTERNS = PatternSet(
    directories=(
        # Dependencies
        ("node_modules", _D),
        ("bower_components", _D),
        ("jspm_packages", _D),
        ("vendor", _D),
        (".venv", _D),
        ("venv", _D),
        # Build outputs
        ("dist", _B),
        ("build", _B),
        ("target", _B),
        ("out", _B),
        (".next", _B),
        (".nuxt", _B),
        (".output", _B),
        (".svelte-kit", _B),
        ("*.egg-info", _B),
        # Caches
        (".turbo", _C),
        (".cache", _C),
        (".parcel-cache", _C),
        ("__pycache__", _C),
        (".pytest_cache", _C),
        (".mypy_cache", _C),
        (".ruff_cache", _C),
        (".gradle", _C),
        ("coverage", _C),
        (".nyc_output", _C),
        # IDE
        (".idea", _I),
        (".vscode", _I),
        (".vs", _I),
    ),
    files=(
        # Logs
        ("*.log", _L),
        ("npm-debug.log*", _L),
        ("yarn-debug.log*", _L),
        ("yarn-error.log*", _L),
        # Compiled and OS leftovers
        ("*.pyc", _O),
        ("*.pyo", _O),
        ("*.tsbuildinfo", _O),
        (".eslintcache", _O),
        (".DS_Store", _O),
        ("Thumbs.db", _O),
    ),
    exclude=(
        ".git",
        ".hg",
        ".svn",
    ),
)
