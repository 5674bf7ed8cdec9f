"""Glob pattern matching for candidate selection.

The matcher holds three ordered rule lists: directory rules, file rules
and exclusions. Evaluation order guarantees that exclusions always win,
and that directory rules take precedence over file rules when an entry
could be either (symlinks and entries of unknown type).

A built matcher performs no I/O in ``evaluate`` and never mutates its
rule lists in place, so it can be shared by any number of scanning
threads. Runtime additions replace the rule tuples wholesale.
"""

import fnmatch
import logging
import os
import re
import stat
from collections.abc import Iterable
from pathlib import Path

from mrclean.errors import MrCleanError
from mrclean.models.pattern import (
    FileTypeHint,
    MatchResult,
    PatternRule,
    PatternSource,
)
from mrclean.patterns.builtin import BUILTIN_PATTERNS

logger = logging.getLogger(__name__)

_SEPARATORS = {"/", os.sep} | ({os.altsep} if os.altsep else set())


class PatternCompileError(MrCleanError):
    """Raised when a glob pattern has invalid syntax."""

    def __init__(self, pattern: str, reason: str) -> None:
        super().__init__(f"Invalid pattern {pattern!r}: {reason}")
        self.pattern = pattern
        self.reason = reason


def compile_glob(pattern: str) -> re.Pattern[str]:
    """Validate a single-segment glob and compile it to a regex.

    Supported syntax is ``*``, ``?``, ``[...]`` and ``[!...]``. A lone
    ``**`` is accepted and behaves like ``*``.

    Args:
        pattern: Glob text.

    Returns:
        Anchored, case-sensitive compiled expression.

    Raises:
        PatternCompileError: If the pattern is empty, contains a path
            separator, has an unterminated character class, or uses
            ``**`` inside a larger segment.
    """
    if not pattern:
        raise PatternCompileError(pattern, "pattern is empty")
    if any(sep in pattern for sep in _SEPARATORS):
        raise PatternCompileError(pattern, "patterns match a single name and cannot contain '/'")

    i = 0
    n = len(pattern)
    while i < n:
        char = pattern[i]
        if char == "[":
            j = i + 1
            if j < n and pattern[j] == "!":
                j += 1
            # A ']' right after the opening bracket is a literal member.
            if j < n and pattern[j] == "]":
                j += 1
            close = pattern.find("]", j)
            if close == -1:
                raise PatternCompileError(pattern, f"unterminated character class at index {i}")
            i = close + 1
            continue
        if char == "*" and i + 1 < n and pattern[i + 1] == "*" and pattern != "**":
            raise PatternCompileError(pattern, "'**' must form a whole segment on its own")
        i += 1

    try:
        return re.compile(fnmatch.translate(pattern))
    except re.error as e:
        raise PatternCompileError(pattern, str(e)) from e


def _compile_rules(
    patterns: Iterable[str],
    source: PatternSource,
    start: int = 0,
) -> tuple[PatternRule, ...]:
    """Compile patterns into rules numbered from ``start``."""
    rules: list[PatternRule] = []
    for offset, pattern in enumerate(patterns):
        rules.append(
            PatternRule(
                pattern=pattern,
                priority=start + offset,
                category=BUILTIN_PATTERNS.category_for(pattern),
                source=source,
                regex=compile_glob(pattern),
            )
        )
    return tuple(rules)


class PatternMatcher:
    """Matches entry names against compiled directory, file and exclude rules.

    Use :meth:`compile` to build a matcher from raw glob strings.
    """

    def __init__(
        self,
        directory_rules: tuple[PatternRule, ...] = (),
        file_rules: tuple[PatternRule, ...] = (),
        exclude_rules: tuple[PatternRule, ...] = (),
    ) -> None:
        self._directory_rules = directory_rules
        self._file_rules = file_rules
        self._exclude_rules = exclude_rules

    @classmethod
    def compile(
        cls,
        directory_patterns: Iterable[str],
        file_patterns: Iterable[str],
        exclude_patterns: Iterable[str],
        *,
        source: PatternSource = PatternSource.CONFIG,
    ) -> "PatternMatcher":
        """Compile raw glob strings into a matcher.

        Args:
            directory_patterns: Globs matched against directories.
            file_patterns: Globs matched against files.
            exclude_patterns: Globs that veto any match.
            source: Source tag recorded on every rule.

        Returns:
            A ready-to-share matcher.

        Raises:
            PatternCompileError: If any pattern is invalid.
        """
        matcher = cls(
            directory_rules=_compile_rules(directory_patterns, source),
            file_rules=_compile_rules(file_patterns, source),
            exclude_rules=_compile_rules(exclude_patterns, source),
        )
        logger.debug(
            "Compiled matcher: %d directory, %d file, %d exclude rules",
            len(matcher._directory_rules),
            len(matcher._file_rules),
            len(matcher._exclude_rules),
        )
        return matcher

    @property
    def directory_rules(self) -> tuple[PatternRule, ...]:
        return self._directory_rules

    @property
    def file_rules(self) -> tuple[PatternRule, ...]:
        return self._file_rules

    @property
    def exclude_rules(self) -> tuple[PatternRule, ...]:
        return self._exclude_rules

    def evaluate(self, name: str, hint: FileTypeHint | None = None) -> MatchResult | None:
        """Match a base name against the rule lists.

        Exclusions are checked first and short-circuit to no match.
        Directories are checked against directory rules, files against
        file rules. Symlinks and entries of unknown type are checked
        against both, directory rules first.

        Args:
            name: Base name of the entry.
            hint: File type of the entry, if known.

        Returns:
            The first matching rule's descriptor, or None.
        """
        if not name or self.is_excluded(name):
            return None

        if hint is None or hint in (FileTypeHint.UNKNOWN, FileTypeHint.SYMLINK):
            check_dirs = check_files = True
        else:
            check_dirs = hint == FileTypeHint.DIRECTORY
            check_files = hint == FileTypeHint.FILE

        if check_dirs:
            for rule in self._directory_rules:
                if rule.matches(name):
                    return rule.to_match()

        if check_files:
            for rule in self._file_rules:
                if rule.matches(name):
                    return rule.to_match()

        return None

    def matches(self, path: Path) -> MatchResult | None:
        """Match a path, reading its type from the filesystem.

        Convenience for callers without a directory walk at hand. An
        unreadable path is evaluated with an unknown type.
        """
        try:
            st = path.lstat()
        except OSError:
            hint = FileTypeHint.UNKNOWN
        else:
            hint = _hint_from_mode(st.st_mode)
        return self.evaluate(path.name, hint)

    def is_excluded(self, name: str) -> bool:
        """Check whether a base name matches any exclusion rule."""
        return any(rule.matches(name) for rule in self._exclude_rules)

    def add_include_patterns(
        self,
        patterns: Iterable[str],
        *,
        source: PatternSource = PatternSource.CLI,
    ) -> None:
        """Append include patterns after the existing rules.

        Patterns containing ``.`` or ``*`` are treated as file patterns,
        anything else as a directory pattern. Either all patterns are
        added or, if one fails to compile, none are.

        Raises:
            PatternCompileError: If any pattern is invalid.
        """
        dir_patterns: list[str] = []
        file_patterns: list[str] = []
        for pattern in patterns:
            if is_file_pattern(pattern):
                file_patterns.append(pattern)
            else:
                dir_patterns.append(pattern)

        new_dirs = _compile_rules(dir_patterns, source, start=len(self._directory_rules))
        new_files = _compile_rules(file_patterns, source, start=len(self._file_rules))
        self._directory_rules = (*self._directory_rules, *new_dirs)
        self._file_rules = (*self._file_rules, *new_files)

    def add_exclude_patterns(
        self,
        patterns: Iterable[str],
        *,
        source: PatternSource = PatternSource.CLI,
    ) -> None:
        """Append exclusion patterns.

        Raises:
            PatternCompileError: If any pattern is invalid.
        """
        new_rules = _compile_rules(patterns, source, start=len(self._exclude_rules))
        self._exclude_rules = (*self._exclude_rules, *new_rules)


def is_file_pattern(pattern: str) -> bool:
    """Guess whether a free-form include pattern targets files."""
    return "." in pattern or "*" in pattern


def _hint_from_mode(mode: int) -> FileTypeHint:
    if stat.S_ISLNK(mode):
        return FileTypeHint.SYMLINK
    if stat.S_ISDIR(mode):
        return FileTypeHint.DIRECTORY
    if stat.S_ISREG(mode):
        return FileTypeHint.FILE
    return FileTypeHint.UNKNOWN
