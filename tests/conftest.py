"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules.
"""

from collections.abc import Callable
from pathlib import Path
from types import SimpleNamespace

import pytest
from mrclean.models.item import CandidateItem, ItemType
from mrclean.models.pattern import MatchResult, PatternCategory, PatternSource
from mrclean.patterns.builtin import BUILTIN_PATTERNS
from mrclean.patterns.matcher import PatternMatcher

ItemFactory = Callable[..., CandidateItem]


@pytest.fixture
def make_item() -> ItemFactory:
    """Factory for CandidateItem instances that need not exist on disk."""

    def _make(
        path: str | Path,
        size: int = 0,
        item_type: ItemType = ItemType.DIRECTORY,
        pattern: str = "test",
        category: PatternCategory = PatternCategory.OTHER,
    ) -> CandidateItem:
        return CandidateItem(
            path=Path(path),
            size=size,
            item_type=item_type,
            match=MatchResult(
                pattern=pattern,
                priority=0,
                source=PatternSource.BUILTIN,
                category=category,
            ),
        )

    return _make


@pytest.fixture
def builtin_matcher() -> PatternMatcher:
    """Matcher compiled from the built-in pattern set."""
    return PatternMatcher.compile(
        BUILTIN_PATTERNS.directory_patterns(),
        BUILTIN_PATTERNS.file_patterns(),
        BUILTIN_PATTERNS.exclude_patterns(),
        source=PatternSource.BUILTIN,
    )


@pytest.fixture
def project_tree(tmp_path: Path) -> Path:
    """Small project with nested artifacts.

    Layout::

        project/
            node_modules/pkg/dist/   (empty)
            dist/bundle.js           (200 bytes)
            app.log                  (10 bytes)
            src/main.js              (30 bytes, not matched)
    """
    root = tmp_path / "project"
    (root / "node_modules" / "pkg" / "dist").mkdir(parents=True)
    (root / "dist").mkdir()
    (root / "dist" / "bundle.js").write_bytes(b"x" * 200)
    (root / "app.log").write_bytes(b"y" * 10)
    (root / "src").mkdir()
    (root / "src" / "main.js").write_bytes(b"z" * 30)
    return root


@pytest.fixture
def isolated_cli(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run CLI commands with no config files and plenty of free disk space.

    Changes into an empty working directory, points XDG_CONFIG_HOME at an
    empty directory and stubs the free-space query.
    """
    workdir = tmp_path / "cwd"
    workdir.mkdir()
    monkeypatch.chdir(workdir)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    monkeypatch.setattr(
        "mrclean.safety.guards.shutil.disk_usage",
        lambda _path: SimpleNamespace(total=10**12, used=0, free=10**12),
    )
    return workdir
