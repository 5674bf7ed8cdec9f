"""Unit tests for SafetyGuard."""

from pathlib import Path
from types import SimpleNamespace
from unittest.mock import patch

import pytest
from mrclean.models.config import SafetyConfig
from mrclean.safety.guards import BYTES_PER_GB, SafetyGuard, SafetyViolation, is_in_git_repo


def _usage(free_gb: float):
    free = int(free_gb * BYTES_PER_GB)
    return SimpleNamespace(total=free * 2, used=free, free=free)


@pytest.fixture
def git_repo(tmp_path: Path) -> Path:
    """Directory containing a .git entry, with a nested subdirectory."""
    repo = tmp_path / "repo"
    (repo / ".git").mkdir(parents=True)
    (repo / "pkg" / "src").mkdir(parents=True)
    return repo


class TestIsInGitRepo:
    """Tests for the git work tree check."""

    def test_repo_root(self, git_repo: Path) -> None:
        assert is_in_git_repo(git_repo)

    def test_nested_directory(self, git_repo: Path) -> None:
        """Ancestors are searched."""
        assert is_in_git_repo(git_repo / "pkg" / "src")

    def test_git_file_counts(self, tmp_path: Path) -> None:
        """Worktrees and submodules use a .git file."""
        (tmp_path / ".git").write_text("gitdir: ../.git/worktrees/x")
        assert is_in_git_repo(tmp_path)

    def test_outside_repo(self, tmp_path: Path) -> None:
        with patch("mrclean.safety.guards.Path.exists", return_value=False):
            assert not is_in_git_repo(tmp_path)


class TestSafetyGuard:
    """Tests for SafetyGuard.validate."""

    def test_missing_path(self, tmp_path: Path) -> None:
        """A non-existent path is refused before any other check."""
        guard = SafetyGuard(check_git_repo=False, min_free_space_gb=0)

        with pytest.raises(SafetyViolation, match="does not exist"):
            guard.validate(tmp_path / "missing")

    def test_not_a_git_repo(self, tmp_path: Path) -> None:
        """The git check refuses paths outside a work tree."""
        guard = SafetyGuard(check_git_repo=True, min_free_space_gb=0)

        with (
            patch("mrclean.safety.guards.is_in_git_repo", return_value=False),
            pytest.raises(SafetyViolation, match="--no-git-check") as exc_info,
        ):
            guard.validate(tmp_path)

        assert "not inside a git repository" in exc_info.value.reason

    def test_git_check_disabled(self, tmp_path: Path) -> None:
        """With the check off, non-repositories are accepted."""
        guard = SafetyGuard(check_git_repo=False, min_free_space_gb=0)

        with patch("mrclean.safety.guards.is_in_git_repo", return_value=False):
            guard.validate(tmp_path)

    def test_git_repo_passes(self, git_repo: Path) -> None:
        guard = SafetyGuard(check_git_repo=True, min_free_space_gb=0)
        guard.validate(git_repo / "pkg")

    def test_insufficient_disk_space(self, git_repo: Path) -> None:
        """Free space below the threshold is refused."""
        guard = SafetyGuard(check_git_repo=True, min_free_space_gb=5.0)

        with (
            patch("mrclean.safety.guards.shutil.disk_usage", return_value=_usage(0.5)),
            pytest.raises(SafetyViolation, match="Insufficient disk space"),
        ):
            guard.validate(git_repo)

    def test_sufficient_disk_space(self, git_repo: Path) -> None:
        guard = SafetyGuard(check_git_repo=True, min_free_space_gb=1.0)

        with patch("mrclean.safety.guards.shutil.disk_usage", return_value=_usage(2.0)):
            guard.validate(git_repo)

    def test_zero_threshold_skips_disk_check(self, git_repo: Path) -> None:
        """A threshold of 0 never queries the filesystem."""
        guard = SafetyGuard(check_git_repo=True, min_free_space_gb=0)

        with patch("mrclean.safety.guards.shutil.disk_usage") as mock_usage:
            guard.validate(git_repo)

        mock_usage.assert_not_called()

    def test_unreadable_disk_usage_is_not_fatal(self, git_repo: Path) -> None:
        """An error querying free space only logs a warning."""
        guard = SafetyGuard(check_git_repo=True, min_free_space_gb=1.0)

        with patch("mrclean.safety.guards.shutil.disk_usage", side_effect=OSError("nope")):
            guard.validate(git_repo)


class TestFromConfig:
    """Tests for SafetyGuard.from_config."""

    def test_uses_config_values(self) -> None:
        guard = SafetyGuard.from_config(SafetyConfig(check_git_repo=False, min_free_space_gb=2.5))

        assert guard.check_git_repo is False
        assert guard.min_free_space_gb == 2.5

    def test_override_git_check(self) -> None:
        """The command-line flag wins over the config value."""
        guard = SafetyGuard.from_config(SafetyConfig(check_git_repo=True), check_git_repo=False)
        assert guard.check_git_repo is False
