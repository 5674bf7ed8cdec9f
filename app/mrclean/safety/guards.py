"""Pre-flight safety checks.

The guard is consulted once, before scanning. It refuses to run on a
path that does not exist, outside a git work tree (when enabled), or on
a filesystem that is nearly full.
"""

import logging
import shutil
from pathlib import Path

from mrclean.errors import MrCleanError
from mrclean.models.config import SafetyConfig

logger = logging.getLogger(__name__)

# Free space thresholds are in decimal gigabytes
BYTES_PER_GB = 1_000_000_000


class SafetyViolation(MrCleanError):
    """Raised when a safety check refuses the target path."""

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


class SafetyGuard:
    """Validates a target path before anything is scanned or deleted.

    Attributes:
        check_git_repo: Require ``.git`` in the path or one of its ancestors.
        min_free_space_gb: Required free space; 0 disables the check.
    """

    def __init__(self, check_git_repo: bool = True, min_free_space_gb: float = 1.0) -> None:
        self.check_git_repo = check_git_repo
        self.min_free_space_gb = min_free_space_gb

    @classmethod
    def from_config(cls, safety: SafetyConfig, check_git_repo: bool | None = None) -> "SafetyGuard":
        """Build a guard from the safety config section.

        Args:
            safety: Safety configuration.
            check_git_repo: Override for the git check, e.g. from ``--no-git-check``.
        """
        return cls(
            check_git_repo=safety.check_git_repo if check_git_repo is None else check_git_repo,
            min_free_space_gb=safety.min_free_space_gb,
        )

    def validate(self, path: Path) -> None:
        """Run every enabled check against ``path``.

        Raises:
            SafetyViolation: On the first failed check.
        """
        if not path.exists():
            raise SafetyViolation(f"Path does not exist: {path}")

        if self.check_git_repo and not is_in_git_repo(path):
            raise SafetyViolation(
                f"{path} is not inside a git repository. Use --no-git-check to override."
            )

        if self.min_free_space_gb > 0:
            self._check_disk_space(path)

        logger.debug("Safety checks passed for %s", path)

    def _check_disk_space(self, path: Path) -> None:
        try:
            usage = shutil.disk_usage(path)
        except OSError as e:
            logger.warning("Could not read free space for %s: %s", path, e)
            return
        free_gb = usage.free / BYTES_PER_GB
        if free_gb < self.min_free_space_gb:
            raise SafetyViolation(
                f"Insufficient disk space: {free_gb:.2f} GB available, "
                f"{self.min_free_space_gb:.2f} GB required"
            )


def is_in_git_repo(path: Path) -> bool:
    """Whether ``path`` or any of its ancestors contains a ``.git`` entry."""
    current = path.absolute()
    return any((directory / ".git").exists() for directory in (current, *current.parents))
