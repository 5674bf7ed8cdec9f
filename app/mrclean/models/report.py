"""Scan and clean result models.

Failures on individual entries are values, not exceptions: the scanner
and cleaner collect them into lists and keep going.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from mrclean.models.item import CandidateItem


class ScanFailureKind(str, Enum):
    """Kind of recoverable scan failure."""

    IO = "io"
    SYMLINK_CYCLE = "symlink_cycle"


@dataclass(frozen=True, slots=True)
class ScanFailure:
    """A recoverable failure encountered while walking the tree.

    Attributes:
        kind: I/O failure or symbolic-link cycle.
        path: Best-known path of the offending entry.
        message: Error text for I/O failures, None for cycles.
    """

    kind: ScanFailureKind
    path: Path
    message: str | None = None

    @classmethod
    def io(cls, path: Path, message: str) -> "ScanFailure":
        """Create an I/O failure."""
        return cls(kind=ScanFailureKind.IO, path=path, message=message)

    @classmethod
    def symlink_cycle(cls, path: Path) -> "ScanFailure":
        """Create a symbolic-link cycle failure."""
        return cls(kind=ScanFailureKind.SYMLINK_CYCLE, path=path)

    def __str__(self) -> str:
        if self.kind == ScanFailureKind.SYMLINK_CYCLE:
            return f"Symbolic link cycle detected at {self.path}"
        return f"IO error at {self.path}: {self.message}"


@dataclass(frozen=True, slots=True)
class CleanFailure:
    """An item that could not be removed.

    Attributes:
        path: Path of the item.
        message: Error text reported by the operating system.
    """

    path: Path
    message: str

    def __str__(self) -> str:
        return f"IO error at {self.path}: {self.message}"


@dataclass(slots=True)
class ScanOutcome:
    """Accumulated result of a scan.

    Attributes:
        items: Candidates found (unpruned).
        failures: Recoverable failures hit during the walk.
        entries_scanned: Number of entries visited, the root included.
    """

    items: list[CandidateItem] = field(default_factory=list)
    failures: list[ScanFailure] = field(default_factory=list)
    entries_scanned: int = 0

    def merge(self, other: "ScanOutcome") -> "ScanOutcome":
        """Combine two outcomes. Order-insensitive up to list ordering."""
        return ScanOutcome(
            items=[*self.items, *other.items],
            failures=[*self.failures, *other.failures],
            entries_scanned=self.entries_scanned + other.entries_scanned,
        )


@dataclass(frozen=True, slots=True)
class CleanReport:
    """Final summary of one clean (or dry-run) invocation.

    Attributes:
        items_deleted: Items removed, or that would be removed in a dry run.
        bytes_freed: Bytes freed, or that would be freed in a dry run.
        errors: Per-item deletion failures.
        scan_errors: Failures collected during the scan phase.
        duration: Seconds spent in the clean phase.
        scan_duration: Seconds spent in the scan phase.
        dry_run: Whether no filesystem mutation was performed.
        dirs_deleted: Directory items dispatched.
        files_deleted: File and symlink items dispatched.
        entries_scanned: Entries visited during the scan phase.
    """

    items_deleted: int = 0
    bytes_freed: int = 0
    errors: tuple[CleanFailure, ...] = ()
    scan_errors: tuple[ScanFailure, ...] = ()
    duration: float = 0.0
    scan_duration: float = 0.0
    dry_run: bool = False
    dirs_deleted: int = 0
    files_deleted: int = 0
    entries_scanned: int = 0

    @property
    def total_errors(self) -> int:
        """Number of scan and clean failures combined."""
        return len(self.errors) + len(self.scan_errors)

    @property
    def total_duration(self) -> float:
        """Seconds spent in both phases."""
        return self.scan_duration + self.duration

    def to_dict(self) -> dict[str, object]:
        """Serialize to a JSON-compatible dictionary."""
        return {
            "items_deleted": self.items_deleted,
            "bytes_freed": self.bytes_freed,
            "errors": [{"path": str(e.path), "message": e.message} for e in self.errors],
            "scan_errors": [
                {"kind": e.kind.value, "path": str(e.path), "message": e.message}
                for e in self.scan_errors
            ],
            "duration": self.duration,
            "scan_duration": self.scan_duration,
            "dry_run": self.dry_run,
            "dirs_deleted": self.dirs_deleted,
            "files_deleted": self.files_deleted,
            "entries_scanned": self.entries_scanned,
        }


@dataclass(slots=True)
class Statistics:
    """Counters backing a clean invocation while it is in flight.

    Owned by a single ``ParallelCleaner`` and only updated from the
    thread that joins worker results, so no locking is involved.
    """

    items_deleted: int = 0
    bytes_freed: int = 0
    errors: dict[Path, CleanFailure] = field(default_factory=dict)

    def record_success(self, size: int) -> None:
        """Count one removed item of ``size`` bytes."""
        self.items_deleted += 1
        self.bytes_freed += size

    def record_failure(self, failure: CleanFailure) -> None:
        """Remember a failed item, keyed by path."""
        self.errors[failure.path] = failure

    def reset(self) -> None:
        """Zero all counters before a new invocation."""
        self.items_deleted = 0
        self.bytes_freed = 0
        self.errors.clear()
