"""Scan, prune and clean orchestration.

``CleanPipeline`` wires the scanner, pruner and cleaner together. It is
split into ``plan`` and ``execute`` so that callers can show what was
found and ask for confirmation between the two phases.
"""

import logging
import time
from dataclasses import dataclass, replace
from pathlib import Path

from mrclean.engine.cleaner import ParallelCleaner
from mrclean.engine.pruner import prune_nested_items
from mrclean.engine.scanner import DEFAULT_MAX_DEPTH, Scanner, resolve_root
from mrclean.models.item import CandidateItem
from mrclean.models.pattern import PatternCategory
from mrclean.models.report import CleanReport, ScanFailure, ScanOutcome
from mrclean.patterns.matcher import PatternMatcher
from mrclean.utils.progress import CategoryTracker, NoOpProgress, ProgressSink

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class CleanPlan:
    """Result of the scan and prune phases.

    Attributes:
        root: Canonical scan root.
        items: Pruned candidates, ordered by depth then path.
        outcome: Unpruned scan outcome, including scan failures.
        scan_duration: Seconds spent scanning and pruning.
    """

    root: Path
    items: tuple[CandidateItem, ...]
    outcome: ScanOutcome
    scan_duration: float

    @property
    def is_empty(self) -> bool:
        return not self.items

    @property
    def total_size(self) -> int:
        return sum(item.size for item in self.items)

    @property
    def dir_count(self) -> int:
        return sum(1 for item in self.items if item.is_directory)

    @property
    def file_count(self) -> int:
        return len(self.items) - self.dir_count

    @property
    def scan_errors(self) -> list[ScanFailure]:
        return self.outcome.failures

    @property
    def entries_scanned(self) -> int:
        return self.outcome.entries_scanned

    def breakdown(self) -> list[tuple[PatternCategory, int, int]]:
        """Per-category (category, count, size) of the pruned items."""
        tracker = CategoryTracker()
        for item in self.items:
            tracker.add_item(item.match.category, item.size)
        return tracker.breakdown()


class CleanPipeline:
    """Runs scan, prune and clean for one root directory.

    Args:
        root: Directory to clean.
        matcher: Compiled patterns.
        max_depth: Maximum traversal depth below the root.
        follow_symlinks: Descend into symlinked directories while scanning.
        threads: Worker count for both phases. Defaults to the CPU count.
        dry_run: Compute the report without deleting anything.
        scan_progress: Sink for scan progress.
        category_tracker: Receives (category, size) of every unpruned candidate.
    """

    def __init__(
        self,
        root: Path | str,
        matcher: PatternMatcher,
        *,
        max_depth: int = DEFAULT_MAX_DEPTH,
        follow_symlinks: bool = False,
        threads: int | None = None,
        dry_run: bool = False,
        scan_progress: ProgressSink | None = None,
        category_tracker: CategoryTracker | None = None,
    ) -> None:
        self._root = Path(root)
        self._matcher = matcher
        self._max_depth = max_depth
        self._follow_symlinks = follow_symlinks
        self._threads = threads
        self._dry_run = dry_run
        self._scan_progress = scan_progress or NoOpProgress()
        self._category_tracker = category_tracker

    @property
    def dry_run(self) -> bool:
        return self._dry_run

    def plan(self) -> CleanPlan:
        """Scan the root and prune nested candidates.

        Returns:
            CleanPlan with the items that would be removed.

        Raises:
            RootPathError: If the root cannot be resolved to a directory.
        """
        root = resolve_root(self._root)
        started = time.monotonic()
        scanner = Scanner(
            root,
            self._matcher,
            max_depth=self._max_depth,
            follow_symlinks=self._follow_symlinks,
            workers=self._threads,
            progress=self._scan_progress,
            category_tracker=self._category_tracker,
        )
        try:
            outcome = scanner.scan()
        finally:
            self._scan_progress.finish()
        items = prune_nested_items(outcome.items)
        duration = time.monotonic() - started
        logger.info(
            "Found %d items to clean under %s (%d before pruning, %d scan errors)",
            len(items),
            root,
            len(outcome.items),
            len(outcome.failures),
        )
        return CleanPlan(
            root=root,
            items=tuple(items),
            outcome=outcome,
            scan_duration=duration,
        )

    def execute(self, plan: CleanPlan, progress: ProgressSink | None = None) -> CleanReport:
        """Remove the planned items, or total them up in dry-run mode.

        Args:
            plan: Plan returned by :meth:`plan`.
            progress: Sink for clean progress.

        Returns:
            Complete CleanReport including scan failures and durations.
        """
        if plan.is_empty:
            report = CleanReport(dry_run=self._dry_run)
        else:
            cleaner = (
                ParallelCleaner(self._threads)
                .with_dry_run(self._dry_run)
                .with_progress(progress or NoOpProgress())
            )
            report = cleaner.clean(list(plan.items))

        return replace(
            report,
            scan_errors=tuple(plan.scan_errors),
            scan_duration=plan.scan_duration,
            dirs_deleted=plan.dir_count,
            files_deleted=plan.file_count,
            entries_scanned=plan.entries_scanned,
        )

    def run(self) -> CleanReport:
        """Plan and execute in one call."""
        return self.execute(self.plan())
