"""Parallel deletion of pruned candidates.

Each candidate is removed by a pool worker independently of the others.
A failed removal is returned to the joining thread as a ``CleanFailure``
and never cancels sibling removals.
"""

import logging
import os
import shutil
import time
from concurrent.futures import ThreadPoolExecutor, as_completed

from mrclean.models.item import CandidateItem, ItemType
from mrclean.models.report import CleanFailure, CleanReport, Statistics
from mrclean.utils.progress import NoOpProgress, ProgressSink

logger = logging.getLogger(__name__)


class ParallelCleaner:
    """Removes candidate items on a fixed-size thread pool.

    Configuration is builder-style; every ``with_*`` method returns the
    cleaner itself::

        report = ParallelCleaner(8).with_dry_run(True).clean(items)

    Statistics are reset at the start of every ``clean`` call and only
    updated from the calling thread as worker results are joined.

    Attributes:
        _thread_count: Pool size used for live runs.
        _dry_run: If True, compute totals without touching the filesystem.
        _progress: Signalled once per successfully removed item.
        _stats: Counters of the last invocation.
    """

    def __init__(self, thread_count: int | None = None) -> None:
        """Initialize the cleaner.

        Args:
            thread_count: Worker pool size. Defaults to the CPU count.
        """
        self._thread_count = _validate_threads(thread_count or os.cpu_count() or 4)
        self._dry_run = False
        self._progress: ProgressSink = NoOpProgress()
        self._stats = Statistics()

    @property
    def thread_count(self) -> int:
        return self._thread_count

    @property
    def dry_run(self) -> bool:
        return self._dry_run

    @property
    def statistics(self) -> Statistics:
        """Counters of the most recent ``clean`` call."""
        return self._stats

    def with_threads(self, thread_count: int) -> "ParallelCleaner":
        self._thread_count = _validate_threads(thread_count)
        return self

    def with_dry_run(self, dry_run: bool) -> "ParallelCleaner":
        self._dry_run = dry_run
        return self

    def with_progress(self, progress: ProgressSink) -> "ParallelCleaner":
        self._progress = progress
        return self

    def clean(self, items: list[CandidateItem]) -> CleanReport:
        """Remove every item, or total them up in dry-run mode.

        Blocks until every item has been attempted. Durations of the scan
        phase and the dir/file counts are left at their defaults for the
        caller to fill in.

        Args:
            items: Pruned candidates. No item may be an ancestor of another.

        Returns:
            CleanReport with counts, bytes and per-item failures.
        """
        self._stats.reset()
        started = time.monotonic()

        if self._dry_run:
            for item in items:
                self._stats.record_success(item.size)
            logger.debug(
                "Dry run: %d items, %d bytes would be removed",
                self._stats.items_deleted,
                self._stats.bytes_freed,
            )
            self._progress.finish()
            return self._report(time.monotonic() - started)

        if items:
            # Largest first so a huge directory is not left for the tail.
            ordered = sorted(items, key=lambda item: item.size, reverse=True)
            with ThreadPoolExecutor(
                max_workers=min(self._thread_count, len(ordered)),
                thread_name_prefix="mrclean-clean",
            ) as executor:
                futures = {executor.submit(remove_item, item): item for item in ordered}
                for future in as_completed(futures):
                    item = futures[future]
                    failure = future.result()
                    if failure is None:
                        self._stats.record_success(item.size)
                        self._progress.increment(1)
                    else:
                        logger.debug("Failed to remove %s: %s", failure.path, failure.message)
                        self._stats.record_failure(failure)

        self._progress.finish()
        report = self._report(time.monotonic() - started)
        logger.debug(
            "Removed %d items (%d bytes) in %.3fs, %d failures",
            report.items_deleted,
            report.bytes_freed,
            report.duration,
            len(report.errors),
        )
        return report

    def _report(self, duration: float) -> CleanReport:
        return CleanReport(
            items_deleted=self._stats.items_deleted,
            bytes_freed=self._stats.bytes_freed,
            errors=tuple(self._stats.errors.values()),
            duration=duration,
            dry_run=self._dry_run,
        )


def remove_item(item: CandidateItem) -> CleanFailure | None:
    """Remove a single candidate from disk.

    Directories are removed recursively, files directly, and symbolic
    links as links without touching their target.

    Args:
        item: Candidate to remove.

    Returns:
        None on success, otherwise a CleanFailure describing the error.
    """
    path = item.path
    try:
        if item.item_type == ItemType.DIRECTORY:
            shutil.rmtree(path)
        elif item.item_type == ItemType.SYMLINK and os.name == "nt" and os.path.isdir(path):
            # Windows directory links are removed like empty directories.
            os.rmdir(path)
        else:
            os.unlink(path)
    except OSError as e:
        return CleanFailure(path=path, message=e.strerror or str(e))
    return None


def _validate_threads(thread_count: int) -> int:
    if thread_count < 1:
        msg = f"thread_count must be at least 1, got {thread_count}"
        raise ValueError(msg)
    return thread_count
