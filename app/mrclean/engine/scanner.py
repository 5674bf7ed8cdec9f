"""Parallel directory scanner.

Walks the tree beneath a root directory, evaluates every entry against a
shared ``PatternMatcher`` and computes the total size of every matched
directory in the same pass.

The walk is a fold-reduce over directory listings: each listing is read
by a pool worker into a private accumulator, and the orchestrating
thread concatenates accumulators as they complete. Concatenation is
associative and commutative, so the result does not depend on how many
workers ran or in which order listings finished. Directory totals are
computed afterwards from the recorded file sizes, without a second walk.
"""

import logging
import errno
import os
import queue
import stat
import time
from collections.abc import Iterator
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from contextlib import contextmanager
from dataclasses import dataclass, field, replace
from pathlib import Path

from mrclean.errors import RootPathError
from mrclean.models.item import CandidateItem, ItemType
from mrclean.models.pattern import FileTypeHint
from mrclean.models.report import ScanFailure, ScanOutcome
from mrclean.patterns.matcher import PatternMatcher
from mrclean.utils.progress import CategoryTracker, NoOpProgress, ProgressSink

logger = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH = 10


@dataclass(frozen=True, slots=True)
class _DirTask:
    """A directory waiting to be listed.

    Attributes:
        path: Path as reached from the scan root (may pass through links).
        real_path: Canonical location, used for cycle detection.
        depth: Depth of this directory below the root (root is 0).
        ancestors: Canonical locations of every directory on the route
            from the root to this one, this one included.
    """

    path: Path
    real_path: Path
    depth: int
    ancestors: frozenset[Path] = frozenset()

    def child(self, path: Path, real_path: Path) -> "_DirTask":
        return _DirTask(
            path=path,
            real_path=real_path,
            depth=self.depth + 1,
            ancestors=self.ancestors | {real_path},
        )


@dataclass(slots=True)
class ScanAccumulator:
    """Partial scan state built by one worker.

    ``file_sizes`` and ``dir_sizes`` are recorded for every entry, matched
    or not, so that matched directories can be totalled after the walk.
    """

    items: list[CandidateItem] = field(default_factory=list)
    failures: list[ScanFailure] = field(default_factory=list)
    file_sizes: list[tuple[str, int]] = field(default_factory=list)
    dir_sizes: list[tuple[str, int]] = field(default_factory=list)
    entries: int = 0

    def merge(self, other: "ScanAccumulator") -> "ScanAccumulator":
        """Return the concatenation of two accumulators."""
        return ScanAccumulator(
            items=[*self.items, *other.items],
            failures=[*self.failures, *other.failures],
            file_sizes=[*self.file_sizes, *other.file_sizes],
            dir_sizes=[*self.dir_sizes, *other.dir_sizes],
            entries=self.entries + other.entries,
        )

    def absorb(self, other: "ScanAccumulator") -> None:
        """In-place form of :meth:`merge`."""
        self.items.extend(other.items)
        self.failures.extend(other.failures)
        self.file_sizes.extend(other.file_sizes)
        self.dir_sizes.extend(other.dir_sizes)
        self.entries += other.entries


class Scanner:
    """Finds cleanable entries beneath a root directory.

    Args:
        root: Directory to scan. It is canonicalized when the scan starts.
        matcher: Compiled patterns, shared read-only by all workers.
        max_depth: Deepest level whose entries are visited (root is 0).
        follow_symlinks: Descend into symlinked directories.
        workers: Pool size when no executor is supplied.
        executor: Externally owned pool to run listings on. It is not
            shut down by the scanner.
        progress: Receives one increment per visited entry.
        category_tracker: Receives (category, size) once per final candidate.
        count_directory_entries: Add each directory's own inode size to
            matched directory totals. Off by default, so totals are the
            sum of regular file sizes only.
    """

    def __init__(
        self,
        root: Path | str,
        matcher: PatternMatcher,
        *,
        max_depth: int = DEFAULT_MAX_DEPTH,
        follow_symlinks: bool = False,
        workers: int | None = None,
        executor: Executor | None = None,
        progress: ProgressSink | None = None,
        category_tracker: CategoryTracker | None = None,
        count_directory_entries: bool = False,
    ) -> None:
        if max_depth < 0:
            msg = f"max_depth must be non-negative, got {max_depth}"
            raise ValueError(msg)
        self._root = Path(root)
        self._matcher = matcher
        self._max_depth = max_depth
        self._follow_symlinks = follow_symlinks
        self._workers = workers or os.cpu_count() or 4
        self._executor = executor
        self._progress: ProgressSink = progress or NoOpProgress()
        self._category_tracker = category_tracker
        self._count_directory_entries = count_directory_entries

    def scan(self) -> ScanOutcome:
        """Walk the tree and return candidates, failures and entry count.

        Returns:
            ScanOutcome with directory sizes fully aggregated.

        Raises:
            RootPathError: If the root cannot be canonicalized or is not a
                directory.
        """
        root = resolve_root(self._root)
        started = time.monotonic()
        logger.debug(
            "Scanning %s (max_depth=%d, follow_symlinks=%s, workers=%d)",
            root,
            self._max_depth,
            self._follow_symlinks,
            self._workers,
        )

        # The root is visited but never a candidate.
        total = ScanAccumulator(entries=1)
        self._progress.increment(1)
        if self._max_depth > 0:
            with self._executor_scope() as executor:
                root_task = _DirTask(
                    path=root, real_path=root, depth=0, ancestors=frozenset({root})
                )
                self._walk(executor, root_task, total)

        items = aggregate_directory_sizes(total, root)

        if self._category_tracker is not None:
            for item in items:
                self._category_tracker.add_item(item.match.category, item.size)

        logger.debug(
            "Scan finished in %.3fs: %d entries, %d candidates, %d failures",
            time.monotonic() - started,
            total.entries,
            len(items),
            len(total.failures),
        )
        return ScanOutcome(items=items, failures=total.failures, entries_scanned=total.entries)

    @contextmanager
    def _executor_scope(self) -> Iterator[Executor]:
        if self._executor is not None:
            yield self._executor
            return
        with ThreadPoolExecutor(
            max_workers=self._workers,
            thread_name_prefix="mrclean-scan",
        ) as executor:
            yield executor

    def _walk(self, executor: Executor, root_task: _DirTask, total: ScanAccumulator) -> None:
        """Dispatch directory listings until none are outstanding."""
        completed: queue.SimpleQueue[Future[tuple[ScanAccumulator, list[_DirTask]]]] = (
            queue.SimpleQueue()
        )

        def dispatch(task: _DirTask) -> None:
            future = executor.submit(self._read_directory, task)
            future.add_done_callback(completed.put)

        dispatch(root_task)
        outstanding = 1
        while outstanding:
            future = completed.get()
            outstanding -= 1
            partial, subdirs = future.result()
            total.absorb(partial)
            for subdir in subdirs:
                dispatch(subdir)
            outstanding += len(subdirs)

    def _read_directory(self, task: _DirTask) -> tuple[ScanAccumulator, list[_DirTask]]:
        """List one directory and fold its entries into a fresh accumulator."""
        acc = ScanAccumulator()
        subdirs: list[_DirTask] = []
        try:
            with os.scandir(task.path) as it:
                entries = list(it)
        except OSError as e:
            acc.failures.append(ScanFailure.io(task.path, _describe(e)))
            return acc, subdirs

        child_depth = task.depth + 1
        descend = child_depth < self._max_depth
        for entry in entries:
            acc.entries += 1
            self._visit(entry, task, descend, acc, subdirs)

        if entries:
            self._progress.increment(len(entries))
        return acc, subdirs

    def _visit(
        self,
        entry: os.DirEntry[str],
        parent: _DirTask,
        descend: bool,
        acc: ScanAccumulator,
        subdirs: list[_DirTask],
    ) -> None:
        path = parent.path / entry.name
        try:
            is_link = entry.is_symlink()
            is_dir = not is_link and entry.is_dir(follow_symlinks=False)
            is_file = not is_link and entry.is_file(follow_symlinks=False)
        except OSError as e:
            acc.failures.append(ScanFailure.io(path, _describe(e)))
            return

        if is_link:
            self._visit_symlink(entry, path, parent, descend, acc, subdirs)
        elif is_dir:
            match = self._matcher.evaluate(entry.name, FileTypeHint.DIRECTORY)
            if match is not None:
                # Real size is filled in by aggregate_directory_sizes.
                acc.items.append(CandidateItem(path, 0, ItemType.DIRECTORY, match))
            if self._count_directory_entries:
                try:
                    acc.dir_sizes.append((str(path), entry.stat(follow_symlinks=False).st_size))
                except OSError as e:
                    acc.failures.append(ScanFailure.io(path, _describe(e)))
            if descend:
                subdirs.append(parent.child(path, parent.real_path / entry.name))
        elif is_file:
            size = self._lstat_size(entry, path, acc)
            if size is None:
                return
            acc.file_sizes.append((str(path), size))
            match = self._matcher.evaluate(entry.name, FileTypeHint.FILE)
            if match is not None:
                acc.items.append(CandidateItem(path, size, ItemType.FILE, match))
        # Sockets, FIFOs and device nodes are counted but never matched.

    def _visit_symlink(
        self,
        entry: os.DirEntry[str],
        path: Path,
        parent: _DirTask,
        descend: bool,
        acc: ScanAccumulator,
        subdirs: list[_DirTask],
    ) -> None:
        try:
            target_stat: os.stat_result | None = os.stat(path)
        except (FileNotFoundError, NotADirectoryError):
            # Dangling link: nothing behind it to count.
            target_stat = None
        except OSError as e:
            if e.errno == errno.ELOOP:
                logger.debug("Symlink loop at %s", path)
                acc.failures.append(ScanFailure.symlink_cycle(path))
            else:
                acc.failures.append(ScanFailure.io(path, _describe(e)))
            return

        target_is_dir = target_stat is not None and stat.S_ISDIR(target_stat.st_mode)
        target: Path | None = None
        if target_is_dir:
            try:
                target = Path(os.path.realpath(path))
            except OSError as e:
                acc.failures.append(ScanFailure.io(path, _describe(e)))
                return
            # A link back to any directory on the route walked so far.
            if target in parent.ancestors or parent.real_path.is_relative_to(target):
                logger.debug("Symlink cycle at %s -> %s", path, target)
                acc.failures.append(ScanFailure.symlink_cycle(path))
                return

        size = self._lstat_size(entry, path, acc)
        if size is None:
            return
        match = self._matcher.evaluate(entry.name, FileTypeHint.SYMLINK)
        if match is not None:
            acc.items.append(CandidateItem(path, size, ItemType.SYMLINK, match))

        if not self._follow_symlinks or target_stat is None:
            return
        if target is not None:
            if descend:
                subdirs.append(parent.child(path, target))
        elif stat.S_ISREG(target_stat.st_mode):
            acc.file_sizes.append((str(path), target_stat.st_size))

    @staticmethod
    def _lstat_size(entry: os.DirEntry[str], path: Path, acc: ScanAccumulator) -> int | None:
        try:
            return entry.stat(follow_symlinks=False).st_size
        except FileNotFoundError:
            logger.debug("Entry vanished during scan: %s", path)
            return None
        except OSError as e:
            acc.failures.append(ScanFailure.io(path, _describe(e)))
            return None


def aggregate_directory_sizes(acc: ScanAccumulator, root: Path) -> list[CandidateItem]:
    """Fill in the total size of every directory candidate.

    A directory's total is the size of every recorded file that has it as
    an ancestor (by path component), plus the recorded own sizes of itself
    and its subdirectories. Each recorded entry walks its ancestor chain
    once, stopping at the root.

    Args:
        acc: Fully merged accumulator.
        root: Canonical scan root.

    Returns:
        Candidates with directory sizes set; other candidates unchanged.
    """
    totals: dict[str, int] = {str(item.path): 0 for item in acc.items if item.is_directory}
    if not totals:
        return list(acc.items)

    root_str = str(root)

    def add_to_ancestors(start: str, size: int) -> None:
        current = start
        while len(current) >= len(root_str):
            if current in totals:
                totals[current] += size
            if current == root_str:
                break
            parent = os.path.dirname(current)
            if parent == current:
                break
            current = parent

    for dir_path, own_size in acc.dir_sizes:
        add_to_ancestors(dir_path, own_size)
    for file_path, size in acc.file_sizes:
        add_to_ancestors(os.path.dirname(file_path), size)

    return [
        replace(item, size=totals[str(item.path)]) if item.is_directory else item
        for item in acc.items
    ]


def resolve_root(root: Path) -> Path:
    """Canonicalize a scan root.

    Raises:
        RootPathError: If the path does not exist, cannot be resolved, or
            is not a directory.
    """
    try:
        resolved = root.resolve(strict=True)
    except (OSError, RuntimeError) as e:
        msg = f"Cannot resolve root path {root}: {e}"
        raise RootPathError(msg) from e
    if not resolved.is_dir():
        msg = f"Root path is not a directory: {resolved}"
        raise RootPathError(msg)
    return resolved


def _describe(error: OSError) -> str:
    return error.strerror or str(error)
