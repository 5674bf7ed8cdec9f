"""Progress sinks and per-category tracking.

The engine only talks to the narrow ``ProgressSink`` protocol. Every
implementation must tolerate calls from several worker threads at once.
"""

import threading
import time
from typing import Protocol

from rich.console import Console
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    SpinnerColumn,
    TaskID,
    TextColumn,
    TimeElapsedColumn,
)

from mrclean.core.theme import category_style
from mrclean.models.pattern import PatternCategory
from mrclean.utils.formatting import err_console, format_count, format_size

# Minimum seconds between two refreshes of the compact scan line
REFRESH_INTERVAL = 0.05


class ProgressSink(Protocol):
    """Receiver of progress events from the scanner and cleaner."""

    def increment(self, count: int = 1) -> None: ...

    def set_message(self, message: str) -> None: ...

    def finish(self) -> None: ...


class NoOpProgress:
    """Progress sink that discards every event."""

    def increment(self, count: int = 1) -> None:
        pass

    def set_message(self, message: str) -> None:
        pass

    def finish(self) -> None:
        pass


class CategoryTracker:
    """Thread-safe item counts and sizes per pattern category."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._counts: dict[PatternCategory, int] = dict.fromkeys(PatternCategory, 0)
        self._sizes: dict[PatternCategory, int] = dict.fromkeys(PatternCategory, 0)

    def add_item(self, category: PatternCategory, size: int) -> None:
        with self._lock:
            self._counts[category] += 1
            self._sizes[category] += size

    def count(self, category: PatternCategory) -> int:
        with self._lock:
            return self._counts[category]

    def size(self, category: PatternCategory) -> int:
        with self._lock:
            return self._sizes[category]

    def total_count(self) -> int:
        with self._lock:
            return sum(self._counts.values())

    def total_size(self) -> int:
        with self._lock:
            return sum(self._sizes.values())

    def breakdown(self) -> list[tuple[PatternCategory, int, int]]:
        """Return (category, count, size) for every non-empty category.

        Categories appear in declaration order of ``PatternCategory``.
        """
        with self._lock:
            return [
                (category, self._counts[category], self._sizes[category])
                for category in PatternCategory
                if self._counts[category]
            ]


class BarProgress:
    """Rich progress bar over a known number of steps.

    The bar starts on construction and is removed from the terminal by
    ``finish``. Usable as a context manager.
    """

    def __init__(
        self,
        total: int,
        description: str = "Cleaning",
        console: Console | None = None,
    ) -> None:
        self._progress = Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            MofNCompleteColumn(),
            TimeElapsedColumn(),
            console=console or err_console,
            transient=True,
        )
        self._task: TaskID = self._progress.add_task(description, total=total)
        self._finished = False
        self._progress.start()

    def increment(self, count: int = 1) -> None:
        self._progress.advance(self._task, advance=count)

    def set_message(self, message: str) -> None:
        self._progress.update(self._task, description=message)

    def finish(self) -> None:
        if not self._finished:
            self._finished = True
            self._progress.stop()

    def __enter__(self) -> "BarProgress":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.finish()


def cleaning_progress(total: int, console: Console | None = None) -> BarProgress:
    """Progress bar for the clean phase, one step per item."""
    return BarProgress(total, description="Cleaning", console=console)


class CompactProgress:
    """Single-line spinner for the scan phase.

    Shows entries scanned and scan rate, refreshed at most once per
    ``REFRESH_INTERVAL``. When a ``CategoryTracker`` is attached, the
    matched count, size and category breakdown are shown once known.
    """

    def __init__(
        self,
        tracker: CategoryTracker | None = None,
        console: Console | None = None,
        description: str = "Scanning",
    ) -> None:
        self._tracker = tracker
        self._description = description
        self._lock = threading.Lock()
        self._entries = 0
        self._started = time.monotonic()
        self._last_refresh = 0.0
        self._finished = False
        self._progress = Progress(
            SpinnerColumn(),
            TextColumn("{task.description}"),
            console=console or err_console,
            transient=True,
        )
        self._task: TaskID = self._progress.add_task(self._render(), total=None)
        self._progress.start()

    @property
    def entries(self) -> int:
        with self._lock:
            return self._entries

    def increment(self, count: int = 1) -> None:
        now = time.monotonic()
        with self._lock:
            self._entries += count
            if now - self._last_refresh < REFRESH_INTERVAL:
                return
            self._last_refresh = now
            line = self._render()
        self._progress.update(self._task, description=line)

    def set_message(self, message: str) -> None:
        with self._lock:
            self._description = message
            line = self._render()
        self._progress.update(self._task, description=line)

    def finish(self) -> None:
        with self._lock:
            if self._finished:
                return
            self._finished = True
            line = self._render()
        self._progress.update(self._task, description=line)
        self._progress.stop()

    def _render(self) -> str:
        elapsed = max(time.monotonic() - self._started, 1e-6)
        rate = self._entries / elapsed
        line = (
            f"{self._description}... [info]{format_count(self._entries)}[/] entries "
            f"[muted]({format_count(int(rate))}/s)[/]"
        )
        if self._tracker is not None and self._tracker.total_count():
            breakdown = "  ".join(
                f"[{category_style(category)}]{category.label}[/] {count}"
                for category, count, _size in self._tracker.breakdown()
            )
            line += (
                f"  [success]{format_count(self._tracker.total_count())}[/] matched "
                f"([size]{format_size(self._tracker.total_size())}[/])  {breakdown}"
            )
        return line
