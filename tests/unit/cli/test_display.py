"""Unit tests for cli/display.py.

Tests for the table builders and summary printers shared by the clean
and list commands.
"""

import io
from pathlib import Path
from unittest.mock import patch

import pytest
from mrclean.cli.display import (
    PREVIEW_LIMIT,
    create_items_table,
    format_breakdown,
    print_dry_run_preview,
    print_failures,
    print_plan_summary,
    print_report,
)
from mrclean.core.theme import get_theme
from mrclean.engine.pipeline import CleanPlan
from mrclean.models.item import ItemType
from mrclean.models.pattern import PatternCategory
from mrclean.models.report import CleanFailure, CleanReport, ScanFailure, ScanOutcome
from rich.console import Console


def _capture_console_output(func: object, *args: object, **kwargs: object) -> str:
    """Capture Rich output by replacing the module-level consoles."""
    buf = io.StringIO()
    test_console = Console(theme=get_theme(), file=buf, color_system=None, width=200)
    with (
        patch("mrclean.cli.display.console", test_console),
        patch("mrclean.cli.display.err_console", test_console),
        patch("mrclean.utils.formatting.console", test_console),
    ):
        func(*args, **kwargs)  # type: ignore[operator]
    return buf.getvalue()


def _render(renderable: object) -> str:
    buf = io.StringIO()
    Console(theme=get_theme(), file=buf, color_system=None, width=200).print(renderable)
    return buf.getvalue()


@pytest.fixture
def plan(make_item) -> CleanPlan:
    items = (
        make_item("/p/node_modules", size=5000, category=PatternCategory.DEPENDENCIES),
        make_item("/p/dist", size=2000, category=PatternCategory.BUILD_OUTPUTS),
        make_item("/p/app.log", size=10, item_type=ItemType.FILE, category=PatternCategory.LOGS),
    )
    return CleanPlan(
        root=Path("/p"),
        items=items,
        outcome=ScanOutcome(items=list(items), entries_scanned=42),
        scan_duration=0.5,
    )


class TestItemsTable:
    """Tests for create_items_table."""

    def test_rows_and_columns(self, plan: CleanPlan) -> None:
        output = _render(create_items_table(list(plan.items), title="Found"))

        assert "Found" in output
        assert "/p/node_modules" in output
        assert "5.0 kB" in output
        assert "Dependencies" in output
        assert "Logs" in output

    def test_type_markers(self, plan: CleanPlan) -> None:
        output = _render(create_items_table(list(plan.items)))

        assert " D " in output
        assert " F " in output


class TestSummaries:
    """Tests for plan and report printers."""

    def test_format_breakdown(self, plan: CleanPlan) -> None:
        line = format_breakdown(plan.breakdown())

        assert "Dependencies[/]: 1 (5.0 kB)" in line
        assert line.count(",") == 2

    def test_plan_summary(self, plan: CleanPlan) -> None:
        output = _capture_console_output(print_plan_summary, plan)

        assert "Scanned 42 entries" in output
        assert "Found 3 items (2 dirs, 1 files)" in output
        assert "7.0 kB" in output

    def test_dry_run_report(self) -> None:
        report = CleanReport(
            items_deleted=3, bytes_freed=210, dry_run=True, dirs_deleted=2, files_deleted=1
        )

        output = _capture_console_output(print_report, report)

        assert "DRY RUN Would remove 3 items (2 dirs, 1 files) freeing 210 B" in output

    def test_live_report_with_statistics(self) -> None:
        report = CleanReport(items_deleted=3, bytes_freed=210, duration=0.5, scan_duration=0.25)

        output = _capture_console_output(print_report, report, show_statistics=True)

        assert "Removed 3 items, freed 210 B" in output
        assert "Total: 0.75s" in output
        assert "6 items/s" in output

    def test_live_report_without_statistics(self) -> None:
        report = CleanReport(items_deleted=1, bytes_freed=1, duration=0.5)

        output = _capture_console_output(print_report, report, show_statistics=False)

        assert "Removed 1 items" in output
        assert "Scan:" not in output

    def test_failures(self) -> None:
        report = CleanReport(
            errors=(CleanFailure(Path("/p/dist"), "Permission denied"),),
            scan_errors=(ScanFailure.symlink_cycle(Path("/p/loop")),),
        )

        output = _capture_console_output(print_failures, report)

        assert "2 error(s) occurred" in output
        assert "Symbolic link cycle detected at /p/loop" in output
        assert "IO error at /p/dist: Permission denied" in output

    def test_no_failures_prints_nothing(self) -> None:
        assert _capture_console_output(print_failures, CleanReport()) == ""


class TestDryRunPreview:
    """Tests for print_dry_run_preview."""

    def test_preview_is_capped(self, make_item) -> None:
        """At most PREVIEW_LIMIT rows per type, with a remainder line."""
        dirs = tuple(make_item(f"/p/d{i:02}") for i in range(PREVIEW_LIMIT + 5))
        files = tuple(
            make_item(f"/p/f{i}.log", item_type=ItemType.FILE) for i in range(3)
        )
        plan = CleanPlan(
            root=Path("/p"),
            items=dirs + files,
            outcome=ScanOutcome(),
            scan_duration=0.0,
        )

        output = _capture_console_output(print_dry_run_preview, plan)

        assert f"/p/d{PREVIEW_LIMIT - 1:02}" in output
        assert f"/p/d{PREVIEW_LIMIT:02}" not in output
        assert "/p/f2.log" in output
        assert "... and 5 more directories, 0 more files" in output
