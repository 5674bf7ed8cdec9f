"""Shared Rich display functions for plans and reports.

Provides the table builders and summary printers used by the ``clean``
and ``list`` commands.
"""

from rich.table import Table

from mrclean.core.theme import category_style
from mrclean.engine.pipeline import CleanPlan
from mrclean.models.item import CandidateItem
from mrclean.models.pattern import PatternCategory
from mrclean.models.report import CleanReport
from mrclean.utils.formatting import (
    console,
    err_console,
    format_count,
    format_size,
    print_success,
)

# Rows shown per item type in the dry-run preview
PREVIEW_LIMIT = 20


def create_items_table(items: list[CandidateItem], title: str = "Items to Clean") -> Table:
    """Create a Rich table listing candidate items.

    Args:
        items: Candidates to display.
        title: Table title.

    Returns:
        Rich Table with Type, Path, Size and Category columns.
    """
    table = Table(
        title=title,
        show_header=True,
        header_style="bold_header",
        border_style="border",
        row_styles=["", "on grey7"],
    )
    table.add_column("Type", width=4, justify="center")
    table.add_column("Path", overflow="fold")
    table.add_column("Size", style="size", justify="right")
    table.add_column("Category")

    for item in items:
        category = item.match.category
        icon = "[directory]D[/]" if item.is_directory else "[file]F[/]"
        table.add_row(
            icon,
            str(item.path),
            format_size(item.size),
            f"[{category_style(category)}]{category.label}[/]",
        )
    return table


def format_breakdown(breakdown: list[tuple[PatternCategory, int, int]]) -> str:
    """Render a category breakdown as a single line of markup."""
    return ", ".join(
        f"[{category_style(category)}]{category.label}[/]: {count} ({format_size(size)})"
        for category, count, size in breakdown
    )


def print_plan_summary(plan: CleanPlan) -> None:
    """Print entries scanned, items found and the category breakdown."""
    rate = plan.entries_scanned / plan.scan_duration if plan.scan_duration > 0 else 0.0
    console.print(
        f"Scanned [info]{format_count(plan.entries_scanned)}[/] entries "
        f"in {plan.scan_duration:.2f}s [muted]({format_count(int(rate))} entries/s)[/]"
    )
    console.print(
        f"Found [bold]{len(plan.items)}[/] items "
        f"([directory]{plan.dir_count} dirs[/], [file]{plan.file_count} files[/]) "
        f"totalling [size]{format_size(plan.total_size)}[/]"
    )
    breakdown = plan.breakdown()
    if breakdown:
        console.print(f"  {format_breakdown(breakdown)}")


def print_dry_run_preview(plan: CleanPlan) -> None:
    """Print up to ``PREVIEW_LIMIT`` directories and files that would be removed."""
    dirs = [item for item in plan.items if item.is_directory]
    files = [item for item in plan.items if not item.is_directory]

    shown = dirs[:PREVIEW_LIMIT] + files[:PREVIEW_LIMIT]
    if shown:
        console.print()
        console.print(create_items_table(shown, title="Would Remove (Dry Run)"))

    hidden_dirs = len(dirs) - min(len(dirs), PREVIEW_LIMIT)
    hidden_files = len(files) - min(len(files), PREVIEW_LIMIT)
    if hidden_dirs or hidden_files:
        console.print(
            f"[muted]... and {hidden_dirs} more directories, {hidden_files} more files[/]"
        )


def print_report(report: CleanReport, show_statistics: bool = True) -> None:
    """Print the final report of a clean or dry run.

    Args:
        report: Completed report.
        show_statistics: Include the timing breakdown and throughput.
    """
    console.print()
    if report.dry_run:
        console.print(
            f"[warning]DRY RUN[/] Would remove [bold]{report.items_deleted}[/] items "
            f"([directory]{report.dirs_deleted} dirs[/], [file]{report.files_deleted} files[/]) "
            f"freeing [size]{format_size(report.bytes_freed)}[/]"
        )
        return

    print_success(
        f"Removed {report.items_deleted} items, freed {format_size(report.bytes_freed)}"
    )
    if show_statistics:
        console.print(
            f"  Scan: {report.scan_duration:.2f}s  Clean: {report.duration:.2f}s  "
            f"Total: {report.total_duration:.2f}s"
        )
        if report.duration > 0:
            throughput = report.items_deleted / report.duration
            console.print(f"  [muted]{throughput:,.0f} items/s[/]")


def print_failures(report: CleanReport) -> None:
    """Print every scan and clean failure with its path and message."""
    if not report.total_errors:
        return

    err_console.print()
    err_console.print(f"[warning]{report.total_errors} error(s) occurred:[/]")
    for scan_failure in report.scan_errors:
        err_console.print(f"  [muted]scan[/]  {scan_failure}")
    for clean_failure in report.errors:
        err_console.print(f"  [error]clean[/] {clean_failure}")
