"""Clean command implementation.

Scans a directory for build artifacts, shows what was found, and
removes it after confirmation.
"""

from pathlib import Path
from typing import Annotated

import typer

from mrclean.cli.display import (
    print_dry_run_preview,
    print_failures,
    print_plan_summary,
    print_report,
)
from mrclean.core.config import build_matcher, require_config
from mrclean.engine.pipeline import CleanPipeline, CleanPlan
from mrclean.errors import MrCleanError
from mrclean.models.report import CleanReport
from mrclean.safety.guards import SafetyGuard, SafetyViolation
from mrclean.utils.formatting import format_size, print_error, print_info, print_success
from mrclean.utils.progress import (
    CategoryTracker,
    CompactProgress,
    NoOpProgress,
    ProgressSink,
    cleaning_progress,
)


def _confirm_deletion(item_count: int, total_size: int) -> bool:
    """Prompt user to confirm deletion.

    Args:
        item_count: Number of items to be removed.
        total_size: Bytes that would be freed.

    Returns:
        True if user confirms, False otherwise.
    """
    return typer.confirm(
        f"\nDelete {item_count} item(s) ({format_size(total_size)})?",
        default=False,
    )


def clean(
    ctx: typer.Context,
    path: Annotated[
        Path,
        typer.Argument(help="Directory to clean."),
    ] = Path("."),
    dry_run: Annotated[
        bool,
        typer.Option(
            "--dry-run",
            "-d",
            help="Show what would be removed without deleting anything.",
        ),
    ] = False,
    yes: Annotated[
        bool,
        typer.Option(
            "--yes",
            "-y",
            help="Skip confirmation prompt and proceed.",
        ),
    ] = False,
    exclude: Annotated[
        list[str] | None,
        typer.Option(
            "--exclude",
            "-e",
            help="Additional exclusion pattern (repeatable).",
        ),
    ] = None,
    include: Annotated[
        list[str] | None,
        typer.Option(
            "--include",
            "-i",
            help="Additional pattern to clean (repeatable).",
        ),
    ] = None,
    config_path: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Path to a config file.",
        ),
    ] = None,
    stats: Annotated[
        bool,
        typer.Option(
            "--stats",
            "-s",
            help="Show detailed statistics.",
        ),
    ] = False,
    parallel: Annotated[
        int | None,
        typer.Option(
            "--parallel",
            "-p",
            min=1,
            help="Number of worker threads.",
        ),
    ] = None,
    no_git_check: Annotated[
        bool,
        typer.Option(
            "--no-git-check",
            help="Allow running outside a git repository.",
        ),
    ] = False,
    preserve_env: Annotated[
        bool,
        typer.Option(
            "--preserve-env",
            help="Never remove .env and .env.example files.",
        ),
    ] = False,
) -> None:
    """Remove build artifacts and dependency folders.

    Examples:
        mrclean clean                      # Clean the current directory
        mrclean clean ~/projects --dry-run # Preview only
        mrclean clean -e vendor -y         # Keep vendor/, no prompt
        mrclean clean -i "*.bak"           # Also remove *.bak files
    """
    quiet = bool(ctx.obj and ctx.obj.get("quiet"))

    loaded = require_config(config_path)
    config = loaded.config

    guard = SafetyGuard.from_config(config.safety, check_git_repo=False if no_git_check else None)
    try:
        guard.validate(path)
    except SafetyViolation as e:
        print_error(f"Safety check failed: {e.reason}")
        raise typer.Exit(code=1) from e

    tracker = CategoryTracker()
    scan_progress: ProgressSink = NoOpProgress() if quiet else CompactProgress(tracker)
    try:
        matcher = build_matcher(loaded, exclude, include, preserve_env)
        pipeline = CleanPipeline(
            path,
            matcher,
            max_depth=config.safety.max_depth,
            follow_symlinks=not config.options.preserve_symlinks,
            threads=parallel or config.options.parallel_threads,
            dry_run=dry_run,
            scan_progress=scan_progress,
            category_tracker=tracker,
        )
        plan = pipeline.plan()
    except MrCleanError as e:
        scan_progress.finish()
        print_error(str(e))
        raise typer.Exit(code=1) from e

    if plan.is_empty:
        if not quiet:
            print_success("Nothing to clean.")
        print_failures(pipeline.execute(plan))
        return

    if not quiet:
        print_plan_summary(plan)

    if (
        not dry_run
        and not yes
        and config.options.require_confirmation
        and not _confirm_deletion(len(plan.items), plan.total_size)
    ):
        print_info("Aborted. Nothing was removed.")
        return

    report = _execute(pipeline, plan, quiet)

    if dry_run and not quiet:
        print_dry_run_preview(plan)
    if not quiet or report.total_errors:
        print_report(report, show_statistics=stats or config.options.show_statistics)
    print_failures(report)

    if report.errors:
        raise typer.Exit(code=1)


def _execute(pipeline: CleanPipeline, plan: CleanPlan, quiet: bool) -> CleanReport:
    if quiet or pipeline.dry_run:
        return pipeline.execute(plan)
    progress = cleaning_progress(len(plan.items))
    try:
        return pipeline.execute(plan, progress=progress)
    finally:
        progress.finish()
