"""List command implementation.

Shows what ``mrclean clean`` would remove, without removing anything.
"""

import json
from pathlib import Path
from typing import Annotated

import typer

from mrclean.cli.display import create_items_table, format_breakdown
from mrclean.core.config import build_matcher, require_config
from mrclean.engine.pipeline import CleanPipeline
from mrclean.errors import MrCleanError
from mrclean.utils.formatting import console, format_size, print_error, print_info, print_warning


def list_items(
    path: Annotated[
        Path,
        typer.Argument(help="Directory to scan."),
    ] = Path("."),
    as_json: Annotated[
        bool,
        typer.Option(
            "--json",
            help="Output as a JSON array.",
        ),
    ] = False,
    config_path: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Path to a config file.",
        ),
    ] = None,
) -> None:
    """List items that would be cleaned.

    Examples:
        mrclean list             # Table of cleanable items
        mrclean list --json      # Machine-readable output
    """
    loaded = require_config(config_path)
    config = loaded.config

    try:
        pipeline = CleanPipeline(
            path,
            build_matcher(loaded),
            max_depth=config.safety.max_depth,
            follow_symlinks=not config.options.preserve_symlinks,
            threads=config.options.parallel_threads,
            dry_run=True,
        )
        plan = pipeline.plan()
    except MrCleanError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    items = sorted(plan.items, key=lambda item: item.size, reverse=True)

    if as_json:
        typer.echo(json.dumps([item.to_dict() for item in items], indent=2))
        return

    if not items:
        print_info("No cleanable items found.")
        return

    console.print(create_items_table(items, title=f"Cleanable Items in {plan.root}"))
    console.print(
        f"\nTotal: [bold]{len(items)}[/] items, [size]{format_size(plan.total_size)}[/]"
    )
    console.print(f"  {format_breakdown(plan.breakdown())}")
    for failure in plan.scan_errors:
        print_warning(str(failure))
