"""Config command implementation.

Prints the effective configuration as TOML.
"""

from pathlib import Path
from typing import Annotated

import typer

from mrclean.core.config import config_to_toml, require_config
from mrclean.utils.formatting import console

app = typer.Typer(
    help="Show the effective configuration.",
    invoke_without_command=True,
)


@app.callback(invoke_without_command=True)
def show_config(
    ctx: typer.Context,
    config_path: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Path to a config file.",
        ),
    ] = None,
    exclude: Annotated[
        list[str] | None,
        typer.Option(
            "--exclude",
            "-e",
            help="Preview with an additional exclusion pattern.",
        ),
    ] = None,
    include: Annotated[
        list[str] | None,
        typer.Option(
            "--include",
            "-i",
            help="Preview with an additional pattern to clean.",
        ),
    ] = None,
    preserve_env: Annotated[
        bool,
        typer.Option(
            "--preserve-env",
            help="Preview with .env files excluded.",
        ),
    ] = False,
) -> None:
    """Show the effective configuration.

    Examples:
        mrclean config                 # Config that `clean` would use
        mrclean config -e vendor       # Same, with vendor excluded
    """
    # Skip if a subcommand is being invoked
    if ctx.invoked_subcommand is not None:
        return

    loaded = require_config(config_path)
    config = loaded.config.merge_cli_args(exclude, include, preserve_env)

    source = str(loaded.source_path) if loaded.source_path else "built-in defaults"
    console.print(f"[muted]# Source: {source}[/]")
    console.print(config_to_toml(config), markup=False, highlight=False)
