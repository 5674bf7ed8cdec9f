"""Init command implementation.

Writes a configuration file with the built-in defaults.
"""

from pathlib import Path
from typing import Annotated

import typer

from mrclean.core.config import ConfigError, save_config
from mrclean.core.paths import PROJECT_CONFIG_NAME, ensure_config_dir, get_global_config_path
from mrclean.models.config import Config
from mrclean.utils.formatting import print_error, print_info, print_success, print_warning

app = typer.Typer(
    help="Create a configuration file with default patterns.",
    invoke_without_command=True,
)


@app.callback(invoke_without_command=True)
def init_config(
    ctx: typer.Context,
    global_config: Annotated[
        bool,
        typer.Option(
            "--global",
            "-g",
            help="Write the global config instead of ./.mc.toml.",
        ),
    ] = False,
    force: Annotated[
        bool,
        typer.Option(
            "--force",
            "-f",
            help="Overwrite an existing config file.",
        ),
    ] = False,
) -> None:
    """Create a configuration file with the built-in defaults.

    Examples:
        mrclean init            # Create ./.mc.toml
        mrclean init --global   # Create ~/.config/mrclean/config.toml
        mrclean init --force    # Overwrite an existing file
    """
    # Skip if a subcommand is being invoked
    if ctx.invoked_subcommand is not None:
        return

    if global_config:
        ensure_config_dir()
        output_path = get_global_config_path()
    else:
        output_path = Path.cwd() / PROJECT_CONFIG_NAME

    if output_path.exists():
        if not force:
            print_error(f"Config file already exists: {output_path}")
            print_info("Use --force to overwrite.")
            raise typer.Exit(code=1)
        print_warning(f"Overwriting existing config: {output_path}")

    try:
        saved_path = save_config(Config(), output_path)
    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    print_success(f"Created config file: {saved_path}")
