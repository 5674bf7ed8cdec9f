"""Main CLI application entry point.

Defines the Typer application, global options and logging setup.
"""

import logging
from typing import Annotated

import typer
from rich.logging import RichHandler

from mrclean import __version__
from mrclean.cli.commands import clean, config, init, list_cmd
from mrclean.utils.formatting import err_console

# Create main Typer app
app = typer.Typer(
    name="mrclean",
    help="Fast, parallel cleanup of build artifacts and dependency folders.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"mrclean version {__version__}")
        raise typer.Exit()


def _setup_logging(verbose: bool, quiet: bool) -> None:
    """Route mrclean log records to stderr through Rich."""
    level = logging.WARNING
    if quiet:
        level = logging.ERROR
    elif verbose:
        level = logging.INFO

    logger = logging.getLogger("mrclean")
    logger.setLevel(level)
    for handler in list(logger.handlers):
        if isinstance(handler, RichHandler):
            logger.removeHandler(handler)
    logger.addHandler(RichHandler(console=err_console, show_path=False, show_time=False))


@app.callback()
def main(
    ctx: typer.Context,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version", "-V", callback=version_callback, is_eager=True, help="Show version."
        ),
    ] = None,
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Log what each phase is doing.")
    ] = False,
    quiet: Annotated[
        bool, typer.Option("--quiet", "-q", help="Only print errors and failures.")
    ] = False,
) -> None:
    """mrclean - remove build artifacts and dependency folders.

    Finds node_modules, build outputs, caches, logs and IDE metadata
    beneath a directory and removes them in parallel.
    """
    ctx.obj = {"verbose": verbose, "quiet": quiet}
    _setup_logging(verbose, quiet)


# Register commands
app.command(name="clean")(clean.clean)
app.command(name="list")(list_cmd.list_items)
app.add_typer(init.app, name="init")
app.add_typer(config.app, name="config")


if __name__ == "__main__":
    app()
