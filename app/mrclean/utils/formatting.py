"""Shared Rich consoles and message helpers.

All CLI output goes through ``console`` (stdout) or ``err_console``
(stderr), both styled with the mrclean theme.
"""

import sys

from rich.console import Console

from mrclean.core.theme import get_theme


def _themed_console(stderr: bool = False) -> Console:
    """Console using truecolor on a terminal and plain text otherwise."""
    stream = sys.stderr if stderr else sys.stdout
    color_system = "truecolor" if stream.isatty() else None
    return Console(theme=get_theme(), stderr=stderr, color_system=color_system)


console = _themed_console()
err_console = _themed_console(stderr=True)


def format_size(size_bytes: int | None) -> str:
    """Format a byte count with decimal (SI) units.

    Args:
        size_bytes: Number of bytes, or None when unknown.

    Returns:
        String such as ``"0 B"``, ``"512 B"`` or ``"1.5 MB"``.
    """
    if not size_bytes:
        return "0 B"
    size = float(size_bytes)
    for unit in ("B", "kB", "MB", "GB"):
        if abs(size) < 1000:
            return f"{size:.1f} {unit}" if unit != "B" else f"{int(size)} B"
        size /= 1000
    return f"{size:.1f} TB"


def format_count(count: int) -> str:
    """Format an integer with thousands separators."""
    return f"{count:,}"


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[info]{message}[/]")


def print_warning(message: str) -> None:
    """Print a warning message."""
    err_console.print(f"[warning]Warning:[/] {message}")


def print_error(message: str) -> None:
    """Print an error message."""
    err_console.print(f"[error]Error:[/] {message}")


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[success]{message}[/]")
