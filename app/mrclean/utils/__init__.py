"""Utility modules for mrclean.

This module exports commonly used utility functions.
"""

from mrclean.utils.formatting import (
    console,
    err_console,
    format_size,
    print_error,
    print_info,
    print_success,
    print_warning,
)
from mrclean.utils.progress import (
    BarProgress,
    CategoryTracker,
    CompactProgress,
    NoOpProgress,
    ProgressSink,
    cleaning_progress,
)

__all__ = [
    "BarProgress",
    "CategoryTracker",
    "CompactProgress",
    "NoOpProgress",
    "ProgressSink",
    "cleaning_progress",
    "console",
    "err_console",
    "format_size",
    "print_error",
    "print_info",
    "print_success",
    "print_warning",
]
