"""mrclean - a parallel build-artifact cleaner.

Finds dependency caches, build outputs, logs and IDE metadata beneath
a root directory using glob rules, and removes them concurrently.
"""

__version__ = "0.4.0"

from mrclean.engine import CleanPipeline, ParallelCleaner, Scanner, prune_nested_items
from mrclean.errors import MrCleanError
from mrclean.patterns import BUILTIN_PATTERNS, PatternCompileError, PatternMatcher

__all__ = [
    "BUILTIN_PATTERNS",
    "CleanPipeline",
    "MrCleanError",
    "ParallelCleaner",
    "PatternCompileError",
    "PatternMatcher",
    "Scanner",
    "__version__",
    "prune_nested_items",
]
