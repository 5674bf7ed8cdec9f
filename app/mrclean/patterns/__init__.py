"""Pattern compilation and matching."""

from mrclean.patterns.builtin import BUILTIN_PATTERNS, PatternSet
from mrclean.patterns.matcher import (
    PatternCompileError,
    PatternMatcher,
    compile_glob,
    is_file_pattern,
)

__all__ = [
    "BUILTIN_PATTERNS",
    "PatternCompileError",
    "PatternMatcher",
    "PatternSet",
    "compile_glob",
    "is_file_pattern",
]
