"""mrclean data models."""

from mrclean.models.item import CandidateItem, ItemType
from mrclean.models.pattern import (
    FileTypeHint,
    MatchResult,
    PatternCategory,
    PatternRule,
    PatternSource,
)
from mrclean.models.report import (
    CleanFailure,
    CleanReport,
    ScanFailure,
    ScanFailureKind,
    ScanOutcome,
    Statistics,
)

__all__ = [
    "CandidateItem",
    "CleanFailure",
    "CleanReport",
    "FileTypeHint",
    "ItemType",
    "MatchResult",
    "PatternCategory",
    "PatternRule",
    "PatternSource",
    "ScanFailure",
    "ScanFailureKind",
    "ScanOutcome",
    "Statistics",
]
