"""Scan, prune and clean engine."""

from mrclean.engine.cleaner import ParallelCleaner, remove_item
from mrclean.engine.pipeline import CleanPipeline, CleanPlan
from mrclean.engine.pruner import prune_nested_items
from mrclean.engine.scanner import ScanAccumulator, Scanner, aggregate_directory_sizes

__all__ = [
    "CleanPipeline",
    "CleanPlan",
    "ParallelCleaner",
    "ScanAccumulator",
    "Scanner",
    "aggregate_directory_sizes",
    "prune_nested_items",
    "remove_item",
]
