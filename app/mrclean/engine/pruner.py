"""Removal of candidates already covered by a candidate ancestor."""

import logging
from pathlib import Path

from mrclean.models.item import CandidateItem

logger = logging.getLogger(__name__)


def prune_nested_items(items: list[CandidateItem]) -> list[CandidateItem]:
    """Drop items whose deletion is implied by an ancestor's deletion.

    Items are ordered by path depth, then lexicographically, and an item
    is kept only when no already-kept item is a strict ancestor of it.
    Ancestry is by path component, so ``/a/b`` is not an ancestor of
    ``/a/bc``, and a path is never its own ancestor.

    Args:
        items: Candidates in any order.

    Returns:
        Surviving candidates ordered by depth then path. No two of them
        are in an ancestor/descendant relationship.
    """
    ordered = sorted(items, key=lambda item: (len(item.path.parts), str(item.path)))

    kept: list[CandidateItem] = []
    kept_paths: set[Path] = set()
    for item in ordered:
        if any(parent in kept_paths for parent in item.path.parents):
            continue
        kept.append(item)
        kept_paths.add(item.path)

    if len(kept) != len(items):
        logger.debug("Pruned %d nested items, %d remain", len(items) - len(kept), len(kept))
    return kept
