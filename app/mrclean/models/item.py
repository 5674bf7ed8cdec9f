"""Candidate item model.

A candidate is a filesystem entry the scanner selected for deletion.
"""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from mrclean.models.pattern import MatchResult


class ItemType(str, Enum):
    """Type of a candidate entry.

    Attributes:
        DIRECTORY: A directory, removed recursively.
        FILE: A regular file.
        SYMLINK: A symbolic link, removed as a link and never followed.
    """

    DIRECTORY = "directory"
    FILE = "file"
    SYMLINK = "symlink"


@dataclass(frozen=True, slots=True)
class CandidateItem:
    """A filesystem entry selected for deletion.

    Attributes:
        path: Absolute path under the scan root.
        size: Size in bytes. Files and symlinks carry their own size,
            directories the total of all regular files beneath them.
        item_type: Directory, file or symlink.
        match: The rule that selected this entry.
    """

    path: Path
    size: int
    item_type: ItemType
    match: MatchResult

    @property
    def is_directory(self) -> bool:
        """Whether this item is a directory."""
        return self.item_type == ItemType.DIRECTORY

    def to_dict(self) -> dict[str, object]:
        """Serialize to a JSON-compatible dictionary."""
        return {
            "path": str(self.path),
            "size": self.size,
            "item_type": self.item_type.value,
            "pattern": {
                "pattern": self.match.pattern,
                "priority": self.match.priority,
                "source": self.match.source.value,
                "category": self.match.category.value,
            },
        }
