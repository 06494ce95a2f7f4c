"""
Item Model - The ingested representation of one source file
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Union

# Values that can appear in an item's attributes
AttributeValue = Union[
    str, int, float, bool, List["AttributeValue"], Dict[str, "AttributeValue"]
]
Attributes = Dict[str, AttributeValue]

SNAPSHOT_RAW = "raw"
SNAPSHOT_BODY = "body"

SNAPSHOT_PATH_RELATIVE = "relative"
SNAPSHOT_PATH_SOURCE = "source"


class ItemRole(str, Enum):
    CONTENT = "content"
    LAYOUT = "layout"
    INCLUDE = "include"


@dataclass(frozen=True)
class Item:
    """One file of the site source.

    Content snapshots are kept in the order they were produced: ``raw`` is the
    file as read (empty for binary files) and ``body`` is the text left once a
    frontmatter block has been consumed. Binary items carry a ``source`` path
    snapshot so later stages can stream the file instead of holding it.
    """

    id: str
    role: ItemRole
    is_binary: bool = False
    content_snapshots: Dict[str, str] = field(default_factory=dict)
    path_snapshots: Dict[str, str] = field(default_factory=dict)
    attributes: Attributes = field(default_factory=dict)

    @property
    def content(self) -> str:
        """Effective content: the most recent snapshot."""
        if not self.content_snapshots:
            return ""
        return list(self.content_snapshots.values())[-1]

    def get_content(self, snapshot: Optional[str] = None) -> str:
        if snapshot is None:
            return self.content
        return self.content_snapshots[snapshot]

    def get_path(self, snapshot: str = SNAPSHOT_PATH_RELATIVE) -> Optional[str]:
        return self.path_snapshots.get(snapshot)

    @property
    def relative_path(self) -> str:
        return self.path_snapshots[SNAPSHOT_PATH_RELATIVE]

    @property
    def source_path(self) -> Optional[str]:
        return self.path_snapshots.get(SNAPSHOT_PATH_SOURCE)
