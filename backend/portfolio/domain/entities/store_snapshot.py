"""Domain entity — the full in-memory state produced by a load."""

import copy
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .collection import Collection, Record


class SnapshotSource(str, Enum):
    """Which backend a snapshot was loaded from."""

    REMOTE = "remote"
    LOCAL = "local"
    EMPTY = "empty"


@dataclass
class StoreSnapshot:
    """Every collection plus the settings singleton, from one provenance."""

    developers: list[Record] = field(default_factory=list)
    projects: list[Record] = field(default_factory=list)
    website_projects: list[Record] = field(default_factory=list)
    blog_posts: list[Record] = field(default_factory=list)
    messages: list[Record] = field(default_factory=list)
    settings: dict[str, Any] = field(default_factory=dict)
    source: SnapshotSource = SnapshotSource.EMPTY

    def records(self, collection: Collection) -> list[Record]:
        """Return the live list for a record collection."""
        if collection.is_singleton:
            raise ValueError("settings is a singleton, not a record list")
        return getattr(self, collection.value)

    def set_records(self, collection: Collection, records: list[Record]) -> None:
        if collection.is_singleton:
            raise ValueError("settings is a singleton, not a record list")
        setattr(self, collection.value, records)

    def copy(self) -> "StoreSnapshot":
        return copy.deepcopy(self)

    def to_dict(self) -> dict[str, Any]:
        return {
            "developers": self.developers,
            "projects": self.projects,
            "website_projects": self.website_projects,
            "blog_posts": self.blog_posts,
            "settings": self.settings,
            "messages": self.messages,
            "source": self.source.value,
        }
