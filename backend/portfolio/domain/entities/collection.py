"""Domain entity — the entity collections served by the store."""

from enum import Enum
from typing import Any

# A record is a plain mapping; only ``id``, ``created_at`` and ``updated_at``
# carry meaning for the store.
Record = dict[str, Any]


class Collection(str, Enum):
    """Every collection the store persists, keyed by its remote table name."""

    DEVELOPERS = "developers"
    PROJECTS = "projects"
    WEBSITE_PROJECTS = "website_projects"
    BLOG_POSTS = "blog_posts"
    SETTINGS = "settings"
    MESSAGES = "messages"

    @property
    def local_key(self) -> str:
        """Key under which the local backend stores this collection."""
        return _LOCAL_KEYS[self]

    @property
    def is_singleton(self) -> bool:
        return self is Collection.SETTINGS


_LOCAL_KEYS: dict[Collection, str] = {
    Collection.DEVELOPERS: "nexusdev_developers",
    Collection.PROJECTS: "nexusdev_projects",
    Collection.WEBSITE_PROJECTS: "nexusdev_website_projects",
    Collection.BLOG_POSTS: "nexusdev_blog",
    Collection.SETTINGS: "nexusdev_settings",
    Collection.MESSAGES: "nexusdev_messages",
}

# Collections holding id-keyed record lists (everything except settings).
RECORD_COLLECTIONS: tuple[Collection, ...] = tuple(
    c for c in Collection if not c.is_singleton
)
