"""Per-collection integer id allocation derived from the highest existing id."""

from collections.abc import Iterable
from typing import Any

from portfolio.domain.entities import Collection, RECORD_COLLECTIONS, Record


def id_of(record: Record) -> int:
    """Return the record's id, or 0 when it is missing or not a positive integer."""
    value: Any = record.get("id") if isinstance(record, dict) else None
    # bool is an int subclass
    if isinstance(value, bool) or not isinstance(value, int):
        return 0
    return value if value > 0 else 0


def next_id(records: Iterable[Record]) -> int:
    """``max(ids, default=0) + 1`` with malformed ids counted as 0."""
    return max((id_of(r) for r in records), default=0) + 1


class IdAllocator:
    """Tracks the next id for every record collection.

    Values are recomputed on each full load via :meth:`reset` and only move
    upward in between.
    """

    def __init__(self) -> None:
        self._next: dict[Collection, int] = {c: 1 for c in RECORD_COLLECTIONS}

    def reset(self, collection: Collection, records: Iterable[Record]) -> None:
        self._next[collection] = next_id(records)

    def peek(self, collection: Collection) -> int:
        return self._next[collection]

    def allocate(self, collection: Collection) -> int:
        """Return the current value and advance the counter."""
        value = self._next[collection]
        self._next[collection] = value + 1
        return value

    def observe(self, collection: Collection, saved_id: int) -> None:
        """Move the counter past an id that was saved explicitly."""
        if saved_id >= self._next[collection]:
            self._next[collection] = saved_id + 1
