"""Abstract interface (port) for on-device fallback storage."""

from abc import ABC, abstractmethod
from typing import Any

from portfolio.domain.entities import Collection, Record


class LocalBackend(ABC):
    """Port for local key/value persistence — one serialized blob per collection.

    Implementations never raise out of the write methods: a failed write
    reports ``False`` and leaves the previously stored content untouched.
    """

    @abstractmethod
    async def read_all(self, collection: Collection) -> list[Record]:
        """Return the stored records, or ``[]`` when the key is absent or unreadable."""
        ...

    @abstractmethod
    async def write_all(self, collection: Collection, records: list[Record]) -> bool:
        """Replace the stored records. Returns False on any failure."""
        ...

    @abstractmethod
    async def read_settings(self) -> dict[str, Any] | None:
        """Return the stored settings object, or ``None`` when absent or unreadable."""
        ...

    @abstractmethod
    async def write_settings(self, settings: dict[str, Any]) -> bool:
        """Replace the stored settings object. Returns False on any failure."""
        ...
