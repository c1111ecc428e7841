"""Abstract interface (port) for the remote database."""

from abc import ABC, abstractmethod
from typing import Any

from portfolio.domain.entities import Collection, Record


class RemoteBackend(ABC):
    """Port for the remote database — implemented in the infrastructure layer.

    Every method raises a ``RemoteBackendError`` subclass on failure and is
    all-or-nothing from the caller's point of view.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Short adapter name used in logs."""
        ...

    @abstractmethod
    async def read_all(self, collection: Collection) -> list[Record]:
        """Return every record of a collection, newest ``created_at`` first."""
        ...

    @abstractmethod
    async def upsert_one(self, collection: Collection, record: Record) -> None:
        """Insert the record, or replace the existing one sharing its id."""
        ...

    @abstractmethod
    async def replace_all(self, collection: Collection, records: list[Record]) -> None:
        """Make the remote collection equal to ``records`` (upsert + prune)."""
        ...

    @abstractmethod
    async def read_settings(self) -> dict[str, Any] | None:
        """Return the settings row, or ``None`` when no row exists yet."""
        ...

    @abstractmethod
    async def upsert_settings(self, settings: dict[str, Any]) -> None:
        """Insert or replace the settings row."""
        ...
