"""Entity store — one persistence entry point for every site collection.

Reads and writes go to the remote backend when one is configured and fall
back to the local backend when it is missing or any remote call fails:

    load_all():  remote (all collections)  ──any failure──►  local (all collections)
    save_*():    remote write  ──failure──►  local write  ──►  in-memory update

The in-memory snapshot is only ever changed to match what a backend actually
accepted. There are no locks: two saves in flight against the same collection
resolve as "last completed write wins".
"""

import asyncio
import copy
import logging
from collections.abc import Awaitable, Callable, Iterable, Mapping
from datetime import datetime, timezone
from typing import Any, TypeVar

from portfolio.application.interfaces import LocalBackend, RemoteBackend
from portfolio.domain.entities import (
    Collection,
    RECORD_COLLECTIONS,
    Record,
    SaveResult,
    SnapshotSource,
    StoreSnapshot,
    default_site_settings,
    resolve_site_settings,
)
from portfolio.domain.exceptions import (
    MalformedRecordError,
    RemoteBackendError,
    RemoteUnavailableError,
    UnknownCollectionError,
)

from .id_allocator import IdAllocator, id_of, next_id

logger = logging.getLogger(__name__)

DEFAULT_REMOTE_TIMEOUT = 10.0
DEFAULT_MESSAGE_RETENTION = 100

T = TypeVar("T")


def utc_now_iso() -> str:
    """Current UTC time as an ISO-8601 string."""
    return datetime.now(timezone.utc).isoformat()


def as_collection(value: Collection | str) -> Collection:
    """Resolve a collection name, raising UnknownCollectionError if not served."""
    if isinstance(value, Collection):
        return value
    try:
        return Collection(value)
    except ValueError:
        raise UnknownCollectionError(str(value)) from None


def _upsert(records: list[Record], record: Record, *, prepend: bool = False) -> list[Record]:
    """Return a new list with ``record`` replacing its id-twin, or added."""
    target = id_of(record)
    merged = list(records)
    for index, existing in enumerate(merged):
        if id_of(existing) == target:
            merged[index] = record
            return merged
    if prepend:
        merged.insert(0, record)
    else:
        merged.append(record)
    return merged


def _dedupe(collection: Collection, records: Iterable[Any]) -> list[Record]:
    """Drop non-mapping entries and later duplicates of an id."""
    seen: set[int] = set()
    unique: list[Record] = []
    for record in records:
        if not isinstance(record, dict):
            continue
        rid = id_of(record)
        if rid and rid in seen:
            logger.warning("Dropping duplicate %s record with id %d", collection.value, rid)
            continue
        seen.add(rid)
        unique.append(record)
    return unique


class EntityStore:
    """Orchestrates reads and writes across the remote and local backends.

    Holds the authoritative in-memory snapshot that rendering reads from.
    """

    def __init__(
        self,
        local: LocalBackend,
        remote: RemoteBackend | None = None,
        *,
        remote_timeout: float = DEFAULT_REMOTE_TIMEOUT,
        message_retention: int = DEFAULT_MESSAGE_RETENTION,
    ):
        self._local = local
        self._remote = remote
        self._remote_timeout = remote_timeout
        self._message_retention = message_retention
        self._allocator = IdAllocator()
        self._snapshot = StoreSnapshot(settings=default_site_settings())

    # ── Read access ─────────────────────────────────────────────────

    @property
    def remote(self) -> RemoteBackend | None:
        return self._remote

    @property
    def remote_configured(self) -> bool:
        return self._remote is not None

    @property
    def source(self) -> SnapshotSource:
        """Backend the current snapshot was loaded from."""
        return self._snapshot.source

    @property
    def settings(self) -> dict[str, Any]:
        return copy.deepcopy(self._snapshot.settings)

    def snapshot(self) -> StoreSnapshot:
        return self._snapshot.copy()

    def records(self, collection: Collection | str) -> list[Record]:
        coll = self._record_collection(collection)
        return copy.deepcopy(self._snapshot.records(coll))

    def get(self, collection: Collection | str, record_id: int) -> Record | None:
        record = self._find(self._record_collection(collection), record_id)
        return copy.deepcopy(record) if record is not None else None

    def next_id(self, collection: Collection | str) -> int:
        """The id the next created record will receive."""
        return self._allocator.peek(self._record_collection(collection))

    # ── Load ────────────────────────────────────────────────────────

    async def load_all(self) -> StoreSnapshot:
        """Rebuild the whole snapshot from one backend.

        Any remote failure discards every remote result and reloads all
        collections from local storage, so a snapshot never mixes sources.
        """
        snapshot: StoreSnapshot | None = None
        if self._remote is not None:
            try:
                snapshot = await self._load_remote(self._remote)
            except RemoteBackendError as exc:
                logger.warning("Remote load failed (%s) — loading every collection from local storage", exc)
        if snapshot is None:
            snapshot = await self._load_local()

        self._snapshot = snapshot
        for coll in RECORD_COLLECTIONS:
            self._allocator.reset(coll, snapshot.records(coll))

        logger.info(
            "Loaded store from %s: %s",
            snapshot.source.value,
            ", ".join(f"{c.value}={len(snapshot.records(c))}" for c in RECORD_COLLECTIONS),
        )
        return snapshot.copy()

    async def _load_remote(self, remote: RemoteBackend) -> StoreSnapshot:
        reads: list[Awaitable[Any]] = [
            self._call_remote(coll, "read", remote.read_all(coll)) for coll in RECORD_COLLECTIONS
        ]
        reads.append(self._call_remote(Collection.SETTINGS, "read", remote.read_settings()))
        results = await asyncio.gather(*reads, return_exceptions=True)

        for result in results:
            if isinstance(result, BaseException):
                raise result

        snapshot = StoreSnapshot(source=SnapshotSource.REMOTE)
        for coll, records in zip(RECORD_COLLECTIONS, results):
            snapshot.set_records(coll, _dedupe(coll, copy.deepcopy(records or [])))
        snapshot.settings = resolve_site_settings(results[-1])
        return snapshot

    async def _load_local(self) -> StoreSnapshot:
        snapshot = StoreSnapshot(source=SnapshotSource.LOCAL)
        for coll in RECORD_COLLECTIONS:
            snapshot.set_records(coll, _dedupe(coll, await self._local.read_all(coll)))
        snapshot.settings = resolve_site_settings(await self._local.read_settings())
        return snapshot

    # ── Save ────────────────────────────────────────────────────────

    async def save(
        self,
        collection: Collection | str,
        payload: Mapping[str, Any] | list[Mapping[str, Any]],
    ) -> SaveResult:
        """Dispatch to the explicit save operations.

        Settings merge, lists replace the collection, records without an id
        are created, records with an id are upserted.
        """
        coll = as_collection(collection)
        if coll.is_singleton:
            if not isinstance(payload, Mapping):
                raise MalformedRecordError(coll.value, "settings must be an object")
            return await self.save_settings(payload)
        if isinstance(payload, list):
            return await self.replace_all(coll, payload)
        if isinstance(payload, Mapping) and payload.get("id") is None:
            _, result = await self.create(coll, payload)
            return result
        return await self.save_one(coll, payload)

    async def create(
        self, collection: Collection | str, fields: Mapping[str, Any]
    ) -> tuple[Record, SaveResult]:
        """Allocate an id, stamp both timestamps and save the new record."""
        coll = self._record_collection(collection)
        if not isinstance(fields, Mapping):
            raise MalformedRecordError(coll.value, "record must be an object")
        now = utc_now_iso()
        record = copy.deepcopy(dict(fields))
        record["id"] = self._allocator.allocate(coll)
        record["created_at"] = now
        record["updated_at"] = now
        result = await self.save_one(coll, record)
        return copy.deepcopy(record), result

    async def save_one(self, collection: Collection | str, record: Mapping[str, Any]) -> SaveResult:
        """Upsert a single record by id.

        New messages are prepended and the collection is trimmed to the
        retention limit; on the remote path that trimmed collection is
        written as a whole so both backends keep the same window.
        """
        coll = self._record_collection(collection)
        rid = self._require_id(coll, record)
        stamped = copy.deepcopy(dict(record))
        now = utc_now_iso()
        existing = self._find(coll, rid)
        if existing is not None and existing.get("created_at"):
            # created_at is fixed at creation
            stamped["created_at"] = existing["created_at"]
        elif not stamped.get("created_at"):
            stamped["created_at"] = now
        stamped["updated_at"] = now

        if coll is Collection.MESSAGES:
            merged = _upsert(self._snapshot.messages, stamped, prepend=True)
            return await self._write_records(coll, merged[: self._message_retention])

        remote_failed = False
        if self._remote is not None:
            try:
                await self._call_remote(coll, "upsert", self._remote.upsert_one(coll, stamped))
            except RemoteBackendError as exc:
                logger.warning("Remote upsert into %s failed (%s) — falling back to local storage", coll.value, exc)
                remote_failed = True
            else:
                # merge against whatever is in memory now, not at call time
                self._commit(coll, _upsert(self._snapshot.records(coll), stamped))
                self._allocator.observe(coll, rid)
                return SaveResult.remote_ok(coll.value)

        return await self._write_local(
            coll, _upsert(self._snapshot.records(coll), stamped), remote_failed=remote_failed
        )

    async def replace_all(
        self, collection: Collection | str, records: Iterable[Mapping[str, Any]]
    ) -> SaveResult:
        """Replace a whole collection; every record needs a unique id."""
        coll = self._record_collection(collection)
        replacement: list[Record] = []
        seen: set[int] = set()
        for record in records:
            rid = self._require_id(coll, record)
            if rid in seen:
                raise MalformedRecordError(coll.value, f"duplicate id {rid}")
            seen.add(rid)
            replacement.append(copy.deepcopy(dict(record)))
        if coll is Collection.MESSAGES:
            replacement = replacement[: self._message_retention]
        return await self._write_records(coll, replacement)

    async def delete(self, collection: Collection | str, record_id: int) -> SaveResult:
        """Remove one record by re-saving the rest of its collection."""
        coll = self._record_collection(collection)
        return await self.delete_where(coll, lambda record: id_of(record) == record_id)

    async def delete_where(
        self, collection: Collection | str, predicate: Callable[[Record], bool]
    ) -> SaveResult:
        """Remove every record matching ``predicate`` through a bulk replace."""
        coll = self._record_collection(collection)
        current = self._snapshot.records(coll)
        remaining = [record for record in current if not predicate(record)]
        if len(remaining) == len(current):
            logger.debug("Delete on %s matched nothing — no write issued", coll.value)
            return SaveResult.unchanged(coll.value)
        return await self._write_records(coll, copy.deepcopy(remaining))

    async def save_settings(self, changes: Mapping[str, Any]) -> SaveResult:
        """Shallow-merge ``changes`` into the current settings and persist the whole."""
        coll = Collection.SETTINGS
        if not isinstance(changes, Mapping):
            raise MalformedRecordError(coll.value, "settings must be an object")
        merged = copy.deepcopy(self._snapshot.settings)
        merged.update(copy.deepcopy(dict(changes)))
        merged["updated_at"] = utc_now_iso()

        remote_failed = False
        if self._remote is not None:
            try:
                await self._call_remote(coll, "upsert", self._remote.upsert_settings(merged))
            except RemoteBackendError as exc:
                logger.warning("Remote settings save failed (%s) — falling back to local storage", exc)
                remote_failed = True
            else:
                self._snapshot.settings = merged
                return SaveResult.remote_ok(coll.value)

        if not await self._local.write_settings(merged):
            logger.error("Local settings save failed — in-memory settings left unchanged")
            return SaveResult.failed(coll.value)
        self._snapshot.settings = merged
        return SaveResult.local_ok(coll.value, after_remote_failure=remote_failed)

    # ── Internals ───────────────────────────────────────────────────

    async def _write_records(self, coll: Collection, records: list[Record]) -> SaveResult:
        remote_failed = False
        if self._remote is not None:
            try:
                await self._call_remote(coll, "replace", self._remote.replace_all(coll, records))
            except RemoteBackendError as exc:
                logger.warning("Remote replace of %s failed (%s) — falling back to local storage", coll.value, exc)
                remote_failed = True
            else:
                self._commit(coll, records)
                return SaveResult.remote_ok(coll.value)
        return await self._write_local(coll, records, remote_failed=remote_failed)

    async def _write_local(self, coll: Collection, records: list[Record], *, remote_failed: bool) -> SaveResult:
        if not await self._local.write_all(coll, records):
            logger.error("Local save of %s failed — in-memory collection left unchanged", coll.value)
            return SaveResult.failed(coll.value)
        self._commit(coll, records)
        return SaveResult.local_ok(coll.value, after_remote_failure=remote_failed)

    def _commit(self, coll: Collection, records: list[Record]) -> None:
        self._snapshot.set_records(coll, records)
        self._allocator.observe(coll, next_id(records) - 1)

    async def _call_remote(self, coll: Collection, operation: str, call: Awaitable[T]) -> T:
        try:
            return await asyncio.wait_for(call, timeout=self._remote_timeout)
        except asyncio.TimeoutError:
            raise RemoteUnavailableError(
                operation, coll.value, f"no response within {self._remote_timeout:g}s"
            ) from None

    def _find(self, coll: Collection, record_id: int) -> Record | None:
        """Live in-memory record with this id, or None."""
        for record in self._snapshot.records(coll):
            if id_of(record) == record_id:
                return record
        return None

    def _record_collection(self, collection: Collection | str) -> Collection:
        coll = as_collection(collection)
        if coll.is_singleton:
            raise MalformedRecordError(coll.value, "settings is a singleton; use save_settings")
        return coll

    @staticmethod
    def _require_id(coll: Collection, record: Any) -> int:
        if not isinstance(record, Mapping):
            raise MalformedRecordError(coll.value, "record must be an object")
        rid = id_of(dict(record))
        if not rid:
            raise MalformedRecordError(coll.value, "record requires a positive integer 'id'")
        return rid
