"""Remote backend implementation backed by a SQL database through SQLAlchemy."""

import logging
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import delete, select
from sqlalchemy.exc import DBAPIError, IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from portfolio.application.interfaces import RemoteBackend
from portfolio.domain.entities import Collection, Record
from portfolio.domain.exceptions import (
    RemoteReadError,
    RemoteUnavailableError,
    RemoteWriteConflictError,
)
from portfolio.infrastructure.database.base import Base
from portfolio.infrastructure.database.models import RECORD_MODELS, SETTINGS_ROW_ID, SettingsModel
from portfolio.infrastructure.database.models.record_models import RecordColumns

logger = logging.getLogger(__name__)

_RESERVED = ("id", "created_at", "updated_at")


def _parse_timestamp(value: Any) -> datetime:
    """ISO-8601 string (or datetime) → aware datetime; anything else → now."""
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value.strip():
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return datetime.now(timezone.utc)
    else:
        return datetime.now(timezone.utc)
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed


def _format_timestamp(value: datetime) -> str:
    # SQLite drops the offset on the way back
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.isoformat()


class SQLAlchemyRemoteBackend(RemoteBackend):
    """Implements the RemoteBackend port using SQLAlchemy async sessions.

    Every public call opens its own session and transaction, so each one is
    all-or-nothing.
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession], engine: AsyncEngine | None = None):
        self._session_factory = session_factory
        self._engine = engine

    @property
    def name(self) -> str:
        return "sql"

    async def create_schema(self) -> None:
        """Create every table that does not exist yet."""
        if self._engine is None:
            raise RuntimeError("create_schema() needs the engine passed to the constructor")
        async with self._engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def dispose(self) -> None:
        if self._engine is not None:
            await self._engine.dispose()

    # ── Mapping ─────────────────────────────────────────────────────

    @staticmethod
    def _to_record(model: RecordColumns) -> Record:
        """Map ORM row → plain record."""
        record: Record = {"id": model.id}
        record.update(model.data or {})
        record["created_at"] = _format_timestamp(model.created_at)
        record["updated_at"] = _format_timestamp(model.updated_at)
        return record

    @staticmethod
    def _to_model(collection: Collection, record: Record) -> RecordColumns:
        """Map plain record → ORM row."""
        model_cls = RECORD_MODELS[collection]
        return model_cls(
            id=record["id"],
            data={k: v for k, v in record.items() if k not in _RESERVED},
            created_at=_parse_timestamp(record.get("created_at")),
            updated_at=_parse_timestamp(record.get("updated_at")),
        )

    # ── Record collections ──────────────────────────────────────────

    async def read_all(self, collection: Collection) -> list[Record]:
        model_cls = RECORD_MODELS[collection]
        stmt = select(model_cls).order_by(model_cls.created_at.desc())
        try:
            async with self._session_factory() as session:
                result = await session.execute(stmt)
                return [self._to_record(row) for row in result.scalars().all()]
        except (SQLAlchemyError, OSError) as exc:
            raise self._read_error(collection.value, exc) from exc

    async def upsert_one(self, collection: Collection, record: Record) -> None:
        model = self._to_model(collection, record)
        try:
            async with self._session_factory() as session:
                async with session.begin():
                    await session.merge(model)
        except (SQLAlchemyError, OSError) as exc:
            raise self._write_error("upsert", collection.value, exc) from exc
        logger.debug("Upserted %s id=%s", collection.value, model.id)

    async def replace_all(self, collection: Collection, records: list[Record]) -> None:
        model_cls = RECORD_MODELS[collection]
        models = [self._to_model(collection, record) for record in records]
        keep_ids = [m.id for m in models]
        try:
            async with self._session_factory() as session:
                async with session.begin():
                    prune = delete(model_cls)
                    if keep_ids:
                        prune = prune.where(model_cls.id.not_in(keep_ids))
                    await session.execute(prune)
                    for model in models:
                        await session.merge(model)
        except (SQLAlchemyError, OSError) as exc:
            raise self._write_error("replace", collection.value, exc) from exc
        logger.debug("Replaced %s with %d records", collection.value, len(models))

    # ── Settings singleton ──────────────────────────────────────────

    async def read_settings(self) -> dict[str, Any] | None:
        try:
            async with self._session_factory() as session:
                row = await session.get(SettingsModel, SETTINGS_ROW_ID)
        except (SQLAlchemyError, OSError) as exc:
            raise self._read_error(Collection.SETTINGS.value, exc) from exc
        if row is None:
            return None
        return dict(row.data or {})

    async def upsert_settings(self, settings: dict[str, Any]) -> None:
        model = SettingsModel(
            id=SETTINGS_ROW_ID,
            data=dict(settings),
            updated_at=_parse_timestamp(settings.get("updated_at")),
        )
        try:
            async with self._session_factory() as session:
                async with session.begin():
                    await session.merge(model)
        except (SQLAlchemyError, OSError) as exc:
            raise self._write_error("upsert", Collection.SETTINGS.value, exc) from exc

    # ── Error mapping ───────────────────────────────────────────────

    @staticmethod
    def _read_error(collection: str, exc: Exception) -> RemoteReadError | RemoteUnavailableError:
        if isinstance(exc, OSError) or (isinstance(exc, DBAPIError) and exc.connection_invalidated):
            return RemoteUnavailableError("read", collection, type(exc).__name__)
        return RemoteReadError("read", collection, type(exc).__name__)

    @staticmethod
    def _write_error(
        operation: str, collection: str, exc: Exception
    ) -> RemoteWriteConflictError | RemoteUnavailableError:
        if isinstance(exc, OSError) or (isinstance(exc, DBAPIError) and exc.connection_invalidated):
            return RemoteUnavailableError(operation, collection, type(exc).__name__)
        if isinstance(exc, IntegrityError):
            return RemoteWriteConflictError(operation, collection, "integrity conflict")
        return RemoteWriteConflictError(operation, collection, type(exc).__name__)
