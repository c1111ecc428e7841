"""Unit tests for the SQLAlchemy remote backend (SQLite via aiosqlite)."""

import pytest

from portfolio.domain.entities import Collection
from portfolio.domain.exceptions import RemoteBackendError
from portfolio.infrastructure.database import build_engine, build_session_factory
from portfolio.infrastructure.database.repositories import SQLAlchemyRemoteBackend


# ── Helpers ──


async def _make_backend(tmp_path) -> SQLAlchemyRemoteBackend:
    engine = build_engine(f"sqlite:///{tmp_path / 'remote.db'}")
    backend = SQLAlchemyRemoteBackend(build_session_factory(engine), engine=engine)
    await backend.create_schema()
    return backend


# ── Tests ──


@pytest.mark.asyncio
async def test_empty_tables_read_as_empty(tmp_path):
    backend = await _make_backend(tmp_path)
    try:
        assert await backend.read_all(Collection.PROJECTS) == []
        assert await backend.read_settings() is None
    finally:
        await backend.dispose()


@pytest.mark.asyncio
async def test_upsert_inserts_then_replaces(tmp_path):
    backend = await _make_backend(tmp_path)
    try:
        await backend.upsert_one(
            Collection.DEVELOPERS,
            {"id": 1, "name": "Nova", "created_at": "2024-01-01T00:00:00Z", "updated_at": "2024-01-01T00:00:00Z"},
        )
        await backend.upsert_one(
            Collection.DEVELOPERS,
            {"id": 1, "name": "Nova Prime", "created_at": "2024-01-01T00:00:00Z", "updated_at": "2024-02-01T00:00:00Z"},
        )

        rows = await backend.read_all(Collection.DEVELOPERS)
        assert len(rows) == 1
        assert rows[0]["id"] == 1
        assert rows[0]["name"] == "Nova Prime"
        assert rows[0]["created_at"].startswith("2024-01-01T00:00:00")
        assert rows[0]["updated_at"].startswith("2024-02-01T00:00:00")
    finally:
        await backend.dispose()


@pytest.mark.asyncio
async def test_read_all_orders_newest_first(tmp_path):
    backend = await _make_backend(tmp_path)
    try:
        await backend.upsert_one(Collection.BLOG_POSTS, {"id": 1, "created_at": "2024-01-01T00:00:00+00:00"})
        await backend.upsert_one(Collection.BLOG_POSTS, {"id": 2, "created_at": "2024-03-01T00:00:00+00:00"})
        await backend.upsert_one(Collection.BLOG_POSTS, {"id": 3, "created_at": "2024-02-01T00:00:00+00:00"})

        rows = await backend.read_all(Collection.BLOG_POSTS)
        assert [r["id"] for r in rows] == [2, 3, 1]
    finally:
        await backend.dispose()


@pytest.mark.asyncio
async def test_replace_all_removes_rows_not_in_the_list(tmp_path):
    backend = await _make_backend(tmp_path)
    try:
        await backend.replace_all(Collection.PROJECTS, [{"id": 1}, {"id": 2}, {"id": 3}])
        await backend.replace_all(Collection.PROJECTS, [{"id": 2, "title": "kept"}])

        rows = await backend.read_all(Collection.PROJECTS)
        assert [r["id"] for r in rows] == [2]
        assert rows[0]["title"] == "kept"

        await backend.replace_all(Collection.PROJECTS, [])
        assert await backend.read_all(Collection.PROJECTS) == []
    finally:
        await backend.dispose()


@pytest.mark.asyncio
async def test_settings_singleton_upsert(tmp_path):
    backend = await _make_backend(tmp_path)
    try:
        await backend.upsert_settings({"contactEmail": "a@b.com", "darkMode": False})
        await backend.upsert_settings({"contactEmail": "c@d.com", "darkMode": False})

        settings = await backend.read_settings()
        assert settings == {"contactEmail": "c@d.com", "darkMode": False}
    finally:
        await backend.dispose()


@pytest.mark.asyncio
async def test_unreachable_database_raises_remote_error(tmp_path):
    engine = build_engine(f"sqlite:///{tmp_path / 'missing' / 'dir' / 'remote.db'}")
    backend = SQLAlchemyRemoteBackend(build_session_factory(engine), engine=engine)
    try:
        with pytest.raises(RemoteBackendError):
            await backend.read_all(Collection.PROJECTS)
    finally:
        await backend.dispose()
