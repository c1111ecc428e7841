"""Unit tests for the JSON-file local backend."""

import json

import pytest

from portfolio.domain.entities import Collection
from portfolio.infrastructure.local import JsonFileLocalBackend


@pytest.mark.asyncio
async def test_missing_files_read_as_empty(tmp_path):
    backend = JsonFileLocalBackend(tmp_path)

    assert await backend.read_all(Collection.PROJECTS) == []
    assert await backend.read_settings() is None


@pytest.mark.asyncio
async def test_write_then_read_uses_collection_key(tmp_path):
    backend = JsonFileLocalBackend(tmp_path)
    records = [{"id": 1, "title": {"en": "Orbit", "id": "Orbit"}}]

    assert await backend.write_all(Collection.BLOG_POSTS, records) is True

    assert (tmp_path / "nexusdev_blog.json").exists()
    assert await backend.read_all(Collection.BLOG_POSTS) == records


@pytest.mark.asyncio
async def test_corrupt_file_reads_as_empty(tmp_path):
    (tmp_path / "nexusdev_projects.json").write_text("{not json", encoding="utf-8")
    backend = JsonFileLocalBackend(tmp_path)

    assert await backend.read_all(Collection.PROJECTS) == []


@pytest.mark.asyncio
async def test_wrong_shape_is_ignored(tmp_path):
    (tmp_path / "nexusdev_developers.json").write_text(json.dumps({"id": 1}), encoding="utf-8")
    (tmp_path / "nexusdev_settings.json").write_text(json.dumps([1, 2]), encoding="utf-8")
    (tmp_path / "nexusdev_messages.json").write_text(json.dumps([{"id": 1}, "junk", 7]), encoding="utf-8")
    backend = JsonFileLocalBackend(tmp_path)

    assert await backend.read_all(Collection.DEVELOPERS) == []
    assert await backend.read_settings() is None
    assert await backend.read_all(Collection.MESSAGES) == [{"id": 1}]


@pytest.mark.asyncio
async def test_unserializable_write_fails_and_keeps_previous_content(tmp_path):
    backend = JsonFileLocalBackend(tmp_path)
    await backend.write_all(Collection.PROJECTS, [{"id": 1}])

    ok = await backend.write_all(Collection.PROJECTS, [{"id": 2, "blob": object()}])

    assert ok is False
    assert await backend.read_all(Collection.PROJECTS) == [{"id": 1}]


@pytest.mark.asyncio
async def test_settings_round_trip(tmp_path):
    backend = JsonFileLocalBackend(tmp_path)

    assert await backend.write_settings({"darkMode": False}) is True
    assert await backend.read_settings() == {"darkMode": False}


@pytest.mark.asyncio
async def test_creates_missing_data_dir(tmp_path):
    backend = JsonFileLocalBackend(tmp_path / "nested" / "dir")

    assert await backend.write_all(Collection.MESSAGES, []) is True
    assert backend.path_for("nexusdev_messages").exists()
