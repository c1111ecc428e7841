"""Unit tests for the Supabase / PostgREST remote backend."""

import json

import httpx
import pytest

from portfolio.domain.entities import Collection
from portfolio.domain.exceptions import (
    RemoteReadError,
    RemoteUnavailableError,
    RemoteWriteConflictError,
)
from portfolio.infrastructure.postgrest import PostgrestRemoteBackend


# ── Helpers ──


def _make_backend(handler) -> tuple[PostgrestRemoteBackend, list[httpx.Request]]:
    """Build a backend whose client records every request it sends."""
    seen: list[httpx.Request] = []

    def recording_handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return handler(request)

    client = httpx.AsyncClient(transport=httpx.MockTransport(recording_handler))
    backend = PostgrestRemoteBackend(
        base_url="https://abc.supabase.co/",
        api_key="anon-key",
        app_name="SpaceTeam-Dev",
        http_client=client,
    )
    return backend, seen


# ── Reads ──


@pytest.mark.asyncio
async def test_read_all_queries_table_newest_first():
    rows = [{"id": 2, "title": "B"}, {"id": 1, "title": "A"}]
    backend, seen = _make_backend(lambda request: httpx.Response(200, json=rows))

    result = await backend.read_all(Collection.WEBSITE_PROJECTS)

    assert result == rows
    request = seen[0]
    assert request.method == "GET"
    assert request.url.path == "/rest/v1/website_projects"
    assert request.url.params["select"] == "*"
    assert request.url.params["order"] == "created_at.desc"
    assert request.headers["apikey"] == "anon-key"
    assert request.headers["Authorization"] == "Bearer anon-key"
    assert request.headers["x-application-name"] == "SpaceTeam-Dev"


@pytest.mark.asyncio
async def test_read_error_status_raises_read_error():
    backend, _ = _make_backend(lambda request: httpx.Response(500, json={"message": "boom"}))

    with pytest.raises(RemoteReadError):
        await backend.read_all(Collection.PROJECTS)


@pytest.mark.asyncio
async def test_auth_failure_raises_unavailable():
    backend, _ = _make_backend(lambda request: httpx.Response(401, json={"message": "Invalid API key"}))

    with pytest.raises(RemoteUnavailableError):
        await backend.read_all(Collection.PROJECTS)


@pytest.mark.asyncio
async def test_connection_failure_raises_unavailable():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    backend, _ = _make_backend(handler)

    with pytest.raises(RemoteUnavailableError):
        await backend.read_all(Collection.DEVELOPERS)


@pytest.mark.asyncio
async def test_missing_settings_row_reads_as_none():
    backend, seen = _make_backend(
        lambda request: httpx.Response(406, json={"code": "PGRST116", "message": "no rows"})
    )

    assert await backend.read_settings() is None
    assert seen[0].headers["Accept"] == "application/vnd.pgrst.object+json"


@pytest.mark.asyncio
async def test_settings_row_id_is_stripped():
    backend, _ = _make_backend(
        lambda request: httpx.Response(200, json={"id": 1, "contactEmail": "a@b.com"})
    )

    assert await backend.read_settings() == {"contactEmail": "a@b.com"}


# ── Writes ──


@pytest.mark.asyncio
async def test_upsert_one_posts_with_merge_duplicates():
    backend, seen = _make_backend(lambda request: httpx.Response(201))

    await backend.upsert_one(Collection.PROJECTS, {"id": 3, "title": "Orbit"})

    request = seen[0]
    assert request.method == "POST"
    assert request.url.params["on_conflict"] == "id"
    assert "resolution=merge-duplicates" in request.headers["Prefer"]
    assert json.loads(request.content) == [{"id": 3, "title": "Orbit"}]


@pytest.mark.asyncio
async def test_upsert_conflict_raises_write_conflict():
    backend, _ = _make_backend(lambda request: httpx.Response(409, json={"code": "23505"}))

    with pytest.raises(RemoteWriteConflictError):
        await backend.upsert_one(Collection.PROJECTS, {"id": 3})


@pytest.mark.asyncio
async def test_replace_all_upserts_then_prunes_other_ids():
    backend, seen = _make_backend(lambda request: httpx.Response(204))

    await backend.replace_all(Collection.BLOG_POSTS, [{"id": 1}, {"id": 4}])

    assert [r.method for r in seen] == ["POST", "DELETE"]
    assert seen[1].url.params["id"] == "not.in.(1,4)"


@pytest.mark.asyncio
async def test_bulk_upsert_lists_the_union_of_row_keys():
    backend, seen = _make_backend(lambda request: httpx.Response(204))

    await backend.replace_all(Collection.MESSAGES, [{"id": 1, "read": True}, {"id": 2, "subject": "Hi"}])

    upsert = seen[0]
    assert upsert.url.params["columns"] == "id,read,subject"
    assert upsert.url.params["on_conflict"] == "id"
    assert json.loads(upsert.content) == [{"id": 1, "read": True}, {"id": 2, "subject": "Hi"}]


@pytest.mark.asyncio
async def test_replace_all_with_empty_list_deletes_everything():
    backend, seen = _make_backend(lambda request: httpx.Response(204))

    await backend.replace_all(Collection.MESSAGES, [])

    assert [r.method for r in seen] == ["DELETE"]
    assert seen[0].url.params["id"] == "not.is.null"


@pytest.mark.asyncio
async def test_upsert_settings_targets_row_one():
    backend, seen = _make_backend(lambda request: httpx.Response(201))

    await backend.upsert_settings({"darkMode": False})

    assert seen[0].url.path == "/rest/v1/settings"
    assert json.loads(seen[0].content) == [{"darkMode": False, "id": 1}]
