"""Supabase / PostgREST remote backend — implements the RemoteBackend port over HTTP.

Talks to ``<supabase_url>/rest/v1`` with httpx:

    read_all       GET    /<table>?select=*&order=created_at.desc
    upsert_one     POST   /<table>?on_conflict=id&columns=...   (Prefer: resolution=merge-duplicates)
    replace_all    POST   upsert, then DELETE /<table>?id=not.in.(...)
    read_settings  GET    /settings?select=*&limit=1 (single-object Accept header)
"""

import logging
from typing import Any

import httpx

from portfolio.application.interfaces import RemoteBackend
from portfolio.domain.entities import Collection, Record
from portfolio.domain.exceptions import (
    RemoteBackendError,
    RemoteReadError,
    RemoteUnavailableError,
    RemoteWriteConflictError,
)

logger = logging.getLogger(__name__)

# PostgREST error code for "JSON object requested, multiple (or no) rows returned"
NO_ROWS_CODE = "PGRST116"
SETTINGS_ROW_ID = 1
_SINGLE_OBJECT = "application/vnd.pgrst.object+json"


class PostgrestRemoteBackend(RemoteBackend):
    """Infrastructure adapter — connects to a Supabase project's REST endpoint.

    Uses one pooled ``httpx.AsyncClient``; a client can be injected for tests.
    """

    def __init__(
        self,
        base_url: str,
        api_key: str,
        app_name: str = "SpaceTeam-Dev",
        timeout: float = 10.0,
        http_client: httpx.AsyncClient | None = None,
    ):
        self._rest_url = f"{base_url.rstrip('/')}/rest/v1"
        self._api_key = api_key
        self._app_name = app_name
        self._timeout = timeout
        self._http_client = http_client

    @property
    def name(self) -> str:
        return "postgrest"

    def _get_headers(self, **extra: str) -> dict[str, str]:
        """Standard headers for Supabase REST requests."""
        headers = {
            "apikey": self._api_key,
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
            "x-application-name": self._app_name,
        }
        headers.update(extra)
        return headers

    def _get_client(self) -> httpx.AsyncClient:
        """Return the injected client, creating a shared one on first use."""
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(timeout=self._timeout)
        return self._http_client

    async def aclose(self) -> None:
        if self._http_client is not None:
            await self._http_client.aclose()

    async def _request(
        self,
        method: str,
        table: str,
        operation: str,
        *,
        params: dict[str, str] | None = None,
        json: Any = None,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        """Send one request, mapping transport failures to RemoteUnavailableError."""
        client = self._get_client()
        try:
            return await client.request(
                method,
                f"{self._rest_url}/{table}",
                params=params,
                json=json,
                headers=self._get_headers(**(headers or {})),
            )
        except httpx.TransportError as exc:
            raise RemoteUnavailableError(operation, table, type(exc).__name__) from exc

    @staticmethod
    def _error_code(response: httpx.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            return ""
        return str(body.get("code", "")) if isinstance(body, dict) else ""

    @staticmethod
    def _json(response: httpx.Response, table: str) -> Any:
        try:
            return response.json()
        except ValueError as exc:
            raise RemoteReadError("read", table, "response is not JSON") from exc

    def _raise_for_status(self, response: httpx.Response, operation: str, table: str) -> None:
        if response.is_success:
            return
        status = response.status_code
        code = self._error_code(response)
        detail = f"HTTP {status}" + (f" ({code})" if code else "")
        error: type[RemoteBackendError]
        if status in (401, 403):
            error = RemoteUnavailableError
        elif operation == "read":
            error = RemoteReadError
        else:
            error = RemoteWriteConflictError
        logger.debug("PostgREST %s on %s failed: %s", operation, table, detail)
        raise error(operation, table, detail)

    # ── Record collections ──────────────────────────────────────────

    async def read_all(self, collection: Collection) -> list[Record]:
        table = collection.value
        response = await self._request(
            "GET", table, "read", params={"select": "*", "order": "created_at.desc"},
        )
        self._raise_for_status(response, "read", table)
        data = self._json(response, table)
        if not isinstance(data, list):
            raise RemoteReadError("read", table, "expected a JSON array")
        return data

    async def upsert_one(self, collection: Collection, record: Record) -> None:
        await self._upsert(collection.value, [record], "upsert")

    async def replace_all(self, collection: Collection, records: list[Record]) -> None:
        table = collection.value
        if records:
            await self._upsert(table, records, "replace")
        ids = ",".join(str(record["id"]) for record in records)
        filter_value = f"not.in.({ids})" if ids else "not.is.null"
        response = await self._request(
            "DELETE", table, "replace",
            params={"id": filter_value},
            headers={"Prefer": "return=minimal"},
        )
        self._raise_for_status(response, "replace", table)

    async def _upsert(self, table: str, rows: list[dict[str, Any]], operation: str) -> None:
        # Bulk inserts need an explicit column list when rows carry different keys
        columns = ",".join(sorted({key for row in rows for key in row}))
        response = await self._request(
            "POST", table, operation,
            params={"on_conflict": "id", "columns": columns},
            json=rows,
            headers={"Prefer": "resolution=merge-duplicates,return=minimal"},
        )
        self._raise_for_status(response, operation, table)

    # ── Settings singleton ──────────────────────────────────────────

    async def read_settings(self) -> dict[str, Any] | None:
        table = Collection.SETTINGS.value
        response = await self._request(
            "GET", table, "read",
            params={"select": "*", "limit": "1"},
            headers={"Accept": _SINGLE_OBJECT},
        )
        if response.status_code == 406 and self._error_code(response) == NO_ROWS_CODE:
            return None
        self._raise_for_status(response, "read", table)
        data = self._json(response, table)
        if not isinstance(data, dict):
            raise RemoteReadError("read", table, "expected a JSON object")
        data.pop("id", None)
        return data

    async def upsert_settings(self, settings: dict[str, Any]) -> None:
        row = {**settings, "id": SETTINGS_ROW_ID}
        await self._upsert(Collection.SETTINGS.value, [row], "upsert")
