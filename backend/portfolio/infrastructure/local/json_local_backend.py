"""Local fallback storage — one JSON file per collection key.

Storage layout:
    <data_dir>/<local_key>.json      e.g. nexusdev_projects.json, nexusdev_settings.json

Writes go to a temporary sibling file that atomically replaces the target,
so a failed write never clobbers what was stored before.
"""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

from portfolio.application.interfaces import LocalBackend
from portfolio.domain.entities import Collection, Record
from portfolio.domain.exceptions import LocalStorageError

logger = logging.getLogger(__name__)


class JsonFileLocalBackend(LocalBackend):
    """Infrastructure adapter for on-disk key/value storage."""

    def __init__(self, data_dir: str | Path):
        self._data_dir = Path(data_dir)

    @property
    def data_dir(self) -> Path:
        return self._data_dir

    def path_for(self, key: str) -> Path:
        return self._data_dir / f"{key}.json"

    # ── Record collections ──────────────────────────────────────────

    async def read_all(self, collection: Collection) -> list[Record]:
        payload = self._read(collection.local_key)
        if payload is None:
            return []
        if not isinstance(payload, list):
            logger.warning("Ignoring %s: expected a JSON array", self.path_for(collection.local_key))
            return []
        return [item for item in payload if isinstance(item, dict)]

    async def write_all(self, collection: Collection, records: list[Record]) -> bool:
        return self._write_safely(collection.local_key, records)

    # ── Settings singleton ──────────────────────────────────────────

    async def read_settings(self) -> dict[str, Any] | None:
        key = Collection.SETTINGS.local_key
        payload = self._read(key)
        if payload is None:
            return None
        if not isinstance(payload, dict):
            logger.warning("Ignoring %s: expected a JSON object", self.path_for(key))
            return None
        return payload

    async def write_settings(self, settings: dict[str, Any]) -> bool:
        return self._write_safely(Collection.SETTINGS.local_key, settings)

    # ── Utilities ───────────────────────────────────────────────────

    def _read(self, key: str) -> Any:
        """Return the parsed blob, or None if absent or unreadable."""
        path = self.path_for(key)
        if not path.exists():
            return None
        try:
            return json.loads(path.read_text("utf-8"))
        except (OSError, ValueError) as exc:
            logger.warning("Could not read %s — treating as empty: %s", path, exc)
            return None

    def _write_safely(self, key: str, payload: Any) -> bool:
        try:
            self._write(key, payload)
        except LocalStorageError as exc:
            logger.error("%s", exc)
            return False
        return True

    def _write(self, key: str, payload: Any) -> None:
        try:
            text = json.dumps(payload, ensure_ascii=False, indent=2)
        except (TypeError, ValueError) as exc:
            raise LocalStorageError(key, f"not serializable ({exc})") from exc

        path = self.path_for(key)
        tmp_name: str | None = None
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w", encoding="utf-8", dir=path.parent, prefix=f".{key}.", suffix=".tmp", delete=False
            ) as tmp:
                tmp_name = tmp.name
                tmp.write(text)
            os.replace(tmp_name, path)
        except OSError as exc:
            if tmp_name is not None:
                Path(tmp_name).unlink(missing_ok=True)
            raise LocalStorageError(key, str(exc)) from exc
