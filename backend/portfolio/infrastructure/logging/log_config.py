"""Logging setup for the store API.

The root level comes from ``LOG_LEVEL``; each category below gets its own
level so SQL echo or HTTP client chatter can be raised or muted separately
from the store's fallback warnings.
"""

import logging
import sys

from portfolio.config import Settings, get_settings

_FORMAT = "%(levelname)-8s %(name)s: %(message)s"

# Settings field → loggers it controls
_CATEGORY_MAP: dict[str, tuple[str, ...]] = {
    "log_level_sql": ("sqlalchemy.engine", "sqlalchemy.pool", "aiosqlite"),
    "log_level_http": ("httpx", "httpcore"),
    "log_level_uvicorn": ("uvicorn", "uvicorn.access", "uvicorn.error"),
    "log_level_store": (
        "portfolio.application.services",
        "portfolio.infrastructure.local",
        "portfolio.infrastructure.database",
        "portfolio.infrastructure.postgrest",
    ),
}


def setup_logging(settings: Settings | None = None) -> None:
    """Apply root and per-category levels; call once from the app lifespan."""
    settings = settings or get_settings()

    root = logging.getLogger()
    root.setLevel(_parse_level(settings.log_level))
    if not root.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(_FORMAT))
        root.addHandler(handler)

    for field_name, logger_names in _CATEGORY_MAP.items():
        level = _parse_level(getattr(settings, field_name))
        for name in logger_names:
            logging.getLogger(name).setLevel(level)


def _parse_level(raw: str) -> int:
    """Level name → logging constant; unknown names mean INFO."""
    level = logging.getLevelName(raw.strip().upper())
    return level if isinstance(level, int) else logging.INFO
