import logging
from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings

_config_logger = logging.getLogger(__name__)

_BACKEND_DIR = Path(__file__).resolve().parents[1]
_ENV_FILES = (
    _BACKEND_DIR / ".env",
    ".env",
)
# Values shipped in the sample site configuration that mean "not configured".
_PLACEHOLDER_SUPABASE_URL = "https://your-project.supabase.co"
_PLACEHOLDER_SUPABASE_KEY = "your-anon-key"
_REMOTE_BACKENDS = frozenset({"auto", "none", "sql", "postgrest"})


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    app_title: str = "SpaceTeam Portfolio API"
    app_version: str = "0.1.0"
    app_env: str = "development"
    cors_origins: list[str] = ["http://localhost:3020"]

    # Remote backend selection: auto | none | sql | postgrest
    remote_backend: str = "auto"
    database_url: str = ""
    supabase_url: str = ""
    supabase_key: str = ""
    supabase_app_name: str = "SpaceTeam-Dev"
    remote_timeout_seconds: float = 10.0

    # Local fallback storage
    local_data_dir: str = "data/local"
    messages_retention: int = 100

    # Logging — per-category log levels (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    log_level: str = "INFO"                  # Root / app-wide
    log_level_sql: str = "WARNING"           # sqlalchemy.engine — SQL queries
    log_level_http: str = "WARNING"          # httpx / httpcore — outbound HTTP
    log_level_uvicorn: str = "INFO"          # uvicorn.access / uvicorn.error
    log_level_store: str = "INFO"            # entity store + backend adapters

    model_config = {
        "env_file": _ENV_FILES,
        "env_file_encoding": "utf-8",
    }

    @property
    def supabase_configured(self) -> bool:
        url = self.supabase_url.strip()
        key = self.supabase_key.strip()
        return bool(url and key) and url != _PLACEHOLDER_SUPABASE_URL and key != _PLACEHOLDER_SUPABASE_KEY

    def resolved_remote_backend(self) -> str:
        """Return the remote adapter to use: ``none``, ``sql`` or ``postgrest``.

        ``auto`` prefers PostgREST when Supabase credentials are present,
        then a SQL database when ``DATABASE_URL`` is set.
        """
        choice = self.remote_backend.strip().lower()
        if choice not in _REMOTE_BACKENDS:
            _config_logger.warning("Unknown REMOTE_BACKEND %r — treating as 'auto'", self.remote_backend)
            choice = "auto"
        if choice != "auto":
            return choice
        if self.supabase_configured:
            return "postgrest"
        if self.database_url.strip():
            return "sql"
        return "none"


@lru_cache
def get_settings() -> Settings:
    """Cached settings instance — reads .env once."""
    return Settings()
