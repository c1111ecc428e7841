"""Dependency wiring — builds the entity store from settings and hands it to FastAPI."""

import logging
from functools import lru_cache

from portfolio.application.interfaces import RemoteBackend
from portfolio.application.services import EntityStore
from portfolio.config import Settings, get_settings
from portfolio.infrastructure.database import build_engine, build_session_factory
from portfolio.infrastructure.database.repositories import SQLAlchemyRemoteBackend
from portfolio.infrastructure.local import JsonFileLocalBackend
from portfolio.infrastructure.postgrest import PostgrestRemoteBackend

logger = logging.getLogger(__name__)


def build_remote_backend(settings: Settings) -> RemoteBackend | None:
    """Return the configured remote adapter, or None to run local-only."""
    choice = settings.resolved_remote_backend()
    if choice == "postgrest":
        if not settings.supabase_configured:
            logger.warning("REMOTE_BACKEND=postgrest but Supabase credentials are missing; using local storage")
            return None
        logger.info("Remote backend: Supabase REST at %s", settings.supabase_url)
        return PostgrestRemoteBackend(
            base_url=settings.supabase_url,
            api_key=settings.supabase_key,
            app_name=settings.supabase_app_name,
            timeout=settings.remote_timeout_seconds,
        )
    if choice == "sql":
        if not settings.database_url.strip():
            logger.warning("REMOTE_BACKEND=sql but DATABASE_URL is empty; using local storage")
            return None
        engine = build_engine(settings.database_url, echo=(settings.app_env == "development"))
        logger.info("Remote backend: SQL database (%s)", engine.url.render_as_string(hide_password=True))
        return SQLAlchemyRemoteBackend(build_session_factory(engine), engine=engine)
    logger.warning("Remote backend not configured. Using local storage mode.")
    return None


def build_entity_store(settings: Settings) -> EntityStore:
    return EntityStore(
        local=JsonFileLocalBackend(settings.local_data_dir),
        remote=build_remote_backend(settings),
        remote_timeout=settings.remote_timeout_seconds,
        message_retention=settings.messages_retention,
    )


@lru_cache
def get_entity_store() -> EntityStore:
    """Process-wide store instance (FastAPI dependency)."""
    return build_entity_store(get_settings())
