"""FastAPI application factory."""

import logging
from contextlib import asynccontextmanager
from collections.abc import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from portfolio.config import get_settings
from portfolio.application.services import EntityStore
from portfolio.domain.entities import SnapshotSource
from portfolio.infrastructure.database.repositories import SQLAlchemyRemoteBackend
from portfolio.infrastructure.dependencies import get_entity_store
from portfolio.infrastructure.logging.log_config import setup_logging
from portfolio.infrastructure.postgrest import PostgrestRemoteBackend
from portfolio.presentation.api.router import router as api_router

logger = logging.getLogger(__name__)


async def _ensure_remote_schema(store: EntityStore) -> None:
    """Create the SQL tables when the SQL remote backend is active.

    Failure is not fatal: the first load will fall back to local storage.
    """
    remote = store.remote
    if not isinstance(remote, SQLAlchemyRemoteBackend):
        return
    try:
        await remote.create_schema()
        logger.debug("Remote schema ready")
    except Exception as exc:
        logger.warning("Could not create remote schema: %s", exc)


async def _close_remote(store: EntityStore) -> None:
    remote = store.remote
    if isinstance(remote, SQLAlchemyRemoteBackend):
        await remote.dispose()
    elif isinstance(remote, PostgrestRemoteBackend):
        await remote.aclose()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan — configure logging, prepare the remote schema, load the store."""
    setup_logging()
    store = get_entity_store()

    # 1. Make sure the remote tables exist (SQL backend only)
    await _ensure_remote_schema(store)

    # 2. Initial load — remote first, local fallback
    snapshot = await store.load_all()
    if snapshot.source is SnapshotSource.LOCAL and store.remote_configured:
        logger.warning("Using local storage mode")

    yield

    # Shutdown
    await _close_remote(store)


def create_app() -> FastAPI:
    """Factory function that builds and configures the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title=settings.app_title,
        version=settings.app_version,
        lifespan=lifespan,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Mount API routes
    app.include_router(api_router)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "portfolio.main:app",
        host="0.0.0.0",
        port=8020,
        reload=True,
    )
