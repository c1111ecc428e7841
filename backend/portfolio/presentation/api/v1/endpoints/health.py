"""Health check endpoint — always available."""

from fastapi import APIRouter, Depends

from portfolio.application.services import EntityStore
from portfolio.config import get_settings
from portfolio.infrastructure.dependencies import get_entity_store

router = APIRouter(tags=["Health"])


@router.get("/health")
async def health_check(store: EntityStore = Depends(get_entity_store)) -> dict:
    """Returns the current application health status and store provenance."""
    settings = get_settings()
    return {
        "status": "healthy",
        "version": settings.app_version,
        "environment": settings.app_env,
        "remote_configured": store.remote_configured,
        "store_source": store.source.value,
    }
