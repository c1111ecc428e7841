"""V1 API router — aggregates all v1 endpoint routers."""

from fastapi import APIRouter

from portfolio.presentation.api.v1.endpoints.health import router as health_router
from portfolio.presentation.api.v1.endpoints.store import router as store_router
from portfolio.presentation.api.v1.endpoints.collections import router as collections_router
from portfolio.presentation.api.v1.endpoints.site_settings import router as settings_router
from portfolio.presentation.api.v1.endpoints.messages import router as messages_router

router = APIRouter(prefix="/v1")
router.include_router(health_router)
router.include_router(store_router)
router.include_router(collections_router)
router.include_router(settings_router)
router.include_router(messages_router)
