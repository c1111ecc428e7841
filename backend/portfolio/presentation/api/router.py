"""API root — every store endpoint lives under ``/api/v1``."""

from fastapi import APIRouter

from portfolio.presentation.api.v1.router import router as v1_router

API_PREFIX = "/api"

router = APIRouter(prefix=API_PREFIX)
router.include_router(v1_router)
