"""Site settings endpoints — the singleton configuration record."""

from typing import Any

from fastapi import APIRouter, Body, Depends

from portfolio.application.schemas import SettingsSaveResponse
from portfolio.application.services import EntityStore
from portfolio.infrastructure.dependencies import get_entity_store
from portfolio.presentation.api.v1.save_results import raise_if_failed

router = APIRouter(prefix="/settings", tags=["Settings"])


@router.get("", response_model=dict[str, Any])
async def get_site_settings(store: EntityStore = Depends(get_entity_store)) -> dict[str, Any]:
    return store.settings


@router.patch("", response_model=SettingsSaveResponse)
async def patch_site_settings(
    changes: dict[str, Any] = Body(..., examples=[{"contactEmail": "a@b.com"}]),
    store: EntityStore = Depends(get_entity_store),
) -> SettingsSaveResponse:
    """Shallow-merge the given fields into the current settings."""
    payload = raise_if_failed(await store.save_settings(changes))
    return SettingsSaveResponse(settings=store.settings, result=payload)
