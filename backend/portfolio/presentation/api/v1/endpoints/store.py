"""Whole-store endpoints — snapshot read and resynchronisation."""

from fastapi import APIRouter, Depends

from portfolio.application.schemas import StoreSnapshotResponse
from portfolio.application.services import EntityStore
from portfolio.infrastructure.dependencies import get_entity_store

router = APIRouter(prefix="/store", tags=["Store"])


@router.get("", response_model=StoreSnapshotResponse)
async def get_snapshot(store: EntityStore = Depends(get_entity_store)) -> StoreSnapshotResponse:
    """Return every collection and the settings from the in-memory snapshot."""
    return StoreSnapshotResponse(**store.snapshot().to_dict())


@router.post("/reload", response_model=StoreSnapshotResponse)
async def reload_store(store: EntityStore = Depends(get_entity_store)) -> StoreSnapshotResponse:
    """Re-run the full load (remote first, local fallback)."""
    snapshot = await store.load_all()
    return StoreSnapshotResponse(**snapshot.to_dict())
