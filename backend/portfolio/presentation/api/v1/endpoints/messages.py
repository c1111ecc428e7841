"""Contact form endpoints."""

from fastapi import APIRouter, Depends, status

from portfolio.application.schemas import (
    CollectionSaveResponse,
    ContactMessageCreate,
    RecordSaveResponse,
)
from portfolio.application.services import EntityStore
from portfolio.domain.entities import Collection
from portfolio.infrastructure.dependencies import get_entity_store
from portfolio.presentation.api.v1.save_results import raise_if_failed

router = APIRouter(prefix="/messages", tags=["Messages"])


@router.post("", response_model=RecordSaveResponse, status_code=status.HTTP_201_CREATED)
async def submit_message(
    data: ContactMessageCreate,
    store: EntityStore = Depends(get_entity_store),
) -> RecordSaveResponse:
    """Store a contact-form message as unread."""
    record, result = await store.create(Collection.MESSAGES, {**data.model_dump(), "read": False})
    return RecordSaveResponse(record=record, result=raise_if_failed(result))


@router.delete("/read", response_model=CollectionSaveResponse)
async def clear_read_messages(store: EntityStore = Depends(get_entity_store)) -> CollectionSaveResponse:
    """Delete every message already marked as read."""
    result = await store.delete_where(Collection.MESSAGES, lambda message: bool(message.get("read")))
    payload = raise_if_failed(result)
    return CollectionSaveResponse(records=store.records(Collection.MESSAGES), result=payload)
