"""Per-collection CRUD endpoints for developers, projects, websites, blog posts and messages."""

from typing import Any

from fastapi import APIRouter, Body, Depends, HTTPException, status

from portfolio.application.schemas import CollectionSaveResponse, RecordSaveResponse
from portfolio.application.services import EntityStore, as_collection
from portfolio.domain.entities import Collection
from portfolio.domain.exceptions import EntityNotFoundError, MalformedRecordError, UnknownCollectionError
from portfolio.infrastructure.dependencies import get_entity_store
from portfolio.presentation.api.v1.save_results import raise_if_failed

router = APIRouter(prefix="/collections", tags=["Collections"])


def _record_collection(name: str) -> Collection:
    """Resolve a path segment to a record collection or answer 404."""
    try:
        collection = as_collection(name)
    except UnknownCollectionError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    if collection.is_singleton:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Settings are served from /settings",
        )
    return collection


def _unprocessable(e: MalformedRecordError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))


@router.get("/{name}", response_model=list[dict[str, Any]])
async def list_records(
    name: str,
    store: EntityStore = Depends(get_entity_store),
) -> list[dict[str, Any]]:
    """Return the in-memory records of one collection."""
    return store.records(_record_collection(name))


@router.get("/{name}/{record_id}", response_model=dict[str, Any])
async def get_record(
    name: str,
    record_id: int,
    store: EntityStore = Depends(get_entity_store),
) -> dict[str, Any]:
    """Retrieve a single record by ID."""
    collection = _record_collection(name)
    record = store.get(collection, record_id)
    if record is None:
        e = EntityNotFoundError(collection.value, record_id)
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return record


@router.post("/{name}", response_model=RecordSaveResponse, status_code=status.HTTP_201_CREATED)
async def create_record(
    name: str,
    fields: dict[str, Any] = Body(..., examples=[{"title": "Lander", "type": "web"}]),
    store: EntityStore = Depends(get_entity_store),
) -> RecordSaveResponse:
    """Create a record; the id and timestamps are assigned by the store."""
    collection = _record_collection(name)
    try:
        record, result = await store.create(collection, fields)
    except MalformedRecordError as e:
        raise _unprocessable(e)
    return RecordSaveResponse(record=record, result=raise_if_failed(result))


@router.put("/{name}/{record_id}", response_model=RecordSaveResponse)
async def update_record(
    name: str,
    record_id: int,
    fields: dict[str, Any] = Body(...),
    store: EntityStore = Depends(get_entity_store),
) -> RecordSaveResponse:
    """Upsert the record with this id (the path id wins over any id in the body)."""
    collection = _record_collection(name)
    try:
        result = await store.save_one(collection, {**fields, "id": record_id})
    except MalformedRecordError as e:
        raise _unprocessable(e)
    payload = raise_if_failed(result)
    return RecordSaveResponse(record=store.get(collection, record_id), result=payload)


@router.put("/{name}", response_model=CollectionSaveResponse)
async def replace_collection(
    name: str,
    records: list[dict[str, Any]] = Body(...),
    store: EntityStore = Depends(get_entity_store),
) -> CollectionSaveResponse:
    """Replace the whole collection with the given records."""
    collection = _record_collection(name)
    try:
        result = await store.replace_all(collection, records)
    except MalformedRecordError as e:
        raise _unprocessable(e)
    payload = raise_if_failed(result)
    return CollectionSaveResponse(records=store.records(collection), result=payload)


@router.delete("/{name}/{record_id}", response_model=CollectionSaveResponse)
async def delete_record(
    name: str,
    record_id: int,
    store: EntityStore = Depends(get_entity_store),
) -> CollectionSaveResponse:
    """Delete a record by saving the rest of its collection."""
    collection = _record_collection(name)
    payload = raise_if_failed(await store.delete(collection, record_id))
    return CollectionSaveResponse(records=store.records(collection), result=payload)
