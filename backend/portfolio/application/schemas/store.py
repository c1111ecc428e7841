"""Pydantic DTOs (Data Transfer Objects) for the entity store API."""

from typing import Any

from pydantic import BaseModel, Field

from portfolio.domain.entities import SaveResult


class SaveResultResponse(BaseModel):
    """Outcome of a save, shaped for the admin panel's notification toast."""

    success: bool
    backend: str = Field(..., examples=["remote"])
    category: str = Field(..., examples=["success"])
    message: str

    @classmethod
    def from_result(cls, result: SaveResult) -> "SaveResultResponse":
        return cls(
            success=result.success,
            backend=result.backend.value,
            category=result.category.value,
            message=result.message,
        )


class RecordSaveResponse(BaseModel):
    """A written record together with the save outcome."""

    record: dict[str, Any] | None = None
    result: SaveResultResponse


class CollectionSaveResponse(BaseModel):
    """A collection after a bulk write or delete, together with the save outcome."""

    records: list[dict[str, Any]]
    result: SaveResultResponse


class SettingsSaveResponse(BaseModel):
    settings: dict[str, Any]
    result: SaveResultResponse


class StoreSnapshotResponse(BaseModel):
    """Everything the public pages and the admin dashboard render from."""

    developers: list[dict[str, Any]]
    projects: list[dict[str, Any]]
    website_projects: list[dict[str, Any]]
    blog_posts: list[dict[str, Any]]
    settings: dict[str, Any]
    messages: list[dict[str, Any]]
    source: str = Field(..., examples=["local"])


class ContactMessageCreate(BaseModel):
    """Contact form submission."""

    name: str = Field(..., min_length=1, max_length=200)
    email: str = Field(..., min_length=3, max_length=320, examples=["astronaut@example.com"])
    subject: str = Field(..., min_length=1, max_length=200)
    message: str = Field(..., min_length=1, max_length=10_000)
