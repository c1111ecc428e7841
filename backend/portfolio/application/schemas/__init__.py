from .store import (
    CollectionSaveResponse,
    ContactMessageCreate,
    RecordSaveResponse,
    SaveResultResponse,
    SettingsSaveResponse,
    StoreSnapshotResponse,
)

__all__ = [
    "CollectionSaveResponse",
    "ContactMessageCreate",
    "RecordSaveResponse",
    "SaveResultResponse",
    "SettingsSaveResponse",
    "StoreSnapshotResponse",
]
