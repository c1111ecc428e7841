from .collection import Collection, Record, RECORD_COLLECTIONS
from .save_result import Backend, NotificationCategory, SaveResult
from .site_settings import DEFAULT_SITE_SETTINGS, default_site_settings, resolve_site_settings
from .store_snapshot import SnapshotSource, StoreSnapshot

__all__ = [
    "Collection",
    "Record",
    "RECORD_COLLECTIONS",
    "Backend",
    "NotificationCategory",
    "SaveResult",
    "DEFAULT_SITE_SETTINGS",
    "default_site_settings",
    "resolve_site_settings",
    "SnapshotSource",
    "StoreSnapshot",
]
