from .entity_store import EntityStore, as_collection, utc_now_iso
from .id_allocator import IdAllocator, id_of, next_id

__all__ = [
    "EntityStore",
    "as_collection",
    "utc_now_iso",
    "IdAllocator",
    "id_of",
    "next_id",
]
