"""Domain-specific exceptions — framework-independent."""


class StoreError(Exception):
    """Base class for entity store failures."""


class EntityNotFoundError(StoreError):
    """Raised when a requested entity does not exist."""

    def __init__(self, entity_type: str, entity_id: int | str):
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(f"{entity_type} with id '{entity_id}' not found")


class UnknownCollectionError(StoreError):
    """Raised when a collection name is not one the store serves."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unknown collection '{name}'")


class MalformedRecordError(StoreError):
    """Raised when a record cannot be saved as given (missing or invalid id).

    Always raised before any backend is touched.
    """

    def __init__(self, collection: str, reason: str):
        self.collection = collection
        self.reason = reason
        super().__init__(f"Malformed {collection} record: {reason}")


class RemoteBackendError(StoreError):
    """Raised by a remote backend adapter when a call fails.

    The store treats every subclass the same way: fall back to local storage.
    """

    def __init__(self, operation: str, collection: str, detail: str = ""):
        self.operation = operation
        self.collection = collection
        self.detail = detail
        message = f"Remote {operation} on '{collection}' failed"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class RemoteUnavailableError(RemoteBackendError):
    """The remote service could not be reached (connection, auth or timeout)."""


class RemoteReadError(RemoteBackendError):
    """The remote service rejected a read."""


class RemoteWriteConflictError(RemoteBackendError):
    """The remote service rejected a write (conflict or any per-record error)."""


class LocalStorageError(StoreError):
    """Serialization or storage failure in the local backend."""

    def __init__(self, key: str, detail: str):
        self.key = key
        self.detail = detail
        super().__init__(f"Local storage write for '{key}' failed: {detail}")
