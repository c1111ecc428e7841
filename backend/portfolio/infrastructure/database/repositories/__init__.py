from .sql_remote_backend import SQLAlchemyRemoteBackend

__all__ = [
    "SQLAlchemyRemoteBackend",
]
