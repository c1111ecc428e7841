from .postgrest_remote_backend import PostgrestRemoteBackend

__all__ = ["PostgrestRemoteBackend"]
