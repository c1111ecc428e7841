from .local_backend import LocalBackend
from .remote_backend import RemoteBackend

__all__ = [
    "LocalBackend",
    "RemoteBackend",
]
