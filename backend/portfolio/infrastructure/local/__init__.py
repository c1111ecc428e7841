from .json_local_backend import JsonFileLocalBackend

__all__ = ["JsonFileLocalBackend"]
