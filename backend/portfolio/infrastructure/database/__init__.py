from .base import Base
from .session import build_engine, build_session_factory
from .models import RECORD_MODELS, SettingsModel

__all__ = [
    "Base",
    "build_engine",
    "build_session_factory",
    "RECORD_MODELS",
    "SettingsModel",
]
