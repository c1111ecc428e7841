from .record_models import (
    RECORD_MODELS,
    SETTINGS_ROW_ID,
    BlogPostModel,
    DeveloperModel,
    MessageModel,
    ProjectModel,
    SettingsModel,
    WebsiteProjectModel,
)

__all__ = [
    "RECORD_MODELS",
    "SETTINGS_ROW_ID",
    "BlogPostModel",
    "DeveloperModel",
    "MessageModel",
    "ProjectModel",
    "SettingsModel",
    "WebsiteProjectModel",
]
