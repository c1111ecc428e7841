"""Domain entity — the outcome of a save, shaped for user notifications."""

from dataclasses import dataclass
from enum import Enum


class NotificationCategory(str, Enum):
    """Severity shown to the user after a save."""

    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


class Backend(str, Enum):
    """Backend a save ended up on."""

    REMOTE = "remote"
    LOCAL = "local"
    NONE = "none"


@dataclass(frozen=True)
class SaveResult:
    """Success flag plus a human-readable notification.

    ``message`` never carries raw backend error text.
    """

    success: bool
    backend: Backend
    category: NotificationCategory
    message: str

    @classmethod
    def remote_ok(cls, collection: str) -> "SaveResult":
        return cls(True, Backend.REMOTE, NotificationCategory.SUCCESS, f"{_label(collection)} saved successfully.")

    @classmethod
    def local_ok(cls, collection: str, *, after_remote_failure: bool) -> "SaveResult":
        if after_remote_failure:
            return cls(
                True,
                Backend.LOCAL,
                NotificationCategory.WARNING,
                f"{_label(collection)} saved to local storage; the remote database is unavailable.",
            )
        return cls(True, Backend.LOCAL, NotificationCategory.SUCCESS, f"{_label(collection)} saved successfully.")

    @classmethod
    def failed(cls, collection: str) -> "SaveResult":
        return cls(
            False,
            Backend.NONE,
            NotificationCategory.ERROR,
            f"Failed to save {_label(collection).lower()}. Please try again.",
        )

    @classmethod
    def unchanged(cls, collection: str) -> "SaveResult":
        return cls(True, Backend.NONE, NotificationCategory.SUCCESS, f"{_label(collection)} unchanged.")


def _label(collection: str) -> str:
    return collection.replace("_", " ").capitalize()
