"""SQLAlchemy ORM models — one table per site collection plus the settings row."""

from datetime import datetime, timezone

from sqlalchemy import DateTime, Integer, JSON
from sqlalchemy.orm import Mapped, mapped_column

from portfolio.domain.entities import Collection
from portfolio.infrastructure.database.base import Base

SETTINGS_ROW_ID = 1


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class RecordColumns:
    """Columns shared by every record table.

    ``data`` holds the collection-specific fields, which the store never inspects.
    """

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    data: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, nullable=False, index=True,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, nullable=False,
    )

    def __repr__(self) -> str:
        return f"<{type(self).__name__}(id={self.id})>"


class DeveloperModel(RecordColumns, Base):
    __tablename__ = "developers"


class ProjectModel(RecordColumns, Base):
    __tablename__ = "projects"


class WebsiteProjectModel(RecordColumns, Base):
    __tablename__ = "website_projects"


class BlogPostModel(RecordColumns, Base):
    __tablename__ = "blog_posts"


class MessageModel(RecordColumns, Base):
    __tablename__ = "messages"


class SettingsModel(Base):
    """ORM model — the single row of the 'settings' table (id is always 1)."""

    __tablename__ = "settings"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    data: Mapped[dict] = mapped_column(JSON, nullable=False, default=dict)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, nullable=False,
    )


RECORD_MODELS: dict[Collection, type[RecordColumns]] = {
    Collection.DEVELOPERS: DeveloperModel,
    Collection.PROJECTS: ProjectModel,
    Collection.WEBSITE_PROJECTS: WebsiteProjectModel,
    Collection.BLOG_POSTS: BlogPostModel,
    Collection.MESSAGES: MessageModel,
}
