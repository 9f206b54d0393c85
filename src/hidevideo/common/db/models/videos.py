"""Database models for video libraries, videos and tags."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import (
    Column,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Table,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from hidevideo.common.db.models.base import Base


video_tags = Table(
    "video_tags",
    Base.metadata,
    Column(
        "video_id",
        Integer,
        ForeignKey("videos.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "tag_id",
        Integer,
        ForeignKey("tags.id", ondelete="CASCADE"),
        primary_key=True,
    ),
)


class VideoLibrary(Base):
    """A directory tree that was scanned for videos."""

    __tablename__ = "video_libraries"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    path: Mapped[str | None] = mapped_column(String(500))
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.now)
    deleted_at: Mapped[datetime | None] = mapped_column(DateTime, index=True)

    videos: Mapped[list[Video]] = relationship("Video", back_populates="library")

    def __repr__(self) -> str:
        return f"<VideoLibrary(id={self.id}, name={self.name})>"


class Tag(Base):
    __tablename__ = "tags"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)
    sort_order: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.now)
    deleted_at: Mapped[datetime | None] = mapped_column(DateTime, index=True)

    videos: Mapped[list[Video]] = relationship(
        "Video", secondary=video_tags, back_populates="tags"
    )

    def __repr__(self) -> str:
        return f"<Tag(id={self.id}, name={self.name})>"


class Video(Base):
    """
    A single video file on disk.

    `play_count` and `created_at` feed the search ranking; the remaining media
    columns are filled in by the scanner.
    """

    __tablename__ = "videos"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    library_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("video_libraries.id", ondelete="CASCADE"),
        nullable=False,
    )
    filename: Mapped[str] = mapped_column(String(255), nullable=False)
    filepath: Mapped[str] = mapped_column(String(500), nullable=False)

    # Media info
    duration: Mapped[float] = mapped_column(Float, default=0, nullable=False)
    width: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    height: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    codec: Mapped[str | None] = mapped_column(String(50))

    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.now, nullable=False
    )
    play_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    rating: Mapped[float] = mapped_column(Float, default=0, nullable=False)
    cover_path: Mapped[str | None] = mapped_column(String(500))
    icon_path: Mapped[str | None] = mapped_column(String(500))
    deleted_at: Mapped[datetime | None] = mapped_column(DateTime)

    library: Mapped[VideoLibrary] = relationship(
        "VideoLibrary", back_populates="videos"
    )
    tags: Mapped[list[Tag]] = relationship(
        "Tag", secondary=video_tags, back_populates="videos"
    )

    __table_args__ = (
        Index("ix_videos_library_id", "library_id"),
        Index("ix_videos_deleted_at", "deleted_at"),
    )

    def __repr__(self) -> str:
        return f"<Video(id={self.id}, filename={self.filename})>"

    @property
    def tag_names(self) -> list[str]:
        return [tag.name for tag in self.tags if tag.deleted_at is None]
