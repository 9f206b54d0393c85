"""
Database models for the video catalog.
"""

from hidevideo.common.db.models.base import Base
from hidevideo.common.db.models.videos import (
    Tag,
    Video,
    VideoLibrary,
    video_tags,
)

__all__ = [
    "Base",
    "Tag",
    "Video",
    "VideoLibrary",
    "video_tags",
]
