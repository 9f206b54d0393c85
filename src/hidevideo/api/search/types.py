from dataclasses import dataclass, field
from datetime import datetime
import logging
import math
import re
from typing import Any, Optional, cast

from pydantic import BaseModel, Field, field_validator

from hidevideo.api.search.constants import (
    DEFAULT_ORDER,
    DEFAULT_SORT_BY,
    RANDOM_SORT,
    SORT_COLUMNS,
)
from hidevideo.common.db.models import Video
from hidevideo.common import settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class KeywordInfo:
    word: str
    weight: float
    is_common: bool = False
    is_rare: bool = False


@dataclass
class VideoWithTags:
    video: Video
    tag_names: list[str] = field(default_factory=list)

    @classmethod
    def from_video(cls, video: Video) -> "VideoWithTags":
        return cls(video=video, tag_names=video.tag_names)


@dataclass
class ScoredVideo:
    video: Video
    score: float
    # Unix seconds, used as the tie-breaker
    created_at: int


@dataclass
class SearchRankParams:
    query: str
    videos: list[VideoWithTags] = field(default_factory=list)


# Ids, pages and seeds are unsigned 32-bit numbers; larger values count as invalid
MAX_INT = 2**32 - 1


def positive_int(value: Any) -> int | None:
    """Parse `value` as an integer in [1, MAX_INT], returning None otherwise."""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = int(str(value).strip())
    except ValueError:
        return None
    return number if 0 < number <= MAX_INT else None


def parse_ids(value: Any) -> list[int]:
    """Accept "1,2,3" or an iterable of ids, silently skipping invalid items."""
    if value is None or value == "":
        return []
    if isinstance(value, str):
        value = value.split(",")
    elif isinstance(value, int):
        value = [value]
    return [parsed for item in value if (parsed := positive_int(item)) is not None]


def cover_url(cover_path: str | None) -> str | None:
    if not cover_path:
        return None
    filename = re.split(r"[\\/]", cover_path)[-1]
    return settings.COVERS_URL_PREFIX + filename


class VideoQueryParams(BaseModel):
    page: int = 1
    page_size: int = Field(default_factory=lambda: settings.DEFAULT_PAGE_SIZE)
    library_ids: list[int] = Field(default_factory=list)
    tag_ids: list[int] = Field(default_factory=list)
    keyword: str = ""
    folder_path: str = ""
    sort_by: str = DEFAULT_SORT_BY
    order: str = DEFAULT_ORDER
    random_seed: Optional[int] = None

    @field_validator("page", mode="before")
    @classmethod
    def default_page(cls, value: Any) -> int:
        return positive_int(value) or 1

    @field_validator("page_size", mode="before")
    @classmethod
    def default_page_size(cls, value: Any) -> int:
        return positive_int(value) or settings.DEFAULT_PAGE_SIZE

    @field_validator("library_ids", "tag_ids", mode="before")
    @classmethod
    def split_ids(cls, value: Any) -> list[int]:
        return parse_ids(value)

    @field_validator("keyword", "folder_path", mode="before")
    @classmethod
    def strip_text(cls, value: Any) -> str:
        return (value or "").strip()

    @field_validator("random_seed", mode="before")
    @classmethod
    def drop_invalid_seed(cls, value: Any) -> int | None:
        if value not in (None, "") and positive_int(value) is None:
            logger.debug(f"Ignoring invalid random seed: {value!r}")
        return positive_int(value)

    @field_validator("sort_by", mode="before")
    @classmethod
    def check_sort_by(cls, value: Any) -> str:
        value = str(value or DEFAULT_SORT_BY)
        if value != RANDOM_SORT and value not in SORT_COLUMNS:
            raise ValueError(f"Cannot sort by {value!r}")
        return value

    @field_validator("order", mode="before")
    @classmethod
    def check_order(cls, value: Any) -> str:
        order = str(value or DEFAULT_ORDER).lower()
        if order not in ("asc", "desc"):
            raise ValueError(f"Order must be 'asc' or 'desc', got {value!r}")
        return order

    def model_post_init(self, __context) -> None:
        if self.page_size > settings.MAX_PAGE_SIZE:
            object.__setattr__(self, "page_size", settings.MAX_PAGE_SIZE)

    @property
    def is_default_sort(self) -> bool:
        return self.sort_by == DEFAULT_SORT_BY and self.order == DEFAULT_ORDER

    @property
    def is_random(self) -> bool:
        return self.sort_by == RANDOM_SORT

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size


class VideoPayload(BaseModel):
    id: int
    library_id: int
    filename: str
    filepath: str
    duration: float = 0
    width: int = 0
    height: int = 0
    codec: str | None = None
    created_at: datetime | None = None
    play_count: int = 0
    rating: float = 0
    cover_url: str | None = None
    tags: list[str] = Field(default_factory=list)

    @classmethod
    def from_video(cls, video: Video) -> "VideoPayload":
        return cls(
            id=cast(int, video.id),
            library_id=cast(int, video.library_id),
            filename=cast(str, video.filename),
            filepath=cast(str, video.filepath),
            duration=video.duration or 0,
            width=video.width or 0,
            height=video.height or 0,
            codec=video.codec,
            created_at=video.created_at,
            play_count=video.play_count or 0,
            rating=video.rating or 0,
            cover_url=cover_url(video.cover_path),
            tags=video.tag_names,
        )


class VideoPage(BaseModel):
    list: list[VideoPayload]
    total: int
    page: int
    page_size: int
    total_pages: int

    @classmethod
    def build(
        cls, videos: list[Video], total: int, params: VideoQueryParams
    ) -> "VideoPage":
        return cls(
            list=[VideoPayload.from_video(video) for video in videos],
            total=total,
            page=params.page,
            page_size=params.page_size,
            total_pages=math.ceil(total / params.page_size),
        )
