"""
Video listings: candidate filtering and ordering.

A listing request is answered in one of three ways:

    ranked  - a keyword search with the default sort (newest first). All
              candidates are loaded and ordered by search relevance.
    eager   - tag filtered listings without a keyword, and seeded random
              listings. All candidates are loaded and ordered in memory.
    direct  - everything else. The database orders, offsets and limits.
"""

import enum
import logging
import random
from collections.abc import Sequence

from sqlalchemy import Select, and_, distinct, func, or_, select
from sqlalchemy.orm import Session, selectinload

from hidevideo.api.search.keywords import tokenize
from hidevideo.api.search.ranking import paginate, search_rank
from hidevideo.api.search.types import (
    SearchRankParams,
    VideoPage,
    VideoQueryParams,
    VideoWithTags,
    positive_int,
)
from hidevideo.common import settings
from hidevideo.common.db.models import Tag, Video, video_tags

logger = logging.getLogger(__name__)


class ListingPath(str, enum.Enum):
    RANKED = "ranked"
    EAGER = "eager"
    DIRECT = "direct"


def folder_filter(folder_path: str):
    """Match files directly inside `folder_path`, not in its subfolders."""
    folder = folder_path.rstrip("/")
    depth = func.length(Video.filepath) - func.length(
        func.replace(Video.filepath, "/", "")
    )
    return and_(
        Video.filepath.startswith(folder + "/", autoescape=True),
        depth == folder.count("/") + 1,
    )


def tag_filter(tag_ids: Sequence[int]):
    """Match videos carrying every one of `tag_ids`."""
    tagged = (
        select(video_tags.c.video_id)
        .join(Tag, Tag.id == video_tags.c.tag_id)
        .where(video_tags.c.tag_id.in_(tag_ids), Tag.deleted_at.is_(None))
        .group_by(video_tags.c.video_id)
        .having(func.count(distinct(video_tags.c.tag_id)) == len(set(tag_ids)))
    )
    return Video.id.in_(tagged)


def as_video_id(word: str) -> int | None:
    if word.isascii() and word.isdigit():
        return positive_int(word)
    return None


def keyword_filters(keyword: str) -> list:
    """
    Narrow the candidates to videos mentioning every keyword.

    A lone number is taken as a video id. Otherwise each word must appear in
    the filename or in one of the video's tag names.
    """
    words = tokenize(keyword)
    if len(words) == 1 and (video_id := as_video_id(words[0])):
        return [Video.id == video_id]

    filters = []
    for word in words:
        tagged = (
            select(video_tags.c.video_id)
            .join(Tag, Tag.id == video_tags.c.tag_id)
            .where(Tag.name.icontains(word, autoescape=True), Tag.deleted_at.is_(None))
        )
        filters.append(
            or_(Video.filename.icontains(word, autoescape=True), Video.id.in_(tagged))
        )
    return filters


def build_candidate_query(params: VideoQueryParams) -> Select:
    query = select(Video).where(Video.deleted_at.is_(None))
    if params.library_ids:
        query = query.where(Video.library_id.in_(params.library_ids))
    if params.folder_path:
        query = query.where(folder_filter(params.folder_path))
    if params.tag_ids:
        query = query.where(tag_filter(params.tag_ids))
    if params.keyword:
        query = query.where(*keyword_filters(params.keyword))
    return query


def count_candidates(session: Session, query: Select) -> int:
    return session.scalar(select(func.count()).select_from(query.subquery())) or 0


def load_candidates(session: Session, query: Select) -> list[Video]:
    """Load the whole candidate set with tags, in a stable (id) order."""
    return list(
        session.scalars(query.options(selectinload(Video.tags)).order_by(Video.id))
    )


def choose_path(params: VideoQueryParams) -> ListingPath:
    if params.keyword and params.is_default_sort:
        return ListingPath.RANKED
    if params.tag_ids and not params.keyword:
        return ListingPath.EAGER
    # Seeded random listings must be reproducible, which the database's
    # RANDOM() is not
    if params.is_random and params.random_seed:
        return ListingPath.EAGER
    return ListingPath.DIRECT


def shuffle_videos(videos: Sequence[Video], seed: int | None = None) -> list[Video]:
    """
    Shuffle a copy of `videos`.

    The same positive seed always gives the same order for the same input.
    Without a seed the order is random, unless SHUFFLE_WITHOUT_SEED is off,
    in which case the input order is kept.
    """
    shuffled = list(videos)
    if seed:
        random.Random(seed).shuffle(shuffled)
    elif settings.SHUFFLE_WITHOUT_SEED:
        random.shuffle(shuffled)
    return shuffled


def sort_videos(videos: Sequence[Video], sort_by: str, order: str) -> list[Video]:
    return sorted(
        videos,
        key=lambda video: (getattr(video, sort_by), video.id),
        reverse=order == "desc",
    )


def order_clauses(params: VideoQueryParams) -> list:
    if params.is_random:
        return [func.random()]
    column = getattr(Video, params.sort_by)
    if params.order == "desc":
        return [column.desc(), Video.id.desc()]
    return [column.asc(), Video.id.asc()]


def fetch_videos(session: Session, params: VideoQueryParams) -> list[Video]:
    """Return the requested page of videos, in listing order."""
    query = build_candidate_query(params)
    path = choose_path(params)
    logger.debug(f"Listing videos via {path.value} path: {params}")

    if path == ListingPath.DIRECT:
        page = query.options(selectinload(Video.tags)).order_by(*order_clauses(params))
        return list(session.scalars(page.offset(params.offset).limit(params.page_size)))

    candidates = load_candidates(session, query)
    if path == ListingPath.RANKED:
        ordered = search_rank(
            SearchRankParams(
                query=params.keyword,
                videos=[VideoWithTags.from_video(video) for video in candidates],
            )
        )
    elif params.is_random:
        ordered = shuffle_videos(candidates, params.random_seed)
    else:
        ordered = sort_videos(candidates, params.sort_by, params.order)

    return paginate(ordered, params.page, params.page_size)


def list_videos(session: Session, params: VideoQueryParams) -> VideoPage:
    total = count_candidates(session, build_candidate_query(params))
    videos = fetch_videos(session, params)
    return VideoPage.build(videos, total, params)
