"""
Relevance ordering of candidate videos for a keyword search.
"""

import logging
from collections.abc import Sequence
from typing import TypeVar

from hidevideo.api.search.keywords import calculate_keyword_weights
from hidevideo.api.search.scorer import score_video
from hidevideo.api.search.types import ScoredVideo, SearchRankParams
from hidevideo.common.db.models import Video

logger = logging.getLogger(__name__)

T = TypeVar("T")


def timestamp(video: Video) -> int:
    if video.created_at is None:
        return 0
    return int(video.created_at.timestamp())


def search_rank(params: SearchRankParams) -> list[Video]:
    """Order the candidate videos by relevance to the query.

    Videos are sorted by score, newest first among equal scores. An empty
    query, or one with no tokens, leaves the candidates in their input order.
    The returned list always holds exactly the input videos.
    """
    videos = [item.video for item in params.videos]
    if not params.query or not videos:
        return videos

    keywords = calculate_keyword_weights(params.query, params.videos)
    if not keywords:
        return videos

    scored = [
        ScoredVideo(
            video=item.video,
            score=score_video(item, keywords),
            created_at=timestamp(item.video),
        )
        for item in params.videos
    ]
    scored.sort(key=lambda s: (-s.score, -s.created_at))

    if scored:
        logger.debug(
            f"Ranked {len(scored)} videos for {params.query!r}, "
            f"top score {scored[0].score:.3f}"
        )
    return [s.video for s in scored]


def paginate(items: Sequence[T], page: int, page_size: int) -> list[T]:
    """Slice out one page. Pages past the end are empty."""
    if page < 1 or page_size < 1:
        return []
    offset = (page - 1) * page_size
    return list(items[offset : offset + page_size])
