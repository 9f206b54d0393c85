import logging
import math
from collections.abc import Sequence

from hidevideo.api.search.constants import (
    DOUBLE_HIT_BONUS,
    TAG_MATCH_SCORE,
    TITLE_DECAY_MIN,
    TITLE_DECAY_SPAN,
    TITLE_DECAY_STEP,
    TITLE_EARLY_MATCH_BONUS,
    TITLE_MATCH_SCORE,
)
from hidevideo.api.search.types import KeywordInfo, VideoWithTags

logger = logging.getLogger(__name__)


def position_decay(position: int) -> float:
    """Multiplier for a title match starting at character `position`."""
    decay = 1.0 - TITLE_DECAY_STEP * (position // TITLE_DECAY_SPAN)
    return max(decay, TITLE_DECAY_MIN)


def title_score(title: str, keyword: KeywordInfo) -> tuple[float, bool]:
    """Score a keyword against a filename, returning (score, hit)."""
    position = title.lower().find(keyword.word)
    if position < 0:
        return 0.0, False

    score = TITLE_MATCH_SCORE * keyword.weight * position_decay(position)
    if position < TITLE_DECAY_SPAN:
        score *= TITLE_EARLY_MATCH_BONUS
    return score, True


def tag_score(tag_names: Sequence[str], keyword: KeywordInfo) -> float:
    # Only the first matching tag counts
    if any(keyword.word in tag.lower() for tag in tag_names):
        return TAG_MATCH_SCORE * keyword.weight
    return 0.0


def popularity_score(play_count: int) -> float:
    return math.log10(play_count + 1)


def score_video(item: VideoWithTags, keywords: Sequence[KeywordInfo]) -> float:
    """
    Relevance of one video for the weighted keywords.

    Every keyword adds its title and tag scores, plus a bonus when it hits
    both. Popularity is added once at the end, so a video matching nothing
    scores log10(play_count + 1).
    """
    score = 0.0
    for keyword in keywords:
        title, title_hit = title_score(item.video.filename, keyword)
        tags = tag_score(item.tag_names, keyword)
        score += title + tags
        if title_hit and tags > 0:
            score += DOUBLE_HIT_BONUS * keyword.weight

    return score + popularity_score(item.video.play_count or 0)
