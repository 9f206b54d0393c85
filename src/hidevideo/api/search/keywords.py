"""
Keyword weighting for search ranking.

Each query token gets a weight from its position in the query and from how
many of the candidate videos mention it, either in the filename or in a tag.
"""

import logging
from collections import Counter
from collections.abc import Sequence

from hidevideo.api.search.constants import (
    ANCHOR_KEYWORD_WEIGHT,
    COMMON_FREQUENCY,
    COMMON_WEIGHT_FACTOR,
    KEYWORD_WEIGHT,
    RARE_FREQUENCY,
    RARE_WEIGHT_FACTOR,
)
from hidevideo.api.search.types import KeywordInfo, VideoWithTags

logger = logging.getLogger(__name__)


def tokenize(query: str) -> list[str]:
    return query.split()


def tags_text(tag_names: Sequence[str]) -> str:
    return "".join(" " + tag.lower() for tag in tag_names)


def document_frequencies(
    words: Sequence[str], videos: Sequence[VideoWithTags]
) -> Counter[str]:
    """Count, per lowercased word, the videos whose filename or tags contain it."""
    counts: Counter[str] = Counter()
    distinct = set(words)
    for item in videos:
        title = item.video.filename.lower()
        tags = tags_text(item.tag_names)
        counts.update(word for word in distinct if word in title or word in tags)
    return counts


def keyword_weight(word: str, position: int, frequency: float) -> KeywordInfo:
    weight = ANCHOR_KEYWORD_WEIGHT if position == 0 else KEYWORD_WEIGHT
    if frequency > COMMON_FREQUENCY:
        return KeywordInfo(word, weight * COMMON_WEIGHT_FACTOR, is_common=True)
    if 0 < frequency < RARE_FREQUENCY:
        return KeywordInfo(word, weight * RARE_WEIGHT_FACTOR, is_rare=True)
    return KeywordInfo(word, weight)


def calculate_keyword_weights(
    query: str, videos: Sequence[VideoWithTags]
) -> list[KeywordInfo]:
    """Weight every whitespace separated token of `query`.

    Tokens keep their query order and are not deduplicated, so a repeated
    token is scored once per occurrence. An empty list means there is nothing
    to rank by.
    """
    words = [word.lower() for word in tokenize(query)]
    if not words:
        return []

    total = len(videos)
    counts = document_frequencies(words, videos)

    keywords = [
        keyword_weight(word, position, counts[word] / total if total else 0.0)
        for position, word in enumerate(words)
    ]

    logger.debug(
        f"Keyword weights for {query!r} over {total} videos: "
        + ", ".join(f"{k.word}={k.weight:.2f}" for k in keywords)
    )
    return keywords
