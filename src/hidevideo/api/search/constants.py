"""
Constants for search ranking.
"""

# Base keyword weights. The first query token is the anchor term.
ANCHOR_KEYWORD_WEIGHT = 1.2
KEYWORD_WEIGHT = 1.0

# Document frequency thresholds (fraction of candidates containing a token)
COMMON_FREQUENCY = 0.20
RARE_FREQUENCY = 0.05
COMMON_WEIGHT_FACTOR = 0.8
RARE_WEIGHT_FACTOR = 1.5

# Title matching
TITLE_MATCH_SCORE = 10.0
# Every TITLE_DECAY_SPAN characters into the filename costs TITLE_DECAY_STEP
TITLE_DECAY_SPAN = 10
TITLE_DECAY_STEP = 0.05
TITLE_DECAY_MIN = 0.5
# Matches starting within the first TITLE_DECAY_SPAN characters get this on top
TITLE_EARLY_MATCH_BONUS = 1.1

# Tag matching, counted once per keyword however many tags match
TAG_MATCH_SCORE = 5.0

# Added when one keyword hits both the filename and a tag
DOUBLE_HIT_BONUS = 3.0

# Sortable columns exposed to callers, besides "random"
SORT_COLUMNS = frozenset(
    {"created_at", "filename", "play_count", "rating", "duration", "id"}
)
RANDOM_SORT = "random"
DEFAULT_SORT_BY = "created_at"
DEFAULT_ORDER = "desc"
