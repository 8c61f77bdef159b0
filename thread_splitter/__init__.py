# Auto-register passes on package import (e.g., when importing any submodule)
from . import passes  # noqa: F401
from .segmenter import (
    MAX_SEGMENT_LENGTH,
    estimate_tweet_count,
    is_valid_tweet_length,
    split_into_threads,
)

__all__: list[str] = [
    "MAX_SEGMENT_LENGTH",
    "estimate_tweet_count",
    "is_valid_tweet_length",
    "split_into_threads",
]
