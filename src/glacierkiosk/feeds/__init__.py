"""
Feed retrieval for glacierkiosk.
"""

from .exceptions import FeedConnectionError, FeedError, FeedStatusError
from .fetch import (
    DEFAULT_CUMULATIVE_URL,
    DEFAULT_DETAIL_URL,
    FeedBundle,
    FeedFetcher,
    FetchFailure,
    FetchResult,
    FetchSuccess,
    load_into,
)

__all__ = [
    "DEFAULT_CUMULATIVE_URL",
    "DEFAULT_DETAIL_URL",
    "FeedBundle",
    "FeedConnectionError",
    "FeedError",
    "FeedFetcher",
    "FeedStatusError",
    "FetchFailure",
    "FetchResult",
    "FetchSuccess",
    "load_into",
]
