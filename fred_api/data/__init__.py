"""Data fetching and caching."""

from .cache import ResponseCache
from .fields import FieldIter
from .fred_fetcher import FredFetcher, cache_request, send_request
from .observations import observations_frame

__all__ = [
    "FieldIter",
    "FredFetcher",
    "ResponseCache",
    "cache_request",
    "observations_frame",
    "send_request",
]
