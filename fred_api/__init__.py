"""Download FRED economic data, caching raw responses so repeated requests avoid the network.

``FRED_API_KEY`` holds the API key and ``FRED_CACHE`` the cache directory;
both can also be supplied directly.
"""

from fred_api.config import Settings, fred_cache
from fred_api.data import (
    FieldIter,
    FredFetcher,
    ResponseCache,
    cache_request,
    observations_frame,
    send_request,
)
from fred_api.models import Lookup, RequestSpec, build_request

__all__ = [
    "FieldIter",
    "FredFetcher",
    "Lookup",
    "RequestSpec",
    "ResponseCache",
    "Settings",
    "build_request",
    "cache_request",
    "fred_cache",
    "observations_frame",
    "send_request",
]
