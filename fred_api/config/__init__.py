"""Configuration."""

from fred_api.config.settings import (
    API_KEY_VAR,
    BASE_URL,
    CACHE_DB_NAME,
    CACHE_DIR_VAR,
    Settings,
    fred_cache,
)

__all__ = [
    "API_KEY_VAR",
    "BASE_URL",
    "CACHE_DB_NAME",
    "CACHE_DIR_VAR",
    "Settings",
    "fred_cache",
]
