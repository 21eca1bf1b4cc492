"""Configuration settings for the FRED client."""

from dataclasses import dataclass, field
from pathlib import Path
import os

from dotenv import load_dotenv

from fred_api.exceptions import CacheLocationError, MissingCredentialError


load_dotenv()


BASE_URL = "https://api.stlouisfed.org/fred"

API_KEY_VAR = "FRED_API_KEY"
CACHE_DIR_VAR = "FRED_CACHE"
CACHE_DB_NAME = "fred_cache.db"


def fred_cache(path: str | Path | None = None) -> Path:
    """Resolve the cache directory from ``path`` or the FRED_CACHE variable."""
    if path is not None:
        return Path(path)
    env_path = os.getenv(CACHE_DIR_VAR)
    if not env_path:
        raise CacheLocationError(CACHE_DIR_VAR)
    return Path(env_path)


def _optional_cache_dir() -> Path | None:
    env_path = os.getenv(CACHE_DIR_VAR)
    return Path(env_path) if env_path else None


@dataclass
class Settings:
    """Application settings."""

    fred_api_key: str = field(default_factory=lambda: os.getenv(API_KEY_VAR, ""))
    cache_dir: Path | None = field(default_factory=_optional_cache_dir)
    db_path: Path | None = field(init=False, default=None)

    def __post_init__(self) -> None:
        if self.cache_dir is not None:
            self.cache_dir = Path(self.cache_dir)
            self.db_path = self.cache_dir / CACHE_DB_NAME

    def validate(self) -> None:
        """Validate required settings."""
        if not self.fred_api_key:
            raise MissingCredentialError(API_KEY_VAR)
        if self.cache_dir is None:
            raise CacheLocationError(CACHE_DIR_VAR)

    def has_api_key(self) -> bool:
        """Check if a FRED API key is configured."""
        return bool(self.fred_api_key)
