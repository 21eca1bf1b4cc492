"""Test fakes."""

from tests.fakes.cache import DroppingCache, FailingCache, InMemoryCache
from tests.fakes.http import RecordingTransport

__all__ = ["DroppingCache", "FailingCache", "InMemoryCache", "RecordingTransport"]
