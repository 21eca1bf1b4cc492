"""Cache fakes for tests."""

from __future__ import annotations

import sqlite3
from dataclasses import dataclass, field

from fred_api.exceptions import StorageError


def _empty_store() -> dict[bytes, bytes]:
    return {}


@dataclass
class InMemoryCache:
    """In-memory cache for testing."""

    _store: dict[bytes, bytes] = field(default_factory=_empty_store)

    def get(self, key: bytes) -> bytes | None:
        return self._store.get(key)

    def contains_key(self, key: bytes) -> bool:
        return key in self._store

    def insert_if_absent(self, key: bytes, value: bytes) -> None:
        self._store.setdefault(key, value)

    def __len__(self) -> int:
        return len(self._store)


@dataclass
class DroppingCache(InMemoryCache):
    """Cache that acknowledges writes but never stores them."""

    def insert_if_absent(self, key: bytes, value: bytes) -> None:
        return None


@dataclass
class FailingCache(InMemoryCache):
    """Cache whose every operation fails like a broken store."""

    def get(self, key: bytes) -> bytes | None:
        raise StorageError(sqlite3.OperationalError("disk I/O error"))

    def contains_key(self, key: bytes) -> bool:
        raise StorageError(sqlite3.OperationalError("disk I/O error"))

    def insert_if_absent(self, key: bytes, value: bytes) -> None:
        raise StorageError(sqlite3.OperationalError("disk I/O error"))
