"""Bounded, time-expiring response cache."""

from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Protocol


class Cache(Protocol):
    """Cache interface for chat responses."""

    def get(self, key: str) -> str | None:
        """Return a cached value if present and not expired."""

    def set(self, key: str, value: str) -> None:
        """Store a value under the cache's TTL and size bound."""


@dataclass
class _CacheEntry:
    value: str
    expires_at: datetime


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


class ResponseCache(Cache):
    """In-memory cache with a size bound and a fixed TTL per entry.

    Eviction follows insertion order: once the bound is exceeded the
    oldest-inserted entry is dropped, independent of how recently it was read.
    Every entry expires ``ttl_seconds`` after it was first stored. Storing a
    new value for a key that is still live keeps the earlier deadline.
    """

    def __init__(
        self,
        max_entries: int = 100,
        ttl_seconds: int = 900,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self.max_entries = max_entries
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: dict[str, _CacheEntry] = {}

    def __len__(self) -> int:
        self._purge_expired()
        return len(self._entries)

    def keys(self) -> list[str]:
        """Return live keys, oldest insertion first."""
        self._purge_expired()
        return list(self._entries)

    def get(self, key: str) -> str | None:
        """Return a cached value if it hasn't expired."""
        self._purge_expired()
        entry = self._entries.get(key)
        if entry is None:
            return None
        return entry.value

    def set(self, key: str, value: str) -> None:
        """Store a value, evicting the oldest insertion when over the bound."""
        self._purge_expired()
        expires_at = self._clock() + timedelta(seconds=self.ttl_seconds)
        current = self._entries.get(key)
        if current is not None:
            expires_at = min(expires_at, current.expires_at)
        self._entries[key] = _CacheEntry(value=value, expires_at=expires_at)
        while len(self._entries) > self.max_entries:
            oldest = next(iter(self._entries))
            del self._entries[oldest]

    def _purge_expired(self) -> None:
        now = self._clock()
        expired = [
            key for key, entry in self._entries.items() if now >= entry.expires_at
        ]
        for key in expired:
            del self._entries[key]
