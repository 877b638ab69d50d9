"""In-process response cache for tests and single-process development."""

import time
from fnmatch import fnmatchcase
from typing import Optional

from engage.domain.error import CacheUnavailableError
from engage.domain.service.cache_invalidator import ResponseCache


class InMemoryResponseCache(ResponseCache):
    """ResponseCache backed by a dict, with TTL expiry on read.

    Set ``available`` to False to simulate an outage: every call then
    raises ``CacheUnavailableError`` like the Redis adapter does.
    """

    def __init__(self) -> None:
        self._entries: dict[str, tuple[bytes, float]] = {}
        self.available = True

    def _check(self) -> None:
        if not self.available:
            raise CacheUnavailableError("Cache is unavailable")

    async def get(self, key: str) -> Optional[bytes]:
        """Return the cached value for ``key``, or None on a miss."""
        self._check()
        entry = self._entries.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if time.monotonic() >= expires_at:
            del self._entries[key]
            return None
        return value

    async def set(self, key: str, value: bytes, ttl_seconds: int) -> None:
        """Store ``value`` under ``key`` for ``ttl_seconds``."""
        self._check()
        self._entries[key] = (value, time.monotonic() + ttl_seconds)

    async def delete(self, *keys: str) -> int:
        """Delete exact keys."""
        self._check()
        return sum(1 for key in keys if self._entries.pop(key, None) is not None)

    async def delete_pattern(self, pattern: str) -> int:
        """Delete every key matching a glob pattern."""
        self._check()
        matches = [key for key in self._entries if fnmatchcase(key, pattern)]
        for key in matches:
            del self._entries[key]
        return len(matches)

    def keys(self) -> list[str]:
        """Keys currently stored (expired entries included)."""
        return list(self._entries)
