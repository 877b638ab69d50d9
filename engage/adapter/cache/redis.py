"""Redis-backed response cache."""

from typing import Optional

import logfire
import redis.asyncio as redis
from redis.exceptions import RedisError

from engage.config import CacheSettings
from engage.domain.error import CacheUnavailableError
from engage.domain.service.cache_invalidator import ResponseCache


class RedisResponseCache(ResponseCache):
    """ResponseCache on top of a shared Redis connection pool.

    Every Redis failure surfaces as ``CacheUnavailableError``; callers
    decide whether that is fatal.
    """

    def __init__(self, client: redis.Redis) -> None:
        """Initialize the cache.

        Args:
            client: Async Redis client (owns the connection pool)
        """
        self.client = client

    @classmethod
    def from_settings(cls, settings: CacheSettings) -> "RedisResponseCache":
        """Create a cache with its own connection pool."""
        client = redis.from_url(
            settings.url,
            socket_connect_timeout=settings.socket_timeout,
            socket_timeout=settings.socket_timeout,
        )
        return cls(client)

    async def get(self, key: str) -> Optional[bytes]:
        """Return the cached value for ``key``, or None on a miss."""
        try:
            return await self.client.get(key)
        except RedisError as e:
            raise CacheUnavailableError(f"Cache read failed: {e}") from e

    async def set(self, key: str, value: bytes, ttl_seconds: int) -> None:
        """Store ``value`` under ``key`` for ``ttl_seconds``."""
        try:
            await self.client.set(key, value, ex=ttl_seconds)
        except RedisError as e:
            raise CacheUnavailableError(f"Cache write failed: {e}") from e

    async def delete(self, *keys: str) -> int:
        """Delete exact keys."""
        if not keys:
            return 0
        try:
            return await self.client.delete(*keys)
        except RedisError as e:
            raise CacheUnavailableError(f"Cache delete failed: {e}") from e

    async def delete_pattern(self, pattern: str) -> int:
        """Delete every key matching ``pattern`` using SCAN (avoids blocking KEYS)."""
        try:
            keys = [key async for key in self.client.scan_iter(match=pattern)]
            if not keys:
                return 0
            return await self.client.delete(*keys)
        except RedisError as e:
            raise CacheUnavailableError(f"Cache delete failed: {e}") from e

    async def close(self) -> None:
        """Close the connection pool."""
        await self.client.aclose()
        logfire.info("Redis connection closed")
