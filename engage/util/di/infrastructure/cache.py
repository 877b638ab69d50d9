"""Response cache infrastructure providers."""

from collections.abc import AsyncIterator

from dishka import Scope, provide

from engage.adapter.cache import RedisResponseCache
from engage.config import CacheSettings
from engage.domain.service import ResponseCache
from engage.util.di.base import ProviderBase
from engage.util.observability import instrument_redis


class CacheProvider(ProviderBase):
    """Response cache component base."""

    __mock_component__ = "cache"


class ProdCacheProvider(CacheProvider):
    """Production cache provider backed by Redis."""

    __is_mock__ = False

    @provide(scope=Scope.APP)
    async def get_response_cache(
        self, cache_settings: CacheSettings
    ) -> AsyncIterator[ResponseCache]:
        """Provide the Redis response cache, closed with the container."""
        instrument_redis()
        cache = RedisResponseCache.from_settings(cache_settings)
        yield cache
        await cache.close()
