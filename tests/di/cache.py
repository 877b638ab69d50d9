"""Mock response cache provider for testing."""

from dishka import Scope, alias, provide

from engage.adapter.cache import InMemoryResponseCache
from engage.domain.service import ResponseCache
from engage.util.di.infrastructure.cache import CacheProvider


class MockCacheProvider(CacheProvider):
    """In-process cache; tests can flip ``available`` to simulate an outage."""

    __is_mock__ = True

    @provide(scope=Scope.APP)
    def get_memory_cache(self) -> InMemoryResponseCache:
        """Provide the in-memory cache."""
        return InMemoryResponseCache()

    response_cache = alias(source=InMemoryResponseCache, provides=ResponseCache)
