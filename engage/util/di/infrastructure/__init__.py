"""Infrastructure DI providers."""

from engage.util.di.infrastructure.cache import CacheProvider, ProdCacheProvider
from engage.util.di.infrastructure.persistence import (
    PersistenceProvider,
    ProdPersistenceProvider,
)

__all__ = [
    "CacheProvider",
    "PersistenceProvider",
    "ProdCacheProvider",
    "ProdPersistenceProvider",
]
