"""Response cache adapters."""

from .memory import InMemoryResponseCache
from .redis import RedisResponseCache

__all__ = ["InMemoryResponseCache", "RedisResponseCache"]
