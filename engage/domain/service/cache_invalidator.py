"""Response cache port and post-mutation invalidation.

Read endpoints for posts and comments are cached by exact request path
(including the query string). Every mutation that changes what those
endpoints return deletes the affected keys. Invalidation is best effort:
a cache outage is logged and never fails the mutation that triggered it.
"""

from abc import ABC, abstractmethod
from typing import Optional

import logfire

from engage.config import CacheSettings
from engage.domain.error import CacheUnavailableError
from engage.domain.value import PostId, Slug

from .base import Service


class ResponseCache(ABC):
    """Key-value store for serialized responses.

    Implementations raise ``CacheUnavailableError`` when the backing store
    cannot be reached.
    """

    @abstractmethod
    async def get(self, key: str) -> Optional[bytes]:
        """Return the cached value for ``key``, or None on a miss."""
        pass

    @abstractmethod
    async def set(self, key: str, value: bytes, ttl_seconds: int) -> None:
        """Store ``value`` under ``key`` for ``ttl_seconds``."""
        pass

    @abstractmethod
    async def delete(self, *keys: str) -> int:
        """Delete exact keys. Returns the number of keys removed."""
        pass

    @abstractmethod
    async def delete_pattern(self, pattern: str) -> int:
        """Delete every key matching a glob ``pattern``.

        Returns the number of keys removed.
        """
        pass


class CacheInvalidator(Service):
    """Deletes cached read responses affected by a mutation."""

    def __init__(self, cache: ResponseCache, cache_settings: CacheSettings) -> None:
        """Initialize cache invalidator.

        Args:
            cache: Response cache
            cache_settings: Cache settings (key prefix, enabled flag)
        """
        self.cache = cache
        self.cache_settings = cache_settings

    def key_for(self, path: str) -> str:
        """Cache key for a request path (with its query string, if any)."""
        return f"{self.cache_settings.key_prefix}{path}"

    async def invalidate_post(self, post_id: PostId, slug: Optional[Slug] = None) -> None:
        """Invalidate the post listing and everything shown for one post.

        Covers the listing (every page and sort order), the post resource by
        ID and by slug, and the post's comment listing, each with any query
        string it was requested with.

        Args:
            post_id: ID of the mutated post
            slug: Slug of the mutated post, if known
        """
        with logfire.span("cache_invalidator.invalidate_post", post_id=str(post_id)):
            paths = ["/posts", *self._post_paths(post_id, slug)]
            paths.append(f"/comments/post/{post_id}")
            await self._delete(paths)

    async def invalidate_comments(
        self, post_id: PostId, slug: Optional[Slug] = None
    ) -> None:
        """Invalidate a post's comment listing and the post resource.

        Args:
            post_id: ID of the post the comments belong to
            slug: Slug of that post, if known
        """
        with logfire.span(
            "cache_invalidator.invalidate_comments", post_id=str(post_id)
        ):
            paths = [f"/comments/post/{post_id}", *self._post_paths(post_id, slug)]
            await self._delete(paths)

    @staticmethod
    def _post_paths(post_id: PostId, slug: Optional[Slug]) -> list[str]:
        paths = [f"/posts/{post_id}"]
        if slug is not None:
            paths.append(f"/posts/{slug.root}")
        return paths

    async def _delete(self, paths: list[str]) -> None:
        """Delete the keys of ``paths`` and of their query-string variants."""
        if not self.cache_settings.enabled:
            return

        keys = [self.key_for(path) for path in paths]
        # "[?]" is a literal "?" in both Redis and fnmatch globs
        patterns = [f"{key}[?]*" for key in keys]
        try:
            removed = await self.cache.delete(*keys)
            for pattern in patterns:
                removed += await self.cache.delete_pattern(pattern)
        except CacheUnavailableError as e:
            # Entries expire on their own after the TTL
            logfire.warn("Cache invalidation skipped", keys=keys, error=str(e))
            return

        logfire.debug("Cache invalidated", keys=keys, removed=removed)
