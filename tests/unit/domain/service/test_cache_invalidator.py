"""Unit tests for CacheInvalidator."""

from uuid import uuid4

import pytest

from engage.adapter.cache import InMemoryResponseCache
from engage.config import CacheSettings
from engage.domain.service import CacheInvalidator
from engage.domain.value import PostId, Slug


def _invalidator(enabled: bool = True) -> tuple[CacheInvalidator, InMemoryResponseCache]:
    cache = InMemoryResponseCache()
    return CacheInvalidator(cache, CacheSettings(enabled=enabled)), cache


async def _fill(cache: InMemoryResponseCache, *paths: str) -> None:
    for path in paths:
        await cache.set(f"cache:{path}", b"{}", 300)


class TestInvalidatePost:
    """Tests for invalidate_post."""

    @pytest.mark.asyncio
    async def test_drops_listing_variants_and_post_keys(self):
        """Every listing page and the post's own keys are removed."""
        invalidator, cache = _invalidator()
        post_id = PostId(uuid4())
        other_id = uuid4()
        await _fill(
            cache,
            "/posts",
            "/posts?page=2",
            "/posts?sort=popular&page=1",
            f"/posts/{post_id}",
            f"/posts/{post_id}?ref=home",
            "/posts/budget-thread",
            "/posts/budget-thread?utm_source=mail",
            f"/comments/post/{post_id}",
            f"/comments/post/{post_id}?page=2",
            f"/posts/{other_id}",
            f"/posts/{other_id}?ref=home",
            "/posts/budget-thread-2",
            f"/comments/post/{other_id}",
        )

        await invalidator.invalidate_post(post_id, Slug("budget-thread"))

        assert sorted(cache.keys()) == sorted(
            [
                f"cache:/posts/{other_id}",
                f"cache:/posts/{other_id}?ref=home",
                "cache:/posts/budget-thread-2",
                f"cache:/comments/post/{other_id}",
            ]
        )

    @pytest.mark.asyncio
    async def test_disabled_cache_is_left_alone(self):
        """With caching disabled nothing is deleted."""
        invalidator, cache = _invalidator(enabled=False)
        await _fill(cache, "/posts")

        await invalidator.invalidate_post(PostId(uuid4()))

        assert cache.keys() == ["cache:/posts"]

    @pytest.mark.asyncio
    async def test_outage_is_swallowed(self):
        """An unreachable cache never raises out of invalidation."""
        invalidator, cache = _invalidator()
        cache.available = False

        await invalidator.invalidate_post(PostId(uuid4()))
        await invalidator.invalidate_comments(PostId(uuid4()))


class TestInvalidateComments:
    """Tests for invalidate_comments."""

    @pytest.mark.asyncio
    async def test_drops_comment_listing_and_post_keys(self):
        """The comment listing and the post resource go; the listing stays."""
        invalidator, cache = _invalidator()
        post_id = PostId(uuid4())
        await _fill(
            cache,
            "/posts",
            f"/posts/{post_id}",
            "/posts/budget-thread",
            f"/comments/post/{post_id}",
        )

        await invalidator.invalidate_comments(post_id, Slug("budget-thread"))

        assert cache.keys() == ["cache:/posts"]

    @pytest.mark.asyncio
    async def test_drops_query_variants_of_post_and_comments(self):
        """Query-string variants of the post and comment keys go as well."""
        invalidator, cache = _invalidator()
        post_id = PostId(uuid4())
        await _fill(
            cache,
            "/posts?page=3",
            f"/posts/{post_id}?ref=home",
            "/posts/budget-thread?x=1",
            f"/comments/post/{post_id}?page=2",
        )

        await invalidator.invalidate_comments(post_id, Slug("budget-thread"))

        assert cache.keys() == ["cache:/posts?page=3"]
