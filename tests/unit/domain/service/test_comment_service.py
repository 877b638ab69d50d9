"""Unit tests for CommentService."""

from datetime import datetime, timedelta
from uuid import uuid4

import pytest

from engage.adapter.cache import InMemoryResponseCache
from engage.domain.error import ForbiddenError, NotFoundError, ValidationError
from engage.domain.repository import CommentRepository
from engage.domain.service import CommentService
from engage.domain.value import PostId, UserRole
from engage.persistence.repository.inmemory import InMemoryStore
from tests.conftest import seed_comment, seed_post, seed_user
from tests.harness import create_env_fixture

# Unit test fixture - everything mocked, no docker needed
unit_env = create_env_fixture()


class TestCreateComment:
    """Tests for create_comment."""

    @pytest.mark.asyncio
    async def test_create_comment(self, unit_env):
        """A comment is stored with zero counters."""
        comment_service = await unit_env.get(CommentService)
        comment_repo = await unit_env.get(CommentRepository)
        author = await seed_user(unit_env, "author")
        post = await seed_post(unit_env, author)

        comment = await comment_service.create_comment(post.id, author.id, "Agreed")

        saved = await comment_repo.find_by_id(comment.id)
        assert saved is not None
        assert saved.text == "Agreed"
        assert (saved.upvotes, saved.downvotes) == (0, 0)

    @pytest.mark.asyncio
    async def test_blocked_post_rejects_comments(self, unit_env):
        """Blocked posts are closed for discussion."""
        comment_service = await unit_env.get(CommentService)
        author = await seed_user(unit_env, "author")
        post = await seed_post(unit_env, author, blocked=True)

        with pytest.raises(ForbiddenError):
            await comment_service.create_comment(post.id, author.id, "Hello")

    @pytest.mark.asyncio
    async def test_admin_cannot_comment(self, unit_env):
        """Administrators do not take part in discussions."""
        comment_service = await unit_env.get(CommentService)
        author = await seed_user(unit_env, "author")
        admin = await seed_user(unit_env, "admin", role=UserRole.ADMIN)
        post = await seed_post(unit_env, author)

        with pytest.raises(ForbiddenError):
            await comment_service.create_comment(post.id, admin.id, "Hello")

    @pytest.mark.asyncio
    async def test_blank_text_rejected(self, unit_env):
        """Whitespace comments are invalid."""
        comment_service = await unit_env.get(CommentService)
        author = await seed_user(unit_env, "author")
        post = await seed_post(unit_env, author)

        with pytest.raises(ValidationError):
            await comment_service.create_comment(post.id, author.id, "  ")

    @pytest.mark.asyncio
    async def test_create_invalidates_comment_listing(self, unit_env):
        """The post's cached comment listing is dropped."""
        comment_service = await unit_env.get(CommentService)
        cache = await unit_env.get(InMemoryResponseCache)
        author = await seed_user(unit_env, "author")
        post = await seed_post(unit_env, author)
        await cache.set(f"cache:/comments/post/{post.id}", b"{}", 300)

        await comment_service.create_comment(post.id, author.id, "Fresh")

        assert await cache.get(f"cache:/comments/post/{post.id}") is None


class TestListComments:
    """Tests for get_comments_for_post."""

    @pytest.mark.asyncio
    async def test_most_upvoted_first(self, unit_env):
        """Comments are ordered by upvotes, then newest."""
        comment_service = await unit_env.get(CommentService)
        store = await unit_env.get(InMemoryStore)
        author = await seed_user(unit_env, "author")
        post = await seed_post(unit_env, author)
        older = await seed_comment(unit_env, post, author, "older")
        newer = await seed_comment(unit_env, post, author, "newer")
        popular = await seed_comment(unit_env, post, author, "popular")
        store.comments[older.id] = older.model_copy(
            update={"created_at": datetime.now() - timedelta(hours=1)}
        )
        store.comments[popular.id] = popular.model_copy(update={"upvotes": 3})

        comments = await comment_service.get_comments_for_post(post.id)

        assert [c.id for c in comments] == [popular.id, newer.id, older.id]

    @pytest.mark.asyncio
    async def test_unknown_post(self, unit_env):
        """Listing comments of a missing post is NotFound."""
        comment_service = await unit_env.get(CommentService)

        with pytest.raises(NotFoundError):
            await comment_service.get_comments_for_post(PostId(uuid4()))


class TestDeleteComment:
    """Tests for delete_comment."""

    @pytest.mark.asyncio
    async def test_owner_and_admin_may_delete(self, unit_env):
        """The author or an admin removes a comment; others cannot."""
        comment_service = await unit_env.get(CommentService)
        comment_repo = await unit_env.get(CommentRepository)
        author = await seed_user(unit_env, "author")
        stranger = await seed_user(unit_env, "stranger")
        admin = await seed_user(unit_env, "admin", role=UserRole.ADMIN)
        post = await seed_post(unit_env, author)
        first = await seed_comment(unit_env, post, author, "first")
        second = await seed_comment(unit_env, post, author, "second")

        with pytest.raises(ForbiddenError):
            await comment_service.delete_comment(first.id, stranger.id)

        await comment_service.delete_comment(first.id, author.id)
        await comment_service.delete_comment(second.id, admin.id)

        assert await comment_repo.find_by_id(first.id) is None
        assert await comment_repo.find_by_id(second.id) is None
