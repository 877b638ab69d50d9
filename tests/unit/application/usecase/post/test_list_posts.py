"""Unit tests for the post read use cases."""

import pytest

from engage.application.usecase.post import (
    GetPostRequest,
    GetPostUseCase,
    ListPostsRequest,
    ListPostsUseCase,
)
from engage.domain.service import VoteService
from engage.domain.value import PostSortOrder, VotableType, VoteType
from tests.conftest import seed_post, seed_user
from tests.harness import create_env_fixture

# Unit test fixture - everything mocked, no docker needed
unit_env = create_env_fixture()


class TestListPostsUseCase:
    """Tests for listing posts."""

    @pytest.mark.asyncio
    async def test_default_page_size_and_pagination(self, unit_env):
        """Without a limit the configured page size (5) applies."""
        use_case = await unit_env.get(ListPostsUseCase)
        author = await seed_user(unit_env, "author")
        for i in range(6):
            await seed_post(unit_env, author, f"Post {i}")

        response = await use_case.execute(ListPostsRequest())

        assert len(response.posts) == 5
        assert response.pagination.total_posts == 6
        assert response.pagination.total_pages == 2
        assert response.pagination.posts_per_page == 5

    @pytest.mark.asyncio
    async def test_limit_is_capped(self, unit_env):
        """Oversized limits fall back to the configured maximum."""
        use_case = await unit_env.get(ListPostsUseCase)

        response = await use_case.execute(ListPostsRequest(limit=1000))

        assert response.pagination.posts_per_page == 50

    @pytest.mark.asyncio
    async def test_user_vote_only_for_authenticated_viewer(self, unit_env):
        """Each post carries the viewer's vote."""
        use_case = await unit_env.get(ListPostsUseCase)
        vote_service = await unit_env.get(VoteService)
        author = await seed_user(unit_env, "author")
        voter = await seed_user(unit_env)
        voted = await seed_post(unit_env, author, "Voted")
        await seed_post(unit_env, author, "Untouched")
        await vote_service.cast_vote(
            VotableType.POST, voted.id, voter.id, VoteType.DOWNVOTE
        )

        as_voter = await use_case.execute(
            ListPostsRequest(sort=PostSortOrder.RECENT, user_id=str(voter.id))
        )
        anonymous = await use_case.execute(ListPostsRequest())

        votes = {p.post_id: p.user_vote for p in as_voter.posts}
        assert votes[str(voted.id)] == VoteType.DOWNVOTE
        assert sum(1 for v in votes.values() if v is not None) == 1
        assert all(p.user_vote is None for p in anonymous.posts)


class TestGetPostUseCase:
    """Tests for reading one post."""

    @pytest.mark.asyncio
    async def test_get_by_slug_with_user_vote(self, unit_env):
        """Slug lookups include the viewer's vote and counters."""
        use_case = await unit_env.get(GetPostUseCase)
        vote_service = await unit_env.get(VoteService)
        author = await seed_user(unit_env, "author")
        voter = await seed_user(unit_env)
        post = await seed_post(unit_env, author)
        await vote_service.cast_vote(VotableType.POST, post.id, voter.id, VoteType.UPVOTE)

        view = await use_case.execute(
            GetPostRequest(identifier=post.slug.root, user_id=str(voter.id))
        )

        assert view.post_id == str(post.id)
        assert view.upvotes == 1
        assert view.user_vote == VoteType.UPVOTE
