"""Unit tests for VoteService."""

import asyncio
from uuid import uuid4

import pytest

from engage.adapter.cache import InMemoryResponseCache
from engage.config import CacheSettings, VotingSettings
from engage.domain.error import ConflictError, ForbiddenError, NotFoundError
from engage.domain.model.vote import VoteTransition
from engage.domain.repository import PostRepository, UnitOfWork, VoteRepository
from engage.domain.service import (
    CacheInvalidator,
    CommentService,
    PostService,
    UserService,
    VoteService,
    decide,
)
from engage.domain.value import PostId, UserRole, VotableType, VoteType
from engage.persistence.repository.inmemory import (
    InMemoryStore,
    InMemoryUnitOfWork,
    InMemoryVoteRepository,
)
from tests.conftest import seed_comment, seed_post, seed_user
from tests.harness import create_env_fixture

# Unit test fixture - everything mocked, no docker needed
unit_env = create_env_fixture()

UP = VoteType.UPVOTE
DOWN = VoteType.DOWNVOTE


async def _counters(env, post_id):
    post = await (await env.get(PostRepository)).find_by_id(post_id)
    return post.upvotes, post.downvotes


class TestCastVote:
    """Tests for toggle and switch semantics."""

    @pytest.mark.asyncio
    async def test_first_upvote_inserts_vote(self, unit_env):
        """A first upvote records the vote and increments upvotes."""
        # Arrange
        vote_service = await unit_env.get(VoteService)
        vote_repo = await unit_env.get(VoteRepository)
        author = await seed_user(unit_env, "author")
        voter = await seed_user(unit_env)
        post = await seed_post(unit_env, author)

        # Act
        outcome = await vote_service.cast_vote(VotableType.POST, post.id, voter.id, UP)

        # Assert
        assert (outcome.upvotes, outcome.downvotes) == (1, 0)
        assert outcome.user_vote == UP
        saved = await vote_repo.find_by_user_and_votable(
            voter.id, VotableType.POST, post.id
        )
        assert saved is not None
        assert saved.vote_type == UP

    @pytest.mark.asyncio
    async def test_repeating_vote_withdraws_it(self, unit_env):
        """Voting up twice leaves no vote and the counters where they began."""
        vote_service = await unit_env.get(VoteService)
        vote_repo = await unit_env.get(VoteRepository)
        author = await seed_user(unit_env, "author")
        voter = await seed_user(unit_env)
        post = await seed_post(unit_env, author)

        await vote_service.cast_vote(VotableType.POST, post.id, voter.id, UP)
        outcome = await vote_service.cast_vote(VotableType.POST, post.id, voter.id, UP)

        assert (outcome.upvotes, outcome.downvotes) == (0, 0)
        assert outcome.user_vote is None
        assert (
            await vote_repo.find_by_user_and_votable(voter.id, VotableType.POST, post.id)
            is None
        )

    @pytest.mark.asyncio
    async def test_opposite_vote_switches(self, unit_env):
        """Up then down moves one vote from upvotes to downvotes."""
        vote_service = await unit_env.get(VoteService)
        author = await seed_user(unit_env, "author")
        voter = await seed_user(unit_env)
        post = await seed_post(unit_env, author)

        await vote_service.cast_vote(VotableType.POST, post.id, voter.id, UP)
        outcome = await vote_service.cast_vote(VotableType.POST, post.id, voter.id, DOWN)

        assert (outcome.upvotes, outcome.downvotes) == (0, 1)
        assert outcome.user_vote == DOWN
        assert await _counters(unit_env, post.id) == (0, 1)

    @pytest.mark.asyncio
    async def test_two_users_scenario(self, unit_env):
        """A: up, up, down; B: up. Final counters are 1 up and 1 down."""
        vote_service = await unit_env.get(VoteService)
        author = await seed_user(unit_env, "author")
        user_a = await seed_user(unit_env, "a")
        user_b = await seed_user(unit_env, "b")
        post = await seed_post(unit_env, author)

        steps = [
            (user_a, UP, (1, 0)),
            (user_a, UP, (0, 0)),
            (user_a, DOWN, (0, 1)),
            (user_b, UP, (1, 1)),
        ]
        for user, vote_type, expected in steps:
            outcome = await vote_service.cast_vote(
                VotableType.POST, post.id, user.id, vote_type
            )
            assert (outcome.upvotes, outcome.downvotes) == expected

        assert await _counters(unit_env, post.id) == (1, 1)

    @pytest.mark.asyncio
    async def test_counters_match_ledger_after_many_votes(self, unit_env):
        """Counters always equal the ledger counts."""
        vote_service = await unit_env.get(VoteService)
        vote_repo = await unit_env.get(VoteRepository)
        author = await seed_user(unit_env, "author")
        voters = [await seed_user(unit_env, f"v{i}") for i in range(5)]
        post = await seed_post(unit_env, author)

        sequence = [UP, DOWN, UP, UP, DOWN, DOWN, UP]
        for index, vote_type in enumerate(sequence):
            voter = voters[index % len(voters)]
            await vote_service.cast_vote(VotableType.POST, post.id, voter.id, vote_type)

        ledger = await vote_repo.count_by_votable(VotableType.POST, post.id)
        assert await _counters(unit_env, post.id) == (ledger.upvotes, ledger.downvotes)

    @pytest.mark.asyncio
    async def test_vote_on_comment(self, unit_env):
        """Comments keep their own counters."""
        vote_service = await unit_env.get(VoteService)
        author = await seed_user(unit_env, "author")
        voter = await seed_user(unit_env)
        post = await seed_post(unit_env, author)
        comment = await seed_comment(unit_env, post, author)

        outcome = await vote_service.cast_vote(
            VotableType.COMMENT, comment.id, voter.id, DOWN
        )

        assert outcome.votable_type == VotableType.COMMENT
        assert (outcome.upvotes, outcome.downvotes) == (0, 1)
        assert await _counters(unit_env, post.id) == (0, 0)


class TestVoteRejections:
    """Tests for actor and target checks."""

    @pytest.mark.asyncio
    async def test_blocked_post_rejected_and_counters_unchanged(self, unit_env):
        """Voting on a blocked post is forbidden."""
        vote_service = await unit_env.get(VoteService)
        author = await seed_user(unit_env, "author")
        voter = await seed_user(unit_env)
        post = await seed_post(unit_env, author, blocked=True)

        with pytest.raises(ForbiddenError):
            await vote_service.cast_vote(VotableType.POST, post.id, voter.id, UP)

        assert await _counters(unit_env, post.id) == (0, 0)

    @pytest.mark.asyncio
    async def test_comment_on_blocked_post_rejected(self, unit_env):
        """A comment inherits its post's block."""
        vote_service = await unit_env.get(VoteService)
        post_repo = await unit_env.get(PostRepository)
        author = await seed_user(unit_env, "author")
        voter = await seed_user(unit_env)
        post = await seed_post(unit_env, author)
        comment = await seed_comment(unit_env, post, author)
        await post_repo.set_blocked(post.id, True)

        with pytest.raises(ForbiddenError):
            await vote_service.cast_vote(VotableType.COMMENT, comment.id, voter.id, UP)

    @pytest.mark.asyncio
    async def test_blocked_user_rejected(self, unit_env):
        """Blocked accounts cannot vote."""
        vote_service = await unit_env.get(VoteService)
        author = await seed_user(unit_env, "author")
        voter = await seed_user(unit_env, blocked=True)
        post = await seed_post(unit_env, author)

        with pytest.raises(ForbiddenError, match="blocked"):
            await vote_service.cast_vote(VotableType.POST, post.id, voter.id, UP)

    @pytest.mark.asyncio
    async def test_unverified_user_may_vote_on_post(self, unit_env):
        """Post votes only require an unblocked account."""
        vote_service = await unit_env.get(VoteService)
        author = await seed_user(unit_env, "author")
        voter = await seed_user(unit_env, verified=False)
        post = await seed_post(unit_env, author)

        outcome = await vote_service.cast_vote(VotableType.POST, post.id, voter.id, UP)

        assert outcome.upvotes == 1

    @pytest.mark.asyncio
    async def test_unverified_user_rejected_on_comment(self, unit_env):
        """Comment votes require a verified account."""
        vote_service = await unit_env.get(VoteService)
        author = await seed_user(unit_env, "author")
        voter = await seed_user(unit_env, verified=False)
        post = await seed_post(unit_env, author)
        comment = await seed_comment(unit_env, post, author)

        with pytest.raises(ForbiddenError, match="verification"):
            await vote_service.cast_vote(
                VotableType.COMMENT, comment.id, voter.id, UP
            )

    @pytest.mark.asyncio
    async def test_unverified_admin_may_vote(self, unit_env):
        """Administrators skip the verification requirement."""
        vote_service = await unit_env.get(VoteService)
        author = await seed_user(unit_env, "author")
        admin = await seed_user(unit_env, "admin", role=UserRole.ADMIN, verified=False)
        post = await seed_post(unit_env, author)
        comment = await seed_comment(unit_env, post, author)

        outcome = await vote_service.cast_vote(
            VotableType.COMMENT, comment.id, admin.id, UP
        )

        assert outcome.upvotes == 1

    @pytest.mark.asyncio
    async def test_missing_post_not_found(self, unit_env):
        """Voting on an unknown post raises NotFoundError."""
        vote_service = await unit_env.get(VoteService)
        voter = await seed_user(unit_env)

        with pytest.raises(NotFoundError):
            await vote_service.cast_vote(
                VotableType.POST, PostId(uuid4()), voter.id, UP
            )


class _RacingVoteRepository(InMemoryVoteRepository):
    """Lets a competing request write the same ledger row before our apply."""

    def __init__(self, store: InMemoryStore, competing: list[VoteType]) -> None:
        super().__init__(store)
        self.competing = competing
        self.apply_calls = 0

    async def apply(self, user_id, votable_type, votable_id, transition: VoteTransition):
        self.apply_calls += 1
        if self.competing:
            requested = self.competing.pop(0)
            current = await self.find_by_user_and_votable(
                user_id, votable_type, votable_id
            )
            await super().apply(
                user_id,
                votable_type,
                votable_id,
                decide(current.vote_type if current else None, requested),
            )
        return await super().apply(user_id, votable_type, votable_id, transition)


async def _racing_service(env, competing: list[VoteType]):
    store = await env.get(InMemoryStore)
    repo = _RacingVoteRepository(store, competing)
    service = VoteService(
        vote_repository=repo,
        post_service=await env.get(PostService),
        comment_service=await env.get(CommentService),
        user_service=await env.get(UserService),
        unit_of_work=await env.get(UnitOfWork),
        cache_invalidator=await env.get(CacheInvalidator),
        voting_settings=VotingSettings(max_attempts=2),
    )
    return service, repo


class TestConcurrentVotes:
    """Tests for the read-decide-apply retry loop."""

    @pytest.mark.asyncio
    async def test_lost_race_is_retried_from_fresh_state(self, unit_env):
        """A concurrent insert makes the first apply stale; the retry toggles it."""
        author = await seed_user(unit_env, "author")
        voter = await seed_user(unit_env)
        post = await seed_post(unit_env, author)
        service, repo = await _racing_service(unit_env, competing=[UP])

        outcome = await service.cast_vote(VotableType.POST, post.id, voter.id, UP)

        # Re-read saw the concurrent upvote, so the same request withdrew it
        assert repo.apply_calls == 2
        assert outcome.user_vote is None
        assert (outcome.upvotes, outcome.downvotes) == (0, 0)
        assert await _counters(unit_env, post.id) == (0, 0)

    @pytest.mark.asyncio
    async def test_exhausted_retries_raise_conflict(self, unit_env):
        """Losing every attempt surfaces ConflictError with a consistent ledger."""
        vote_repo = await unit_env.get(VoteRepository)
        author = await seed_user(unit_env, "author")
        voter = await seed_user(unit_env)
        post = await seed_post(unit_env, author)
        service, repo = await _racing_service(unit_env, competing=[UP, DOWN])

        with pytest.raises(ConflictError):
            await service.cast_vote(VotableType.POST, post.id, voter.id, UP)

        assert repo.apply_calls == 2
        ledger = await vote_repo.count_by_votable(VotableType.POST, post.id)
        assert await _counters(unit_env, post.id) == (ledger.upvotes, ledger.downvotes)


    @pytest.mark.asyncio
    async def test_distinct_users_voting_at_once_are_all_counted(self, unit_env):
        """Simultaneous votes from different users never overwrite each other."""
        vote_service = await unit_env.get(VoteService)
        vote_repo = await unit_env.get(VoteRepository)
        author = await seed_user(unit_env, "author")
        post = await seed_post(unit_env, author)
        voters = [await seed_user(unit_env, f"voter{i}") for i in range(12)]

        outcomes = await asyncio.gather(
            *(
                vote_service.cast_vote(VotableType.POST, post.id, voter.id, UP)
                for voter in voters
            )
        )

        assert all(outcome.user_vote == UP for outcome in outcomes)
        ledger = await vote_repo.count_by_votable(VotableType.POST, post.id)
        assert (ledger.upvotes, ledger.downvotes) == (12, 0)
        assert await _counters(unit_env, post.id) == (12, 0)


class TestVoteCacheInvalidation:
    """Tests for cache effects of a vote."""

    @pytest.mark.asyncio
    async def test_vote_invalidates_post_keys(self, unit_env):
        """The listing and the post's own keys are dropped after a vote."""
        vote_service = await unit_env.get(VoteService)
        cache = await unit_env.get(InMemoryResponseCache)
        settings = await unit_env.get(CacheSettings)
        author = await seed_user(unit_env, "author")
        voter = await seed_user(unit_env)
        post = await seed_post(unit_env, author)

        keys = [
            f"{settings.key_prefix}/posts",
            f"{settings.key_prefix}/posts?page=2",
            f"{settings.key_prefix}/posts/{post.id}",
            f"{settings.key_prefix}/posts/{post.slug.root}",
        ]
        for key in keys:
            await cache.set(key, b"{}", 300)
        unrelated = f"{settings.key_prefix}/posts/{uuid4()}"
        await cache.set(unrelated, b"{}", 300)

        await vote_service.cast_vote(VotableType.POST, post.id, voter.id, UP)

        for key in keys:
            assert await cache.get(key) is None
        assert await cache.get(unrelated) == b"{}"

    @pytest.mark.asyncio
    async def test_vote_is_committed_before_cache_is_invalidated(
        self, unit_env, monkeypatch
    ):
        """A reader refilling the cache after invalidation sees the new counters."""
        vote_service = await unit_env.get(VoteService)
        cache = await unit_env.get(InMemoryResponseCache)
        unit_of_work = await unit_env.get(InMemoryUnitOfWork)
        author = await seed_user(unit_env, "author")
        voter = await seed_user(unit_env)
        post = await seed_post(unit_env, author)
        commits_seen = []
        delete = cache.delete

        async def recording_delete(*keys):
            commits_seen.append(unit_of_work.commits)
            return await delete(*keys)

        monkeypatch.setattr(cache, "delete", recording_delete)

        await vote_service.cast_vote(VotableType.POST, post.id, voter.id, UP)

        assert commits_seen == [1]

    @pytest.mark.asyncio
    async def test_cache_outage_does_not_fail_vote(self, unit_env):
        """The vote is recorded even when the cache is unreachable."""
        vote_service = await unit_env.get(VoteService)
        cache = await unit_env.get(InMemoryResponseCache)
        author = await seed_user(unit_env, "author")
        voter = await seed_user(unit_env)
        post = await seed_post(unit_env, author)
        cache.available = False

        outcome = await vote_service.cast_vote(VotableType.POST, post.id, voter.id, UP)

        assert outcome.upvotes == 1
        assert await _counters(unit_env, post.id) == (1, 0)


class TestRepairCounters:
    """Tests for the admin recount."""

    @pytest.mark.asyncio
    async def test_recount_restores_drifted_counters(self, unit_env):
        """Counters are recomputed from the ledger."""
        vote_service = await unit_env.get(VoteService)
        store = await unit_env.get(InMemoryStore)
        author = await seed_user(unit_env, "author")
        admin = await seed_user(unit_env, "admin", role=UserRole.ADMIN)
        voter = await seed_user(unit_env)
        post = await seed_post(unit_env, author)
        await vote_service.cast_vote(VotableType.POST, post.id, voter.id, UP)
        store.posts[post.id] = store.posts[post.id].model_copy(
            update={"upvotes": 7, "downvotes": 3}
        )

        counters = await vote_service.repair_counters(
            VotableType.POST, post.id, admin.id
        )

        assert (counters.upvotes, counters.downvotes) == (1, 0)
        assert await _counters(unit_env, post.id) == (1, 0)

    @pytest.mark.asyncio
    async def test_recount_requires_admin(self, unit_env):
        """Regular users cannot trigger a recount."""
        vote_service = await unit_env.get(VoteService)
        author = await seed_user(unit_env, "author")
        post = await seed_post(unit_env, author)

        with pytest.raises(ForbiddenError):
            await vote_service.repair_counters(VotableType.POST, post.id, author.id)
