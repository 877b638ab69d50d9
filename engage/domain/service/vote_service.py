"""Vote domain service."""

from dataclasses import dataclass
from typing import Optional, Sequence, Union
from uuid import UUID

import logfire

from engage.config import VotingSettings
from engage.domain.error import (
    ConcurrentVoteError,
    ConflictError,
    ForbiddenError,
    NotFoundError,
)
from engage.domain.model.post import Post
from engage.domain.model.vote import VoteCounters
from engage.domain.repository import UnitOfWork, VoteRepository
from engage.domain.value import CommentId, PostId, UserId, VotableType, VoteType

from .base import Service
from .cache_invalidator import CacheInvalidator
from .comment_service import CommentService
from .post_service import PostService
from .user_service import UserService
from .vote_transition import decide


@dataclass
class VoteOutcome:
    """Counters of a votable item after a vote, plus the caller's vote."""

    votable_type: VotableType
    votable_id: UUID
    upvotes: int
    downvotes: int
    user_vote: Optional[VoteType]


class VoteService(Service):
    """Domain service for binary votes on posts and comments."""

    def __init__(
        self,
        vote_repository: VoteRepository,
        post_service: PostService,
        comment_service: CommentService,
        user_service: UserService,
        unit_of_work: UnitOfWork,
        cache_invalidator: CacheInvalidator,
        voting_settings: VotingSettings,
    ) -> None:
        """Initialize vote service.

        Args:
            vote_repository: Vote ledger
            post_service: Post domain service
            comment_service: Comment domain service
            user_service: User domain service
            unit_of_work: Commits the vote before caches are invalidated
            cache_invalidator: Invalidates cached reads after a vote
            voting_settings: Retry budget of the vote loop
        """
        self.vote_repository = vote_repository
        self.post_service = post_service
        self.comment_service = comment_service
        self.user_service = user_service
        self.unit_of_work = unit_of_work
        self.cache_invalidator = cache_invalidator
        self.voting_settings = voting_settings

    async def cast_vote(
        self,
        votable_type: VotableType,
        votable_id: Union[PostId, CommentId],
        user_id: UserId,
        vote_type: VoteType,
    ) -> VoteOutcome:
        """Record a user's vote on a post or comment.

        Repeating the current vote removes it; the opposite vote switches it.
        The current vote is always re-read right before deciding, and the
        ledger rejects the write if it changed in between. A rejected write
        is retried from a fresh read until ``voting_settings.max_attempts``
        is used up.

        Args:
            votable_type: Type of item (post or comment)
            votable_id: ID of the item
            user_id: Voting user ID
            vote_type: Requested vote

        Returns:
            The item's counters after the vote and the user's resulting vote

        Raises:
            NotFoundError: If the user or the item doesn't exist
            ForbiddenError: If the user is blocked (or unverified, for comment
                votes) or the item belongs to a blocked post
            ConflictError: If concurrent writes kept winning the race
        """
        with logfire.span(
            "vote_service.cast_vote",
            votable_type=votable_type.value,
            votable_id=str(votable_id),
            user_id=str(user_id),
            vote_type=vote_type.value,
        ):
            # Comment votes also require a verified account
            if votable_type == VotableType.POST:
                user = await self.user_service.require_active(user_id)
            else:
                user = await self.user_service.require_participant(user_id)
            post = await self._resolve_open_target(votable_type, votable_id)

            attempts = max(1, self.voting_settings.max_attempts)
            for attempt in range(1, attempts + 1):
                existing = await self.vote_repository.find_by_user_and_votable(
                    user_id=user.id,
                    votable_type=votable_type,
                    votable_id=votable_id,
                )
                transition = decide(existing.vote_type if existing else None, vote_type)
                try:
                    counters = await self.vote_repository.apply(
                        user.id, votable_type, votable_id, transition
                    )
                except ConcurrentVoteError:
                    logfire.warn(
                        "Vote lost a race, re-reading",
                        votable_id=str(votable_id),
                        user_id=str(user_id),
                        attempt=attempt,
                    )
                    continue
                break
            else:
                logfire.error(
                    "Vote abandoned after concurrent updates",
                    votable_id=str(votable_id),
                    user_id=str(user_id),
                    attempts=attempts,
                )
                raise ConflictError(
                    "Vote conflicted with a concurrent update, please retry"
                )

            logfire.info(
                "Vote applied",
                votable_type=votable_type.value,
                votable_id=str(votable_id),
                action=transition.action.value,
                upvotes=counters.upvotes,
                downvotes=counters.downvotes,
            )

            await self.unit_of_work.commit()
            await self._invalidate(votable_type, post)

            return VoteOutcome(
                votable_type=votable_type,
                votable_id=UUID(str(votable_id)),
                upvotes=counters.upvotes,
                downvotes=counters.downvotes,
                user_vote=transition.resulting,
            )

    async def repair_counters(
        self,
        votable_type: VotableType,
        votable_id: Union[PostId, CommentId],
        actor_id: UserId,
    ) -> VoteCounters:
        """Recompute an item's counters from the ledger (admin only).

        Raises:
            ForbiddenError: If the actor is not an administrator
            NotFoundError: If the item doesn't exist
        """
        with logfire.span(
            "vote_service.repair_counters",
            votable_type=votable_type.value,
            votable_id=str(votable_id),
        ):
            await self.user_service.require_admin(actor_id)
            post = await self._resolve_target(votable_type, votable_id)

            counters = await self.vote_repository.recount(votable_type, votable_id)
            logfire.info(
                "Counters recomputed",
                votable_id=str(votable_id),
                upvotes=counters.upvotes,
                downvotes=counters.downvotes,
            )

            await self.unit_of_work.commit()
            await self._invalidate(votable_type, post)
            return counters

    async def get_user_votes(
        self,
        user_id: UserId | None,
        votable_type: VotableType,
        votable_ids: Sequence[Union[PostId, CommentId]],
    ) -> dict[UUID, VoteType]:
        """Map item IDs to the vote a user cast on them.

        Args:
            user_id: Viewing user ID (None for anonymous viewers)
            votable_type: Type of items (post or comment)
            votable_ids: Items to check

        Returns:
            Item ID to vote type, for items the user voted on
        """
        if user_id is None or not votable_ids:
            return {}

        votes = await self.vote_repository.find_by_user_and_votables(
            user_id=user_id,
            votable_type=votable_type,
            votable_ids=votable_ids,
        )
        return {UUID(str(vote.votable_id)): vote.vote_type for vote in votes}

    async def _resolve_target(
        self, votable_type: VotableType, votable_id: Union[PostId, CommentId]
    ) -> Post:
        """Return the post an item belongs to (the item itself for posts)."""
        if votable_type == VotableType.POST:
            return await self.post_service.require_post(PostId(votable_id))

        comment = await self.comment_service.get_comment_by_id(CommentId(votable_id))
        if not comment:
            raise NotFoundError("Comment", str(votable_id))
        return await self.post_service.require_post(comment.post_id)

    async def _resolve_open_target(
        self, votable_type: VotableType, votable_id: Union[PostId, CommentId]
    ) -> Post:
        """Like ``_resolve_target`` but rejects items of a blocked post."""
        post = await self._resolve_target(votable_type, votable_id)
        if post.blocked:
            logfire.warn("Vote on blocked post rejected", post_id=str(post.id))
            raise ForbiddenError("This post is blocked")
        return post

    async def _invalidate(self, votable_type: VotableType, post: Post) -> None:
        if votable_type == VotableType.POST:
            await self.cache_invalidator.invalidate_post(post.id, post.slug)
        else:
            await self.cache_invalidator.invalidate_comments(post.id, post.slug)
