"""In-memory vote ledger for testing."""

from datetime import datetime
from typing import Optional, Sequence, Union
from uuid import UUID, uuid4

from engage.domain.error import ConcurrentVoteError, NotFoundError
from engage.domain.model.vote import Vote, VoteAction, VoteCounters, VoteTransition
from engage.domain.repository.vote import VoteRepository
from engage.domain.value import CommentId, PostId, UserId, VotableType, VoteId, VoteType

from .store import InMemoryStore


class InMemoryVoteRepository(VoteRepository):
    """In-memory implementation of VoteRepository for testing.

    Counters live on the posts and comments of the shared store. ``apply``
    validates everything before it mutates anything, so a rejected
    transition leaves no trace, like a rolled-back SAVEPOINT.
    """

    def __init__(self, store: InMemoryStore | None = None) -> None:
        self._store = store or InMemoryStore()

    async def find_by_user_and_votable(
        self,
        user_id: UserId,
        votable_type: VotableType,
        votable_id: Union[PostId, CommentId],
    ) -> Optional[Vote]:
        """Find a vote by user and votable item."""
        return self._store.votes.get((user_id, votable_type, UUID(str(votable_id))))

    async def find_by_user_and_votables(
        self,
        user_id: UserId,
        votable_type: VotableType,
        votable_ids: Sequence[Union[PostId, CommentId]],
    ) -> list[Vote]:
        """Find a user's votes on multiple items."""
        votes = []
        for votable_id in votable_ids:
            vote = await self.find_by_user_and_votable(user_id, votable_type, votable_id)
            if vote:
                votes.append(vote)
        return votes

    async def count_by_votable(
        self,
        votable_type: VotableType,
        votable_id: Union[PostId, CommentId],
    ) -> VoteCounters:
        """Count ledger rows on an item, split by vote type."""
        target = UUID(str(votable_id))
        rows = [
            vote
            for (_, kind, item), vote in self._store.votes.items()
            if kind == votable_type and item == target
        ]
        return VoteCounters(
            upvotes=sum(1 for v in rows if v.vote_type == VoteType.UPVOTE),
            downvotes=sum(1 for v in rows if v.vote_type == VoteType.DOWNVOTE),
        )

    async def apply(
        self,
        user_id: UserId,
        votable_type: VotableType,
        votable_id: Union[PostId, CommentId],
        transition: VoteTransition,
    ) -> VoteCounters:
        """Apply the ledger change and its counter delta together."""
        key = (user_id, votable_type, UUID(str(votable_id)))
        stored = self._store.votes.get(key)
        stored_type = stored.vote_type if stored else None

        if transition.action == VoteAction.INSERT:
            if stored is not None:
                raise ConcurrentVoteError("Vote was recorded by a concurrent request")
        elif stored_type != transition.previous:
            raise ConcurrentVoteError("Vote changed since it was read")

        item = self._items(votable_type).get(votable_id)
        if item is None:
            raise NotFoundError(votable_type.value.capitalize(), str(votable_id))

        counters = VoteCounters(
            upvotes=item.upvotes + transition.upvote_delta,
            downvotes=item.downvotes + transition.downvote_delta,
        )

        now = datetime.now()
        if transition.action == VoteAction.DELETE:
            del self._store.votes[key]
        elif stored is None:
            self._store.votes[key] = Vote(
                id=VoteId(uuid4()),
                user_id=user_id,
                votable_type=votable_type,
                votable_id=key[2],
                vote_type=transition.resulting,
                created_at=now,
                updated_at=now,
            )
        else:
            self._store.votes[key] = stored.model_copy(
                update={"vote_type": transition.resulting, "updated_at": now}
            )

        self._set_counters(votable_type, votable_id, counters)
        return counters

    async def recount(
        self,
        votable_type: VotableType,
        votable_id: Union[PostId, CommentId],
    ) -> VoteCounters:
        """Recompute an item's counters from the ledger."""
        if votable_id not in self._items(votable_type):
            raise NotFoundError(votable_type.value.capitalize(), str(votable_id))
        counters = await self.count_by_votable(votable_type, votable_id)
        self._set_counters(votable_type, votable_id, counters)
        return counters

    def _items(self, votable_type: VotableType) -> dict:
        if votable_type == VotableType.POST:
            return self._store.posts
        return self._store.comments

    def _set_counters(
        self,
        votable_type: VotableType,
        votable_id: Union[PostId, CommentId],
        counters: VoteCounters,
    ) -> None:
        items = self._items(votable_type)
        items[votable_id] = items[votable_id].model_copy(
            update={"upvotes": counters.upvotes, "downvotes": counters.downvotes}
        )
