"""In-memory poll repository for testing."""

from typing import Optional, Sequence

from engage.domain.error import ConcurrentVoteError
from engage.domain.model.poll import Poll, PollVote
from engage.domain.repository.poll import PollRepository
from engage.domain.value import PollId, PostId, UserId

from .store import InMemoryStore


class InMemoryPollRepository(PollRepository):
    """In-memory implementation of PollRepository for testing.

    Enforces the same uniqueness rules as the database indexes: one vote per
    (option, user), and one vote per (poll, user) on single-choice polls.
    """

    def __init__(self, store: InMemoryStore | None = None) -> None:
        self._store = store or InMemoryStore()

    async def find_by_id(self, poll_id: PollId) -> Optional[Poll]:
        """Find a poll by ID."""
        return self._store.polls.get(poll_id)

    async def find_by_post(self, post_id: PostId, active_only: bool = True) -> list[Poll]:
        """Find polls attached to a post, newest first."""
        polls = [
            poll
            for poll in self._store.polls.values()
            if poll.post_id == post_id and (poll.is_active or not active_only)
        ]
        polls.sort(key=lambda p: p.created_at, reverse=True)
        return polls

    async def save(self, poll: Poll) -> Poll:
        """Insert a poll with its options."""
        self._store.polls[poll.id] = poll
        return poll

    async def update(self, poll: Poll) -> Poll:
        """Update a poll's own fields (options are kept)."""
        stored = self._store.polls[poll.id]
        updated = poll.model_copy(update={"options": stored.options})
        self._store.polls[poll.id] = updated
        return updated

    async def delete(self, poll_id: PollId) -> bool:
        """Delete a poll and its votes."""
        if self._store.polls.pop(poll_id, None) is None:
            return False
        for vote_id in [v.id for v in self._store.poll_votes.values() if v.poll_id == poll_id]:
            del self._store.poll_votes[vote_id]
        return True

    async def find_votes(self, poll_id: PollId) -> list[PollVote]:
        """Find every vote cast on a poll."""
        return [v for v in self._store.poll_votes.values() if v.poll_id == poll_id]

    async def find_user_votes(self, poll_id: PollId, user_id: UserId) -> list[PollVote]:
        """Find the votes a user cast on a poll."""
        return [
            v
            for v in self._store.poll_votes.values()
            if v.poll_id == poll_id and v.user_id == user_id
        ]

    async def add_votes(self, poll: Poll, votes: Sequence[PollVote]) -> None:
        """Insert poll votes, all or nothing."""
        existing = [
            (v.poll_option_id, v.user_id)
            for v in self._store.poll_votes.values()
            if v.poll_id == poll.id
        ]
        taken = set(existing)
        voters = {user_id for _, user_id in existing}

        for vote in votes:
            pair = (vote.poll_option_id, vote.user_id)
            if pair in taken:
                raise ConcurrentVoteError("Poll vote already recorded")
            if not poll.allow_multiple_votes and vote.user_id in voters:
                raise ConcurrentVoteError("Poll vote already recorded")
            taken.add(pair)
            voters.add(vote.user_id)

        for vote in votes:
            self._store.poll_votes[vote.id] = vote
