"""Poll repository interface."""

from abc import ABC, abstractmethod
from typing import List, Optional, Sequence

from engage.domain.model.poll import Poll, PollVote
from engage.domain.value import PollId, PostId, UserId


class PollRepository(ABC):
    """Repository for polls, their options and the poll vote ledger."""

    @abstractmethod
    async def find_by_id(self, poll_id: PollId) -> Optional[Poll]:
        """Find a poll (with its ordered options) by ID."""
        pass

    @abstractmethod
    async def find_by_post(self, post_id: PostId, active_only: bool = True) -> List[Poll]:
        """Find polls attached to a post, newest first."""
        pass

    @abstractmethod
    async def save(self, poll: Poll) -> Poll:
        """Insert a poll and its options atomically."""
        pass

    @abstractmethod
    async def update(self, poll: Poll) -> Poll:
        """Update a poll's own fields (options are immutable)."""
        pass

    @abstractmethod
    async def delete(self, poll_id: PollId) -> bool:
        """Delete a poll with its options and votes.

        Returns:
            True if a poll was deleted, False if none existed
        """
        pass

    @abstractmethod
    async def find_votes(self, poll_id: PollId) -> List[PollVote]:
        """Find every vote cast on a poll."""
        pass

    @abstractmethod
    async def find_user_votes(self, poll_id: PollId, user_id: UserId) -> List[PollVote]:
        """Find the votes a user cast on a poll."""
        pass

    @abstractmethod
    async def add_votes(self, poll: Poll, votes: Sequence[PollVote]) -> None:
        """Insert poll votes as one atomic unit (all or nothing).

        Single-choice polls are also protected at the storage level: at most
        one vote per user per poll.

        Raises:
            ConcurrentVoteError: If any insert violates a uniqueness
                invariant. Nothing was written.
        """
        pass
