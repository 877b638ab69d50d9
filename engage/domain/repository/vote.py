"""Vote ledger interface."""

from abc import ABC, abstractmethod
from typing import List, Optional, Sequence, Union

from engage.domain.model.vote import Vote, VoteCounters, VoteTransition
from engage.domain.value import CommentId, PostId, UserId, VotableType


class VoteRepository(ABC):
    """Ledger of binary votes on posts and comments.

    The ledger is the only component allowed to change the ``upvotes`` and
    ``downvotes`` counters of a votable item, and it only does so inside
    ``apply``, together with the vote row change those counters reflect.
    """

    @abstractmethod
    async def find_by_user_and_votable(
        self,
        user_id: UserId,
        votable_type: VotableType,
        votable_id: Union[PostId, CommentId],
    ) -> Optional[Vote]:
        """Find a user's vote on a specific item.

        Args:
            user_id: The user's ID
            votable_type: Type of item (post or comment)
            votable_id: ID of the item

        Returns:
            The vote if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_by_user_and_votables(
        self,
        user_id: UserId,
        votable_type: VotableType,
        votable_ids: Sequence[Union[PostId, CommentId]],
    ) -> List[Vote]:
        """Find a user's votes on multiple items (batch query).

        Args:
            user_id: The user's ID
            votable_type: Type of items (post or comment)
            votable_ids: List of item IDs to check

        Returns:
            List of votes by the user on the specified items
        """
        pass

    @abstractmethod
    async def count_by_votable(
        self,
        votable_type: VotableType,
        votable_id: Union[PostId, CommentId],
    ) -> VoteCounters:
        """Count ledger rows on an item, split by vote type."""
        pass

    @abstractmethod
    async def apply(
        self,
        user_id: UserId,
        votable_type: VotableType,
        votable_id: Union[PostId, CommentId],
        transition: VoteTransition,
    ) -> VoteCounters:
        """Apply a vote transition as one atomic unit of work.

        Writes the ledger row change and the matching counter delta. The
        ledger write is guarded by ``transition.previous``: if the stored
        vote no longer matches it, nothing is written.

        Args:
            user_id: The voting user's ID
            votable_type: Type of item (post or comment)
            votable_id: ID of the item
            transition: Transition computed from the current vote

        Returns:
            Counters of the item after the change

        Raises:
            ConcurrentVoteError: If another write to the same
                (user, item) pair won the race. Nothing was written.
            NotFoundError: If the item disappeared. Nothing was written.
        """
        pass

    @abstractmethod
    async def recount(
        self,
        votable_type: VotableType,
        votable_id: Union[PostId, CommentId],
    ) -> VoteCounters:
        """Recompute an item's counters from the ledger.

        Consistency repair only; normal voting never calls this.

        Raises:
            NotFoundError: If the item does not exist
        """
        pass
