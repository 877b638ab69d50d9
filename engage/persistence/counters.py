"""Aggregate vote counters of posts and comments.

``CounterMutator`` is the only code that writes the ``upvotes`` and
``downvotes`` columns. It never opens its own transaction: callers run it
inside the unit of work that also writes the matching ledger rows.
"""

from typing import Optional, Union

from sqlalchemy import Table, and_, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from engage.domain.model import VoteCounters
from engage.domain.value import CommentId, PostId, VotableType, VoteType
from engage.persistence.tables import comments_table, posts_table, votes_table

_COUNTER_TABLES: dict[VotableType, Table] = {
    VotableType.POST: posts_table,
    VotableType.COMMENT: comments_table,
}


class CounterMutator:
    """Applies counter deltas and recounts against the votes ledger."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def apply_delta(
        self,
        votable_type: VotableType,
        votable_id: Union[PostId, CommentId],
        upvote_delta: int,
        downvote_delta: int,
    ) -> Optional[VoteCounters]:
        """Add deltas to an item's counters in a single statement.

        Returns:
            Counters after the update, or None if the item doesn't exist
        """
        table = _COUNTER_TABLES[votable_type]
        stmt = (
            update(table)
            .where(table.c.id == votable_id)
            .values(
                upvotes=table.c.upvotes + upvote_delta,
                downvotes=table.c.downvotes + downvote_delta,
            )
            .returning(table.c.upvotes, table.c.downvotes)
        )
        result = await self.session.execute(stmt)
        row = result.fetchone()
        if not row:
            return None
        return VoteCounters(upvotes=row.upvotes, downvotes=row.downvotes)

    async def recount(
        self,
        votable_type: VotableType,
        votable_id: Union[PostId, CommentId],
    ) -> Optional[VoteCounters]:
        """Overwrite an item's counters with ledger counts.

        Returns:
            Recomputed counters, or None if the item doesn't exist
        """
        table = _COUNTER_TABLES[votable_type]
        stmt = (
            update(table)
            .where(table.c.id == votable_id)
            .values(
                upvotes=self._ledger_count(votable_type, votable_id, VoteType.UPVOTE),
                downvotes=self._ledger_count(
                    votable_type, votable_id, VoteType.DOWNVOTE
                ),
            )
            .returning(table.c.upvotes, table.c.downvotes)
        )
        result = await self.session.execute(stmt)
        row = result.fetchone()
        if not row:
            return None
        return VoteCounters(upvotes=row.upvotes, downvotes=row.downvotes)

    @staticmethod
    def _ledger_count(
        votable_type: VotableType,
        votable_id: Union[PostId, CommentId],
        vote_type: VoteType,
    ):
        return (
            select(func.count())
            .select_from(votes_table)
            .where(
                and_(
                    votes_table.c.votable_type == votable_type.value,
                    votes_table.c.votable_id == votable_id,
                    votes_table.c.vote_type == vote_type.value,
                )
            )
            .scalar_subquery()
        )
