"""PostgreSQL implementation of the vote ledger."""

from typing import List, Optional, Sequence, Union
from uuid import uuid4

import logfire
from sqlalchemy import and_, delete, func, select, update
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from engage.domain.error import ConcurrentVoteError, NotFoundError
from engage.domain.model import Vote, VoteAction, VoteCounters, VoteTransition
from engage.domain.repository import VoteRepository
from engage.domain.value import CommentId, PostId, UserId, VotableType, VoteType
from engage.persistence.counters import CounterMutator
from engage.persistence.mappers import row_to_vote
from engage.persistence.tables import votes_table


class PostgresVoteRepository(VoteRepository):
    """PostgreSQL implementation of VoteRepository.

    Each ``apply`` runs in a SAVEPOINT, so a lost race rolls back only the
    vote being applied and leaves the request transaction usable for a
    retry.
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session
        self.counters = CounterMutator(session)

    def _row_filter(
        self,
        user_id: UserId,
        votable_type: VotableType,
        votable_id: Union[PostId, CommentId],
    ):
        return and_(
            votes_table.c.user_id == user_id,
            votes_table.c.votable_type == votable_type.value,
            votes_table.c.votable_id == votable_id,
        )

    async def find_by_user_and_votable(
        self,
        user_id: UserId,
        votable_type: VotableType,
        votable_id: Union[PostId, CommentId],
    ) -> Optional[Vote]:
        """Find a user's vote on a specific item."""
        stmt = select(votes_table).where(
            self._row_filter(user_id, votable_type, votable_id)
        )
        result = await self.session.execute(stmt)
        row = result.fetchone()
        return row_to_vote(row._asdict()) if row else None

    async def find_by_user_and_votables(
        self,
        user_id: UserId,
        votable_type: VotableType,
        votable_ids: Sequence[Union[PostId, CommentId]],
    ) -> List[Vote]:
        """Find a user's votes on multiple items (batch query)."""
        if not votable_ids:
            return []

        stmt = select(votes_table).where(
            and_(
                votes_table.c.user_id == user_id,
                votes_table.c.votable_type == votable_type.value,
                votes_table.c.votable_id.in_(votable_ids),
            )
        )
        result = await self.session.execute(stmt)
        return [row_to_vote(row._asdict()) for row in result.fetchall()]

    async def count_by_votable(
        self,
        votable_type: VotableType,
        votable_id: Union[PostId, CommentId],
    ) -> VoteCounters:
        """Count ledger rows on an item, split by vote type."""
        stmt = (
            select(votes_table.c.vote_type, func.count())
            .where(
                and_(
                    votes_table.c.votable_type == votable_type.value,
                    votes_table.c.votable_id == votable_id,
                )
            )
            .group_by(votes_table.c.vote_type)
        )
        result = await self.session.execute(stmt)
        counts = {VoteType(vote_type): count for vote_type, count in result.all()}
        return VoteCounters(
            upvotes=counts.get(VoteType.UPVOTE, 0),
            downvotes=counts.get(VoteType.DOWNVOTE, 0),
        )

    async def apply(
        self,
        user_id: UserId,
        votable_type: VotableType,
        votable_id: Union[PostId, CommentId],
        transition: VoteTransition,
    ) -> VoteCounters:
        """Write the ledger change and its counter delta in one SAVEPOINT."""
        with logfire.span(
            "vote_repository.apply",
            votable_type=votable_type.value,
            votable_id=str(votable_id),
            action=transition.action.value,
        ):
            try:
                async with self.session.begin_nested():
                    if not await self._write_ledger(
                        user_id, votable_type, votable_id, transition
                    ):
                        raise ConcurrentVoteError(
                            "Vote changed since it was read"
                        )

                    counters = await self.counters.apply_delta(
                        votable_type,
                        votable_id,
                        transition.upvote_delta,
                        transition.downvote_delta,
                    )
                    if counters is None:
                        raise NotFoundError(
                            votable_type.value.capitalize(), str(votable_id)
                        )
            except IntegrityError as e:
                logfire.warn(
                    "Ledger constraint violated, unit rolled back",
                    votable_id=str(votable_id),
                    user_id=str(user_id),
                )
                raise ConcurrentVoteError(
                    "Vote was recorded by a concurrent request"
                ) from e

            return counters

    async def _write_ledger(
        self,
        user_id: UserId,
        votable_type: VotableType,
        votable_id: Union[PostId, CommentId],
        transition: VoteTransition,
    ) -> bool:
        """Write one ledger row change, guarded by the expected previous vote.

        Returns:
            False if the stored row no longer matches ``transition.previous``
        """
        if transition.action == VoteAction.INSERT:
            stmt = (
                insert(votes_table)
                .values(
                    id=uuid4(),
                    user_id=user_id,
                    votable_type=votable_type.value,
                    votable_id=votable_id,
                    vote_type=transition.resulting.value,
                )
                .on_conflict_do_nothing(constraint="unique_vote")
                .returning(votes_table.c.id)
            )
        elif transition.action == VoteAction.UPDATE:
            stmt = (
                update(votes_table)
                .where(self._row_filter(user_id, votable_type, votable_id))
                .where(votes_table.c.vote_type == transition.previous.value)
                .values(vote_type=transition.resulting.value, updated_at=func.now())
                .returning(votes_table.c.id)
            )
        else:
            stmt = (
                delete(votes_table)
                .where(self._row_filter(user_id, votable_type, votable_id))
                .where(votes_table.c.vote_type == transition.previous.value)
                .returning(votes_table.c.id)
            )

        result = await self.session.execute(stmt)
        return result.fetchone() is not None

    async def recount(
        self,
        votable_type: VotableType,
        votable_id: Union[PostId, CommentId],
    ) -> VoteCounters:
        """Recompute an item's counters from the ledger."""
        with logfire.span(
            "vote_repository.recount",
            votable_type=votable_type.value,
            votable_id=str(votable_id),
        ):
            counters = await self.counters.recount(votable_type, votable_id)
            if counters is None:
                raise NotFoundError(votable_type.value.capitalize(), str(votable_id))
            return counters
