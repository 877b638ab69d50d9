"""PostgreSQL implementation of Poll repository."""

from collections import defaultdict
from typing import List, Optional, Sequence

import logfire
from sqlalchemy import and_, delete, desc, func, insert, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from engage.domain.error import ConcurrentVoteError, NotFoundError
from engage.domain.model import Poll, PollOption, PollVote
from engage.domain.repository import PollRepository
from engage.domain.value import PollId, PostId, UserId
from engage.persistence.mappers import (
    poll_option_to_dict,
    poll_to_dict,
    poll_vote_to_dict,
    row_to_poll,
    row_to_poll_option,
    row_to_poll_vote,
)
from engage.persistence.tables import poll_options_table, poll_votes_table, polls_table


class PostgresPollRepository(PollRepository):
    """PostgreSQL implementation of PollRepository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def _fetch_options_for_polls(
        self, poll_ids: list[PollId]
    ) -> dict[PollId, list[PollOption]]:
        """Fetch options for multiple polls in a single query."""
        if not poll_ids:
            return {}

        stmt = select(poll_options_table).where(
            poll_options_table.c.poll_id.in_(poll_ids)
        )
        result = await self.session.execute(stmt)

        options: dict[PollId, list[PollOption]] = defaultdict(list)
        for row in result.fetchall():
            option = row_to_poll_option(row._asdict())
            options[option.poll_id].append(option)
        return options

    async def find_by_id(self, poll_id: PollId) -> Optional[Poll]:
        """Find a poll by ID."""
        result = await self.session.execute(
            select(polls_table).where(polls_table.c.id == poll_id)
        )
        row = result.fetchone()
        if not row:
            return None

        options = await self._fetch_options_for_polls([poll_id])
        return row_to_poll(row._asdict(), options.get(poll_id, []))

    async def find_by_post(self, post_id: PostId, active_only: bool = True) -> List[Poll]:
        """Find polls attached to a post, newest first."""
        stmt = select(polls_table).where(polls_table.c.post_id == post_id)
        if active_only:
            stmt = stmt.where(polls_table.c.is_active.is_(True))
        result = await self.session.execute(
            stmt.order_by(desc(polls_table.c.created_at))
        )
        rows = [row._asdict() for row in result.fetchall()]

        options = await self._fetch_options_for_polls([row["id"] for row in rows])
        return [row_to_poll(row, options.get(row["id"], [])) for row in rows]

    async def save(self, poll: Poll) -> Poll:
        """Insert a poll and its options in one SAVEPOINT."""
        with logfire.span("poll_repository.save", poll_id=str(poll.id)):
            async with self.session.begin_nested():
                result = await self.session.execute(
                    insert(polls_table).values(**poll_to_dict(poll)).returning(polls_table)
                )
                row = result.one()._asdict()
                if poll.options:
                    await self.session.execute(
                        insert(poll_options_table),
                        [poll_option_to_dict(option) for option in poll.options],
                    )
            return row_to_poll(row, poll.options)

    async def update(self, poll: Poll) -> Poll:
        """Update a poll's own fields."""
        values = poll_to_dict(poll)
        for key in ("id", "post_id", "author_id"):
            values.pop(key)
        stmt = (
            update(polls_table)
            .where(polls_table.c.id == poll.id)
            .values(**values, updated_at=func.now())
            .returning(polls_table)
        )
        result = await self.session.execute(stmt)
        row = result.fetchone()
        if not row:
            raise NotFoundError("Poll", str(poll.id))
        return row_to_poll(row._asdict(), poll.options)

    async def delete(self, poll_id: PollId) -> bool:
        """Delete a poll (options and votes go by cascade)."""
        result = await self.session.execute(
            delete(polls_table)
            .where(polls_table.c.id == poll_id)
            .returning(polls_table.c.id)
        )
        return result.fetchone() is not None

    async def find_votes(self, poll_id: PollId) -> List[PollVote]:
        """Find every vote cast on a poll."""
        result = await self.session.execute(
            select(poll_votes_table).where(poll_votes_table.c.poll_id == poll_id)
        )
        return [row_to_poll_vote(row._asdict()) for row in result.fetchall()]

    async def find_user_votes(self, poll_id: PollId, user_id: UserId) -> List[PollVote]:
        """Find the votes a user cast on a poll."""
        result = await self.session.execute(
            select(poll_votes_table).where(
                and_(
                    poll_votes_table.c.poll_id == poll_id,
                    poll_votes_table.c.user_id == user_id,
                )
            )
        )
        return [row_to_poll_vote(row._asdict()) for row in result.fetchall()]

    async def add_votes(self, poll: Poll, votes: Sequence[PollVote]) -> None:
        """Insert poll votes in one SAVEPOINT (all or nothing)."""
        if not votes:
            return

        exclusive = not poll.allow_multiple_votes
        with logfire.span(
            "poll_repository.add_votes", poll_id=str(poll.id), count=len(votes)
        ):
            try:
                async with self.session.begin_nested():
                    await self.session.execute(
                        insert(poll_votes_table),
                        [poll_vote_to_dict(vote, exclusive) for vote in votes],
                    )
            except IntegrityError as e:
                logfire.warn(
                    "Poll vote uniqueness violated, unit rolled back",
                    poll_id=str(poll.id),
                )
                raise ConcurrentVoteError("Poll vote already recorded") from e
