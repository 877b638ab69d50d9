"""PostgreSQL implementation of Comment repository."""

from typing import List, Optional

from sqlalchemy import and_, delete, desc, insert, select
from sqlalchemy.ext.asyncio import AsyncSession

from engage.domain.model import Comment
from engage.domain.repository import CommentRepository
from engage.domain.value import CommentId, PostId, VotableType
from engage.persistence.mappers import comment_to_dict, row_to_comment
from engage.persistence.tables import comments_table, votes_table


class PostgresCommentRepository(CommentRepository):
    """PostgreSQL implementation of CommentRepository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def find_by_id(self, comment_id: CommentId) -> Optional[Comment]:
        """Find a comment by ID."""
        stmt = select(comments_table).where(comments_table.c.id == comment_id)
        result = await self.session.execute(stmt)
        row = result.fetchone()
        return row_to_comment(row._asdict()) if row else None

    async def find_by_post(self, post_id: PostId) -> List[Comment]:
        """Find all comments on a post, most upvoted first."""
        stmt = (
            select(comments_table)
            .where(comments_table.c.post_id == post_id)
            .order_by(desc(comments_table.c.upvotes), desc(comments_table.c.created_at))
        )
        result = await self.session.execute(stmt)
        return [row_to_comment(row._asdict()) for row in result.fetchall()]

    async def save(self, comment: Comment) -> Comment:
        """Insert a new comment."""
        stmt = (
            insert(comments_table)
            .values(**comment_to_dict(comment))
            .returning(comments_table)
        )
        result = await self.session.execute(stmt)
        return row_to_comment(result.one()._asdict())

    async def delete(self, comment_id: CommentId) -> bool:
        """Delete a comment and its ledger rows."""
        async with self.session.begin_nested():
            await self.session.execute(
                delete(votes_table).where(
                    and_(
                        votes_table.c.votable_type == VotableType.COMMENT.value,
                        votes_table.c.votable_id == comment_id,
                    )
                )
            )
            result = await self.session.execute(
                delete(comments_table)
                .where(comments_table.c.id == comment_id)
                .returning(comments_table.c.id)
            )
            return result.fetchone() is not None
