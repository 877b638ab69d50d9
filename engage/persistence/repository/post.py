"""PostgreSQL implementation of Post repository."""

from typing import List, Optional

import logfire
from sqlalchemy import and_, delete, desc, func, insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from engage.domain.model import Post
from engage.domain.repository import PostRepository
from engage.domain.value import PostId, PostSortOrder, Slug, VotableType
from engage.persistence.mappers import post_to_dict, row_to_post
from engage.persistence.tables import (
    comments_table,
    posts_table,
    votes_table,
)


class PostgresPostRepository(PostRepository):
    """PostgreSQL implementation of PostRepository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def find_by_id(self, post_id: PostId) -> Optional[Post]:
        """Find a post by ID."""
        stmt = select(posts_table).where(posts_table.c.id == post_id)
        result = await self.session.execute(stmt)
        row = result.fetchone()
        return row_to_post(row._asdict()) if row else None

    async def find_by_slug(self, slug: Slug) -> Optional[Post]:
        """Find a post by slug."""
        stmt = select(posts_table).where(posts_table.c.slug == slug.root)
        result = await self.session.execute(stmt)
        row = result.fetchone()
        return row_to_post(row._asdict()) if row else None

    async def slug_exists(self, slug: Slug) -> bool:
        """Check if a slug is taken."""
        stmt = (
            select(func.count())
            .select_from(posts_table)
            .where(posts_table.c.slug == slug.root)
        )
        result = await self.session.execute(stmt)
        return (result.scalar() or 0) > 0

    async def find_all(
        self,
        sort: PostSortOrder = PostSortOrder.RECENT,
        limit: int = 5,
        offset: int = 0,
    ) -> List[Post]:
        """Find posts with sorting and pagination."""
        with logfire.span(
            "post_repository.find_all", sort=sort.value, limit=limit, offset=offset
        ):
            stmt = select(posts_table)
            if sort == PostSortOrder.POPULAR:
                stmt = stmt.order_by(
                    desc(posts_table.c.upvotes - posts_table.c.downvotes),
                    desc(posts_table.c.created_at),
                )
            else:
                stmt = stmt.order_by(desc(posts_table.c.created_at))

            result = await self.session.execute(stmt.limit(limit).offset(offset))
            return [row_to_post(row._asdict()) for row in result.fetchall()]

    async def count(self) -> int:
        """Count all posts."""
        result = await self.session.execute(
            select(func.count()).select_from(posts_table)
        )
        return result.scalar() or 0

    async def save(self, post: Post) -> Post:
        """Insert a new post."""
        stmt = insert(posts_table).values(**post_to_dict(post)).returning(posts_table)
        result = await self.session.execute(stmt)
        return row_to_post(result.one()._asdict())

    async def update_content(
        self, post_id: PostId, title: str, content: str
    ) -> Optional[Post]:
        """Replace the title and body of a post."""
        stmt = (
            update(posts_table)
            .where(posts_table.c.id == post_id)
            .values(title=title, content=content, updated_at=func.now())
            .returning(posts_table)
        )
        result = await self.session.execute(stmt)
        row = result.fetchone()
        return row_to_post(row._asdict()) if row else None

    async def set_blocked(self, post_id: PostId, blocked: bool) -> Optional[Post]:
        """Set the moderation flag of a post."""
        stmt = (
            update(posts_table)
            .where(posts_table.c.id == post_id)
            .values(blocked=blocked, updated_at=func.now())
            .returning(posts_table)
        )
        result = await self.session.execute(stmt)
        row = result.fetchone()
        return row_to_post(row._asdict()) if row else None

    async def delete(self, post_id: PostId) -> bool:
        """Delete a post and everything hanging off it.

        Comments and polls go by foreign-key cascade. Ledger rows reference
        their item polymorphically, so they are removed explicitly.
        """
        with logfire.span("post_repository.delete", post_id=str(post_id)):
            async with self.session.begin_nested():
                comment_ids = select(comments_table.c.id).where(
                    comments_table.c.post_id == post_id
                )
                await self.session.execute(
                    delete(votes_table).where(
                        and_(
                            votes_table.c.votable_type == VotableType.COMMENT.value,
                            votes_table.c.votable_id.in_(comment_ids),
                        )
                    )
                )
                await self.session.execute(
                    delete(votes_table).where(
                        and_(
                            votes_table.c.votable_type == VotableType.POST.value,
                            votes_table.c.votable_id == post_id,
                        )
                    )
                )
                result = await self.session.execute(
                    delete(posts_table)
                    .where(posts_table.c.id == post_id)
                    .returning(posts_table.c.id)
                )
                return result.fetchone() is not None
