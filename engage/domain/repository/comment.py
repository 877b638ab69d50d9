"""Comment repository interface."""

from abc import ABC, abstractmethod
from typing import List, Optional

from engage.domain.model.comment import Comment
from engage.domain.value import CommentId, PostId


class CommentRepository(ABC):
    """Repository for Comment entity."""

    @abstractmethod
    async def find_by_id(self, comment_id: CommentId) -> Optional[Comment]:
        """Find a comment by ID."""
        pass

    @abstractmethod
    async def find_by_post(self, post_id: PostId) -> List[Comment]:
        """Find all comments on a post.

        Ordered by upvotes descending, then newest first.
        """
        pass

    @abstractmethod
    async def save(self, comment: Comment) -> Comment:
        """Insert a new comment with zero vote counters."""
        pass

    @abstractmethod
    async def delete(self, comment_id: CommentId) -> bool:
        """Delete a comment and its votes.

        Returns:
            True if a comment was deleted, False if none existed
        """
        pass
