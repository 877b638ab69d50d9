"""In-memory comment repository for testing."""

from typing import Optional

from engage.domain.model.comment import Comment
from engage.domain.repository.comment import CommentRepository
from engage.domain.value import CommentId, PostId, VotableType

from .store import InMemoryStore


class InMemoryCommentRepository(CommentRepository):
    """In-memory implementation of CommentRepository for testing."""

    def __init__(self, store: InMemoryStore | None = None) -> None:
        self._store = store or InMemoryStore()

    async def find_by_id(self, comment_id: CommentId) -> Optional[Comment]:
        """Find a comment by ID."""
        return self._store.comments.get(comment_id)

    async def find_by_post(self, post_id: PostId) -> list[Comment]:
        """Find all comments on a post, most upvoted first."""
        comments = [c for c in self._store.comments.values() if c.post_id == post_id]
        comments.sort(key=lambda c: c.created_at, reverse=True)
        comments.sort(key=lambda c: c.upvotes, reverse=True)
        return comments

    async def save(self, comment: Comment) -> Comment:
        """Insert a new comment with zero counters."""
        saved = comment.model_copy(update={"upvotes": 0, "downvotes": 0})
        self._store.comments[saved.id] = saved
        return saved

    async def delete(self, comment_id: CommentId) -> bool:
        """Delete a comment and its votes."""
        if self._store.comments.pop(comment_id, None) is None:
            return False
        self._store.drop_votes_on(VotableType.COMMENT, comment_id)
        return True
