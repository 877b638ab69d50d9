"""Get comments use case."""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel

from engage.domain.model import Comment
from engage.domain.service import CommentService, VoteService
from engage.domain.value import Handle, PostId, UserId, VotableType, VoteType


class CommentView(BaseModel):
    """A comment as returned by the API."""

    comment_id: str
    post_id: str
    author_id: str
    author_handle: Handle
    text: str
    upvotes: int
    downvotes: int
    created_at: datetime
    updated_at: datetime
    user_vote: Optional[VoteType] = None

    @classmethod
    def from_comment(
        cls, comment: Comment, user_vote: Optional[VoteType] = None
    ) -> "CommentView":
        """Build the view of a comment for a viewer with ``user_vote``."""
        return cls(
            comment_id=str(comment.id),
            post_id=str(comment.post_id),
            author_id=str(comment.author_id),
            author_handle=comment.author_handle,
            text=comment.text,
            upvotes=comment.upvotes,
            downvotes=comment.downvotes,
            created_at=comment.created_at,
            updated_at=comment.updated_at,
            user_vote=user_vote,
        )


class GetCommentsRequest(BaseModel):
    """Get comments request."""

    post_id: UUID
    user_id: str | None = None  # Current user ID (if authenticated)


class GetCommentsResponse(BaseModel):
    """Get comments response."""

    comments: list[CommentView]


class GetCommentsUseCase:
    """Use case for listing the comments of a post."""

    def __init__(
        self, comment_service: CommentService, vote_service: VoteService
    ) -> None:
        """Initialize get comments use case.

        Args:
            comment_service: Comment domain service
            vote_service: Vote domain service
        """
        self.comment_service = comment_service
        self.vote_service = vote_service

    async def execute(self, request: GetCommentsRequest) -> GetCommentsResponse:
        """Execute get comments flow.

        Raises:
            NotFoundError: If the post doesn't exist
        """
        comments = await self.comment_service.get_comments_for_post(
            PostId(request.post_id)
        )

        viewer = UserId(UUID(request.user_id)) if request.user_id else None
        votes = await self.vote_service.get_user_votes(
            viewer, VotableType.COMMENT, [comment.id for comment in comments]
        )

        return GetCommentsResponse(
            comments=[
                CommentView.from_comment(comment, votes.get(comment.id))
                for comment in comments
            ]
        )
