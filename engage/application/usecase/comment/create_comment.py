"""Create comment use case."""

from uuid import UUID

from pydantic import BaseModel

from engage.domain.service import CommentService
from engage.domain.value import PostId, UserId

from .get_comments import CommentView


class CreateCommentRequest(BaseModel):
    """Create comment request."""

    post_id: UUID
    text: str
    user_id: str  # Author ID from authenticated user


class CreateCommentUseCase:
    """Use case for commenting on a post."""

    def __init__(self, comment_service: CommentService) -> None:
        """Initialize create comment use case.

        Args:
            comment_service: Comment domain service
        """
        self.comment_service = comment_service

    async def execute(self, request: CreateCommentRequest) -> CommentView:
        """Execute create comment flow.

        Raises:
            NotFoundError: If the post doesn't exist
            ForbiddenError: If the user may not publish or the post is blocked
        """
        comment = await self.comment_service.create_comment(
            post_id=PostId(request.post_id),
            author_id=UserId(UUID(request.user_id)),
            text=request.text,
        )
        return CommentView.from_comment(comment)
