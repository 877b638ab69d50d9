"""Delete comment use case."""

from uuid import UUID

from pydantic import BaseModel

from engage.domain.service import CommentService
from engage.domain.value import CommentId, UserId


class DeleteCommentRequest(BaseModel):
    """Delete comment request."""

    comment_id: UUID
    user_id: str


class DeleteCommentResponse(BaseModel):
    """Delete comment response."""

    message: str


class DeleteCommentUseCase:
    """Use case for deleting a comment (author or admin)."""

    def __init__(self, comment_service: CommentService) -> None:
        self.comment_service = comment_service

    async def execute(self, request: DeleteCommentRequest) -> DeleteCommentResponse:
        await self.comment_service.delete_comment(
            CommentId(request.comment_id), UserId(UUID(request.user_id))
        )
        return DeleteCommentResponse(message="Comment deleted successfully")
