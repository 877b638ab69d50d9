"""Post moderation use cases (admin only)."""

from uuid import UUID

from pydantic import BaseModel

from engage.domain.service import PostService
from engage.domain.value import PostId, UserId

from .get_post import PostView


class ModeratePostRequest(BaseModel):
    """Request naming a post and the acting administrator."""

    post_id: UUID
    user_id: str


class DeletePostResponse(BaseModel):
    """Delete post response."""

    message: str


class ToggleBlockPostUseCase:
    """Use case for blocking or unblocking a post."""

    def __init__(self, post_service: PostService) -> None:
        self.post_service = post_service

    async def execute(self, request: ModeratePostRequest) -> PostView:
        post = await self.post_service.toggle_blocked(
            PostId(request.post_id), UserId(UUID(request.user_id))
        )
        return PostView.from_post(post)


class DeletePostUseCase:
    """Use case for deleting a post with everything attached to it."""

    def __init__(self, post_service: PostService) -> None:
        self.post_service = post_service

    async def execute(self, request: ModeratePostRequest) -> DeletePostResponse:
        await self.post_service.delete_post(
            PostId(request.post_id), UserId(UUID(request.user_id))
        )
        return DeletePostResponse(message="Post deleted successfully")
