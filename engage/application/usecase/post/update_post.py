"""Update post use case."""

from uuid import UUID

from pydantic import BaseModel

from engage.domain.service import PostService
from engage.domain.value import PostId, UserId

from .get_post import PostView


class UpdatePostRequest(BaseModel):
    """Update post request."""

    post_id: UUID
    title: str
    content: str
    user_id: str  # Editor ID from authenticated user


class UpdatePostUseCase:
    """Use case for an author editing their post."""

    def __init__(self, post_service: PostService) -> None:
        """Initialize update post use case.

        Args:
            post_service: Post domain service
        """
        self.post_service = post_service

    async def execute(self, request: UpdatePostRequest) -> PostView:
        """Execute update post flow.

        Raises:
            ValidationError: If title or content is blank
            NotFoundError: If the post doesn't exist
            ForbiddenError: If the user is not the post's author
        """
        post = await self.post_service.update_post(
            post_id=PostId(request.post_id),
            actor_id=UserId(UUID(request.user_id)),
            title=request.title,
            content=request.content,
        )
        return PostView.from_post(post)
