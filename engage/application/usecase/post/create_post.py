"""Create post use case."""

from uuid import UUID

from pydantic import BaseModel

from engage.domain.service import PostService
from engage.domain.value import UserId

from .get_post import PostView


class CreatePostRequest(BaseModel):
    """Create post request."""

    title: str
    content: str
    user_id: str  # Author ID from authenticated user


class CreatePostUseCase:
    """Use case for creating a post."""

    def __init__(self, post_service: PostService) -> None:
        """Initialize create post use case.

        Args:
            post_service: Post domain service
        """
        self.post_service = post_service

    async def execute(self, request: CreatePostRequest) -> PostView:
        """Execute create post flow.

        Raises:
            ValidationError: If title or content is blank
            ForbiddenError: If the user may not publish
        """
        post = await self.post_service.create_post(
            author_id=UserId(UUID(request.user_id)),
            title=request.title,
            content=request.content,
        )
        return PostView.from_post(post)
