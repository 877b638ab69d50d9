"""Get post use case."""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel

from engage.domain.model import Post
from engage.domain.service import PostService, VoteService
from engage.domain.value import Handle, UserId, VotableType, VoteType


class PostView(BaseModel):
    """A post as returned by the API."""

    post_id: str
    slug: str
    title: str
    content: str
    author_id: str
    author_handle: Handle
    upvotes: int
    downvotes: int
    blocked: bool
    created_at: datetime
    updated_at: datetime
    user_vote: Optional[VoteType] = None

    @classmethod
    def from_post(cls, post: Post, user_vote: Optional[VoteType] = None) -> "PostView":
        """Build the view of a post for a viewer with ``user_vote``."""
        return cls(
            post_id=str(post.id),
            slug=post.slug.root,
            title=post.title,
            content=post.content,
            author_id=str(post.author_id),
            author_handle=post.author_handle,
            upvotes=post.upvotes,
            downvotes=post.downvotes,
            blocked=post.blocked,
            created_at=post.created_at,
            updated_at=post.updated_at,
            user_vote=user_vote,
        )


class GetPostRequest(BaseModel):
    """Get post request.

    ``identifier`` is either the post UUID or its slug.
    """

    identifier: str
    user_id: str | None = None  # Current user ID (if authenticated)


class GetPostUseCase:
    """Use case for retrieving a post by ID or slug."""

    def __init__(self, post_service: PostService, vote_service: VoteService) -> None:
        """Initialize get post use case.

        Args:
            post_service: Post domain service
            vote_service: Vote domain service
        """
        self.post_service = post_service
        self.vote_service = vote_service

    async def execute(self, request: GetPostRequest) -> PostView:
        """Execute get post flow.

        Raises:
            NotFoundError: If no post matches the identifier
        """
        post = await self.post_service.get_post(request.identifier)

        viewer = UserId(UUID(request.user_id)) if request.user_id else None
        votes = await self.vote_service.get_user_votes(
            viewer, VotableType.POST, [post.id]
        )
        return PostView.from_post(post, votes.get(post.id))
