"""Create poll use case."""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel

from engage.domain.service import PollService
from engage.domain.value import PostId, UserId

from .get_poll import PollView


class CreatePollRequest(BaseModel):
    """Create poll request."""

    post_id: UUID
    question: str
    options: list[str]
    description: Optional[str] = None
    allow_multiple_votes: bool = False
    expires_at: Optional[datetime] = None
    user_id: str  # Creator ID from authenticated user


class CreatePollUseCase:
    """Use case for attaching a poll to a post."""

    def __init__(self, poll_service: PollService) -> None:
        """Initialize create poll use case.

        Args:
            poll_service: Poll domain service
        """
        self.poll_service = poll_service

    async def execute(self, request: CreatePollRequest) -> PollView:
        """Execute create poll flow.

        Raises:
            ValidationError: If the question is blank or fewer than two options
            NotFoundError: If the post doesn't exist
            ForbiddenError: If the user may not add polls to the post
            ConflictError: If the post already has an active poll
        """
        results = await self.poll_service.create_poll(
            post_id=PostId(request.post_id),
            actor_id=UserId(UUID(request.user_id)),
            question=request.question,
            options=request.options,
            description=request.description,
            allow_multiple_votes=request.allow_multiple_votes,
            expires_at=request.expires_at,
        )
        return PollView.from_results(results)
