"""Poll management use cases (update, delete)."""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel

from engage.domain.service import PollService
from engage.domain.value import PollId, UserId

from .get_poll import PollView


class UpdatePollRequest(BaseModel):
    """Update poll request. Omitted fields keep their current value."""

    poll_id: UUID
    user_id: str
    question: Optional[str] = None
    description: Optional[str] = None
    is_active: Optional[bool] = None
    allow_multiple_votes: Optional[bool] = None
    expires_at: Optional[datetime] = None


class UpdatePollUseCase:
    """Use case for editing a poll (post owner or admin)."""

    def __init__(self, poll_service: PollService) -> None:
        self.poll_service = poll_service

    async def execute(self, request: UpdatePollRequest) -> PollView:
        results = await self.poll_service.update_poll(
            poll_id=PollId(request.poll_id),
            actor_id=UserId(UUID(request.user_id)),
            question=request.question,
            description=request.description,
            is_active=request.is_active,
            allow_multiple_votes=request.allow_multiple_votes,
            expires_at=request.expires_at,
        )
        return PollView.from_results(results)


class DeletePollRequest(BaseModel):
    """Delete poll request."""

    poll_id: UUID
    user_id: str


class DeletePollResponse(BaseModel):
    """Delete poll response."""

    message: str


class DeletePollUseCase:
    """Use case for deleting a poll (admin only)."""

    def __init__(self, poll_service: PollService) -> None:
        self.poll_service = poll_service

    async def execute(self, request: DeletePollRequest) -> DeletePollResponse:
        await self.poll_service.delete_poll(
            PollId(request.poll_id), UserId(UUID(request.user_id))
        )
        return DeletePollResponse(message="Poll deleted successfully")
