"""Poll statistics use case (admin only)."""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel

from engage.domain.service import PollResults, PollService
from engage.domain.value import PollId, UserId


class PollOptionStatsView(BaseModel):
    """Count and share of one option."""

    option_text: str
    vote_count: int
    percentage: float


class PollStatsView(BaseModel):
    """Voting statistics of a poll."""

    id: str
    question: str
    is_active: bool
    created_at: datetime
    expires_at: Optional[datetime]
    total_voters: int
    options: list[PollOptionStatsView]

    @classmethod
    def from_results(cls, results: PollResults) -> "PollStatsView":
        return cls(
            id=str(results.id),
            question=results.question,
            is_active=results.is_active,
            created_at=results.created_at,
            expires_at=results.expires_at,
            total_voters=results.total_votes,
            options=[
                PollOptionStatsView(
                    option_text=option.option_text,
                    vote_count=option.vote_count,
                    percentage=option.percentage,
                )
                for option in results.options
            ],
        )


class GetPollStatsRequest(BaseModel):
    """Poll statistics request."""

    poll_id: UUID
    user_id: str  # Administrator ID from authenticated user


class GetPollStatsUseCase:
    """Use case for an administrator inspecting a poll's statistics."""

    def __init__(self, poll_service: PollService) -> None:
        self.poll_service = poll_service

    async def execute(self, request: GetPollStatsRequest) -> PollStatsView:
        """Execute poll statistics flow.

        Raises:
            ForbiddenError: If the user is not an administrator
            NotFoundError: If the poll doesn't exist
        """
        results = await self.poll_service.get_stats(
            PollId(request.poll_id), UserId(UUID(request.user_id))
        )
        return PollStatsView.from_results(results)
