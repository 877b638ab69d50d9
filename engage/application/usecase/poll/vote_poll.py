"""Vote on poll use case."""

from uuid import UUID

from pydantic import BaseModel

from engage.domain.service import PollService
from engage.domain.value import PollId, PollOptionId, UserId

from .get_poll import PollView


class VotePollRequest(BaseModel):
    """Vote on poll request."""

    poll_id: UUID
    option_ids: list[UUID]
    user_id: str  # Voter ID from authenticated user


class VotePollUseCase:
    """Use case for casting one or more votes on a poll."""

    def __init__(self, poll_service: PollService) -> None:
        """Initialize vote poll use case.

        Args:
            poll_service: Poll domain service
        """
        self.poll_service = poll_service

    async def execute(self, request: VotePollRequest) -> PollView:
        """Execute poll vote flow.

        Returns:
            Updated results from the voter's point of view
        """
        results = await self.poll_service.cast_votes(
            poll_id=PollId(request.poll_id),
            user_id=UserId(UUID(request.user_id)),
            option_ids=[PollOptionId(option_id) for option_id in request.option_ids],
        )
        return PollView.from_results(results)
