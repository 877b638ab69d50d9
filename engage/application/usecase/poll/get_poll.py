"""Get poll use cases."""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel

from engage.domain.service import PollResults, PollService
from engage.domain.value import PollId, PostId, UserId


class PollOptionView(BaseModel):
    """Tally of one poll option as returned by the API."""

    id: str
    option_text: str
    vote_count: int
    percentage: float
    user_voted: bool


class PollView(BaseModel):
    """A poll with its results as returned by the API."""

    id: str
    post_id: str
    question: str
    description: Optional[str]
    allow_multiple_votes: bool
    is_active: bool
    expires_at: Optional[datetime]
    created_at: datetime
    options: list[PollOptionView]
    total_votes: int
    user_has_voted: bool

    @classmethod
    def from_results(cls, results: PollResults) -> "PollView":
        """Build the API view of tallied poll results."""
        return cls(
            id=str(results.id),
            post_id=str(results.post_id),
            question=results.question,
            description=results.description,
            allow_multiple_votes=results.allow_multiple_votes,
            is_active=results.is_active,
            expires_at=results.expires_at,
            created_at=results.created_at,
            options=[
                PollOptionView(
                    id=str(option.id),
                    option_text=option.option_text,
                    vote_count=option.vote_count,
                    percentage=option.percentage,
                    user_voted=option.user_voted,
                )
                for option in results.options
            ],
            total_votes=results.total_votes,
            user_has_voted=results.user_has_voted,
        )


def _viewer(user_id: str | None) -> UserId | None:
    return UserId(UUID(user_id)) if user_id else None


class GetPollRequest(BaseModel):
    """Get poll request."""

    poll_id: UUID
    user_id: str | None = None  # Current user ID (if authenticated)


class GetPollUseCase:
    """Use case for reading one poll with its results."""

    def __init__(self, poll_service: PollService) -> None:
        """Initialize get poll use case.

        Args:
            poll_service: Poll domain service
        """
        self.poll_service = poll_service

    async def execute(self, request: GetPollRequest) -> PollView:
        """Execute get poll flow.

        Raises:
            NotFoundError: If the poll doesn't exist
        """
        results = await self.poll_service.get_results(
            PollId(request.poll_id), _viewer(request.user_id)
        )
        return PollView.from_results(results)


class ListPostPollsRequest(BaseModel):
    """List the active polls of a post."""

    post_id: UUID
    user_id: str | None = None


class ListPostPollsResponse(BaseModel):
    """Active polls of a post, newest first."""

    polls: list[PollView]


class ListPostPollsUseCase:
    """Use case for listing a post's active polls with their results."""

    def __init__(self, poll_service: PollService) -> None:
        self.poll_service = poll_service

    async def execute(self, request: ListPostPollsRequest) -> ListPostPollsResponse:
        results = await self.poll_service.list_for_post(
            PostId(request.post_id), _viewer(request.user_id)
        )
        return ListPostPollsResponse(polls=[PollView.from_results(r) for r in results])
