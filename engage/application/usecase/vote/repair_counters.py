"""Repair counters use case."""

from uuid import UUID

from pydantic import BaseModel

from engage.application.usecase.base import BaseUseCase
from engage.domain.service import VoteService
from engage.domain.value import UserId, VotableType


class RepairCountersRequest(BaseModel):
    """Repair counters request."""

    votable_type: VotableType
    votable_id: UUID
    user_id: str  # Admin user ID


class RepairCountersResponse(BaseModel):
    """Counters recomputed from the vote ledger."""

    votable_type: VotableType
    votable_id: str
    upvotes: int
    downvotes: int


class RepairCountersUseCase(BaseUseCase):
    """Use case for recomputing an item's counters from the ledger."""

    def __init__(self, vote_service: VoteService) -> None:
        self.vote_service = vote_service

    async def execute(self, request: RepairCountersRequest) -> RepairCountersResponse:
        counters = await self.vote_service.repair_counters(
            votable_type=request.votable_type,
            votable_id=request.votable_id,
            actor_id=UserId(UUID(request.user_id)),
        )
        return RepairCountersResponse(
            votable_type=request.votable_type,
            votable_id=str(request.votable_id),
            upvotes=counters.upvotes,
            downvotes=counters.downvotes,
        )
