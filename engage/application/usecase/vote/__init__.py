"""Vote use cases."""

from .cast_vote import CastVoteRequest, CastVoteResponse, CastVoteUseCase
from .repair_counters import (
    RepairCountersRequest,
    RepairCountersResponse,
    RepairCountersUseCase,
)

__all__ = [
    "CastVoteRequest",
    "CastVoteResponse",
    "CastVoteUseCase",
    "RepairCountersRequest",
    "RepairCountersResponse",
    "RepairCountersUseCase",
]
