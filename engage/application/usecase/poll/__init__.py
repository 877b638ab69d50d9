"""Poll use cases."""

from .create_poll import CreatePollRequest, CreatePollUseCase
from .get_poll import (
    GetPollRequest,
    GetPollUseCase,
    ListPostPollsRequest,
    ListPostPollsResponse,
    ListPostPollsUseCase,
    PollOptionView,
    PollView,
)
from .manage_poll import (
    DeletePollRequest,
    DeletePollResponse,
    DeletePollUseCase,
    UpdatePollRequest,
    UpdatePollUseCase,
)
from .poll_stats import (
    GetPollStatsRequest,
    GetPollStatsUseCase,
    PollOptionStatsView,
    PollStatsView,
)
from .vote_poll import VotePollRequest, VotePollUseCase

__all__ = [
    "CreatePollRequest",
    "CreatePollUseCase",
    "DeletePollRequest",
    "DeletePollResponse",
    "DeletePollUseCase",
    "GetPollRequest",
    "GetPollStatsRequest",
    "GetPollStatsUseCase",
    "GetPollUseCase",
    "ListPostPollsRequest",
    "ListPostPollsResponse",
    "ListPostPollsUseCase",
    "PollOptionStatsView",
    "PollOptionView",
    "PollStatsView",
    "PollView",
    "UpdatePollRequest",
    "UpdatePollUseCase",
    "VotePollRequest",
    "VotePollUseCase",
]
