"""Domain value objects for Engage."""

from engage.domain.value.identifiers import (
    CommentId,
    PollId,
    PollOptionId,
    PollVoteId,
    PostId,
    UserId,
    VoteId,
)
from engage.domain.value.types import (
    Handle,
    PostSortOrder,
    Slug,
    UserRole,
    VotableType,
    VoteDirection,
    VoteType,
)

__all__ = [
    # Identifiers
    "UserId",
    "PostId",
    "CommentId",
    "VoteId",
    "PollId",
    "PollOptionId",
    "PollVoteId",
    # Types
    "Handle",
    "PostSortOrder",
    "Slug",
    "UserRole",
    "VotableType",
    "VoteDirection",
    "VoteType",
]
