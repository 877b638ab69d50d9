"""Domain model entities for Engage."""

from engage.domain.model.comment import Comment
from engage.domain.model.poll import Poll, PollOption, PollVote
from engage.domain.model.post import Post
from engage.domain.model.user import User
from engage.domain.model.vote import (
    Vote,
    VoteAction,
    VoteCounters,
    VoteTransition,
)

__all__ = [
    "User",
    "Post",
    "Comment",
    "Vote",
    "VoteAction",
    "VoteCounters",
    "VoteTransition",
    "Poll",
    "PollOption",
    "PollVote",
]
