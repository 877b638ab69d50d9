"""Strongly typed identifiers for Engage domain entities.

Using NewType for strong typing prevents mixing up different entity IDs
and makes the code more self-documenting.
"""

from typing import NewType
from uuid import UUID

# Core domain entity identifiers
UserId = NewType("UserId", UUID)
PostId = NewType("PostId", UUID)
CommentId = NewType("CommentId", UUID)
VoteId = NewType("VoteId", UUID)

# Poll identifiers
PollId = NewType("PollId", UUID)
PollOptionId = NewType("PollOptionId", UUID)
PollVoteId = NewType("PollVoteId", UUID)
