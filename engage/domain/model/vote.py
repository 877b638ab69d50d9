"""Vote entity and aggregate counter snapshot.

The votes table is the ledger: the single source of truth for who voted
what. Each user holds at most one vote per item (post or comment).
"""

from datetime import datetime
from enum import Enum
from typing import Optional
from uuid import UUID

from pydantic import Field

from engage.domain.model.common import DomainModel
from engage.domain.value import UserId, VotableType, VoteId, VoteType


class Vote(DomainModel):
    """Vote entity.

    Business rules:
    - One vote per user per item (enforced by database unique constraint)
    - Repeating the same vote removes it, the opposite vote flips it
    - Polymorphic reference to votable (post or comment)
    """

    id: VoteId
    user_id: UserId
    votable_type: VotableType
    votable_id: UUID  # PostId or CommentId (both are UUIDs)
    vote_type: VoteType
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)


class VoteCounters(DomainModel):
    """Aggregate counters of a votable item after a ledger change."""

    upvotes: int = Field(ge=0)
    downvotes: int = Field(ge=0)


class VoteAction(str, Enum):
    """Ledger write required by a vote request."""

    INSERT = "insert"
    UPDATE = "update"
    DELETE = "delete"


class VoteTransition(DomainModel):
    """Outcome of applying a requested vote to a user's current vote.

    ``previous`` is the vote the decision was based on; the ledger write is
    only valid while the stored vote still equals it.
    """

    action: VoteAction
    previous: Optional[VoteType] = None
    resulting: Optional[VoteType] = None
    upvote_delta: int = Field(ge=-1, le=1)
    downvote_delta: int = Field(ge=-1, le=1)
