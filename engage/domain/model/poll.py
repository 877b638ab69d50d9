"""Poll aggregate.

A poll hangs off a post and owns an ordered list of options. Poll votes
are ledger rows only; tallies are derived from them on every read.
"""

from datetime import datetime
from typing import Optional

from pydantic import Field

from engage.domain.model.common import DomainModel
from engage.domain.value import PollId, PollOptionId, PollVoteId, PostId, UserId


class PollOption(DomainModel):
    """One answer of a poll."""

    id: PollOptionId
    poll_id: PollId
    option_text: str = Field(min_length=1, max_length=500)
    position: int = Field(default=0, ge=0)


class Poll(DomainModel):
    """Poll aggregate root."""

    id: PollId
    post_id: PostId
    author_id: UserId
    question: str = Field(min_length=1, max_length=500)
    description: Optional[str] = Field(default=None, max_length=2000)
    allow_multiple_votes: bool = False
    is_active: bool = True
    expires_at: Optional[datetime] = None
    options: list[PollOption] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)

    def is_expired(self, now: datetime) -> bool:
        """Whether ``expires_at`` has passed at ``now``."""
        if self.expires_at is None:
            return False
        if self.expires_at.tzinfo is not None and now.tzinfo is None:
            now = now.astimezone()
        elif self.expires_at.tzinfo is None and now.tzinfo is not None:
            now = now.astimezone().replace(tzinfo=None)
        return now > self.expires_at

    @property
    def option_ids(self) -> set[PollOptionId]:
        """IDs of the options that belong to this poll."""
        return {option.id for option in self.options}


class PollVote(DomainModel):
    """A user's vote for one poll option."""

    id: PollVoteId
    poll_id: PollId
    poll_option_id: PollOptionId
    user_id: UserId
    created_at: datetime = Field(default_factory=datetime.now)
