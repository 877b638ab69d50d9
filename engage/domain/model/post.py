"""Post aggregate root.

Posts carry denormalized ``upvotes``/``downvotes`` counters. The counters
are written only by the vote ledger, in the same unit of work as the vote
row they reflect.
"""

from datetime import datetime

from pydantic import Field

from engage.domain.model.common import DomainModel
from engage.domain.value import Handle, PostId, Slug, UserId


class Post(DomainModel):
    """Post aggregate root."""

    id: PostId
    slug: Slug
    title: str = Field(min_length=1, max_length=300)
    content: str = Field(min_length=1, max_length=20000)
    author_id: UserId
    author_handle: Handle
    upvotes: int = Field(default=0, ge=0)
    downvotes: int = Field(default=0, ge=0)
    blocked: bool = False  # Moderation flag: blocked posts accept no votes
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)

    @property
    def score(self) -> int:
        """Net score used by the popular sort."""
        return self.upvotes - self.downvotes
