"""Shared state of the in-memory repositories.

The in-memory repositories stand in for one database: deleting a post
must cascade to its comments, votes and polls, and the vote ledger must
update counters on posts and comments. They therefore share one store.
"""

from dataclasses import dataclass, field
from uuid import UUID

from engage.domain.model import Comment, Poll, PollVote, Post, User, Vote
from engage.domain.value import CommentId, PollId, PollVoteId, PostId, UserId, VotableType


@dataclass
class InMemoryStore:
    """Tables of the in-memory database."""

    users: dict[UserId, User] = field(default_factory=dict)
    posts: dict[PostId, Post] = field(default_factory=dict)
    comments: dict[CommentId, Comment] = field(default_factory=dict)
    votes: dict[tuple[UserId, VotableType, UUID], Vote] = field(default_factory=dict)
    polls: dict[PollId, Poll] = field(default_factory=dict)
    poll_votes: dict[PollVoteId, PollVote] = field(default_factory=dict)

    def drop_votes_on(self, votable_type: VotableType, votable_id: UUID) -> None:
        """Remove every ledger row on one item."""
        for key in [k for k in self.votes if k[1] == votable_type and k[2] == votable_id]:
            del self.votes[key]
