"""Poll results derivation.

Results are computed from the vote ledger on every read and never stored.
``total_votes`` counts distinct voters, so on a multi-choice poll the
option percentages can add up to more than 100.
"""

from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional, Sequence

from engage.domain.model.common import DomainModel
from engage.domain.model.poll import Poll, PollVote
from engage.domain.value import PollId, PollOptionId, PostId, UserId

_ONE_DECIMAL = Decimal("0.1")


class PollOptionResult(DomainModel):
    """Tally of one poll option."""

    id: PollOptionId
    option_text: str
    position: int
    vote_count: int
    percentage: float
    user_voted: bool


class PollResults(DomainModel):
    """A poll with its derived results."""

    id: PollId
    post_id: PostId
    question: str
    description: Optional[str]
    allow_multiple_votes: bool
    is_active: bool
    expires_at: Optional[datetime]
    created_at: datetime
    options: list[PollOptionResult]
    total_votes: int
    user_has_voted: bool


def percentage(vote_count: int, total_votes: int) -> float:
    """``vote_count`` as a percentage of ``total_votes``.

    Rounded half-up to one decimal place; 0 when nobody voted.
    """
    if total_votes <= 0:
        return 0.0
    share = Decimal(vote_count * 100) / Decimal(total_votes)
    return float(share.quantize(_ONE_DECIMAL, rounding=ROUND_HALF_UP))


def tally_poll(
    poll: Poll, votes: Sequence[PollVote], viewer_id: Optional[UserId] = None
) -> PollResults:
    """Derive per-option counts and percentages from a poll's votes.

    Args:
        poll: The poll, with its options
        votes: Every vote cast on the poll
        viewer_id: User to compute ``user_voted`` flags for (None if anonymous)

    Returns:
        The poll's results
    """
    counts: dict[PollOptionId, int] = {option.id: 0 for option in poll.options}
    viewer_choices: set[PollOptionId] = set()
    voters: set[UserId] = set()

    for vote in votes:
        if vote.poll_option_id not in counts:
            continue
        counts[vote.poll_option_id] += 1
        voters.add(vote.user_id)
        if viewer_id is not None and vote.user_id == viewer_id:
            viewer_choices.add(vote.poll_option_id)

    total_votes = len(voters)
    options = [
        PollOptionResult(
            id=option.id,
            option_text=option.option_text,
            position=option.position,
            vote_count=counts[option.id],
            percentage=percentage(counts[option.id], total_votes),
            user_voted=option.id in viewer_choices,
        )
        for option in sorted(poll.options, key=lambda o: o.position)
    ]

    return PollResults(
        id=poll.id,
        post_id=poll.post_id,
        question=poll.question,
        description=poll.description,
        allow_multiple_votes=poll.allow_multiple_votes,
        is_active=poll.is_active,
        expires_at=poll.expires_at,
        created_at=poll.created_at,
        options=options,
        total_votes=total_votes,
        user_has_voted=bool(viewer_choices),
    )
