"""Vote transition rules.

A pure function of (current vote, requested vote). It knows nothing about
storage; the ledger applies whatever it returns.

    current   requested   action   up   down
    -------   ---------   ------   --   ----
    none      upvote      insert   +1    0
    none      downvote    insert    0   +1
    upvote    upvote      delete   -1    0
    downvote  downvote    delete    0   -1
    upvote    downvote    update   -1   +1
    downvote  upvote      update   +1   -1
"""

from typing import Optional

from engage.domain.model.vote import VoteAction, VoteTransition
from engage.domain.value import VoteType


def _delta(vote_type: Optional[VoteType], sign: int) -> tuple[int, int]:
    if vote_type == VoteType.UPVOTE:
        return sign, 0
    if vote_type == VoteType.DOWNVOTE:
        return 0, sign
    return 0, 0


def decide(current: Optional[VoteType], requested: VoteType) -> VoteTransition:
    """Compute the transition from a user's current vote to the requested one.

    Repeating the current vote toggles it off; the opposite vote switches it.

    Args:
        current: The user's stored vote on the item, if any
        requested: The vote the user just asked for

    Returns:
        The ledger action, the resulting vote and the counter deltas
    """
    if current is None:
        action, resulting = VoteAction.INSERT, requested
    elif current == requested:
        action, resulting = VoteAction.DELETE, None
    else:
        action, resulting = VoteAction.UPDATE, requested

    removed_up, removed_down = _delta(current, -1)
    added_up, added_down = _delta(resulting, +1)

    return VoteTransition(
        action=action,
        previous=current,
        resulting=resulting,
        upvote_delta=removed_up + added_up,
        downvote_delta=removed_down + added_down,
    )
