"""Unit tests for the vote transition table."""

import pytest

from engage.domain.model.vote import VoteAction
from engage.domain.service import decide
from engage.domain.value import VoteType

UP = VoteType.UPVOTE
DOWN = VoteType.DOWNVOTE


@pytest.mark.parametrize(
    "current, requested, action, resulting, up_delta, down_delta",
    [
        (None, UP, VoteAction.INSERT, UP, 1, 0),
        (None, DOWN, VoteAction.INSERT, DOWN, 0, 1),
        (UP, UP, VoteAction.DELETE, None, -1, 0),
        (DOWN, DOWN, VoteAction.DELETE, None, 0, -1),
        (UP, DOWN, VoteAction.UPDATE, DOWN, -1, 1),
        (DOWN, UP, VoteAction.UPDATE, UP, 1, -1),
    ],
)
def test_decide_covers_every_state(
    current, requested, action, resulting, up_delta, down_delta
):
    """Each (current, requested) pair maps to exactly one transition."""
    transition = decide(current, requested)

    assert transition.action == action
    assert transition.previous == current
    assert transition.resulting == resulting
    assert transition.upvote_delta == up_delta
    assert transition.downvote_delta == down_delta


@pytest.mark.parametrize("current", [None, UP, DOWN])
@pytest.mark.parametrize("requested", [UP, DOWN])
def test_deltas_match_state_change(current, requested):
    """Deltas equal the difference between the resulting and previous state."""
    transition = decide(current, requested)

    def counts(vote_type):
        return (int(vote_type == UP), int(vote_type == DOWN))

    before = counts(current)
    after = counts(transition.resulting)
    assert transition.upvote_delta == after[0] - before[0]
    assert transition.downvote_delta == after[1] - before[1]


def test_repeating_a_vote_twice_restores_initial_state():
    """Toggle: the same vote twice leaves no vote and zero net change."""
    first = decide(None, UP)
    second = decide(first.resulting, UP)

    assert second.resulting is None
    assert first.upvote_delta + second.upvote_delta == 0
    assert first.downvote_delta + second.downvote_delta == 0
