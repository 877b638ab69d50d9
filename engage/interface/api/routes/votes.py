"""Vote routes."""

from uuid import UUID

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Cookie, Header
from pydantic import BaseModel

from engage.application.usecase.comment import CommentView
from engage.application.usecase.post import PostView
from engage.application.usecase.vote import (
    CastVoteRequest,
    CastVoteResponse,
    CastVoteUseCase,
    RepairCountersRequest,
    RepairCountersResponse,
    RepairCountersUseCase,
)
from engage.domain.service import JWTService
from engage.domain.value import VotableType, VoteDirection
from engage.interface.api.auth import require_user_id

router = APIRouter(prefix="/votes", tags=["votes"], route_class=DishkaRoute)


class CastVoteAPIRequest(BaseModel):
    """API request for voting on a post or comment."""

    direction: VoteDirection


async def _cast(
    votable_type: VotableType,
    votable_id: UUID,
    request: CastVoteAPIRequest,
    cast_vote_use_case: CastVoteUseCase,
    jwt_service: JWTService,
    auth_token: str | None,
    authorization: str | None,
) -> CastVoteResponse:
    user_id = require_user_id(jwt_service, auth_token, authorization, "vote")
    return await cast_vote_use_case.execute(
        CastVoteRequest(
            votable_type=votable_type,
            votable_id=votable_id,
            user_id=user_id,
            direction=request.direction,
        )
    )


@router.post("/post/{post_id}", response_model=PostView)
async def vote_on_post(
    post_id: UUID,
    request: CastVoteAPIRequest,
    cast_vote_use_case: FromDishka[CastVoteUseCase],
    jwt_service: FromDishka[JWTService],
    auth_token: str | None = Cookie(default=None),
    authorization: str | None = Header(default=None),
) -> CastVoteResponse:
    """Vote on a post.

    Voting again in the same direction withdraws the vote; voting in the
    other direction switches it. Requires authentication.

    Args:
        post_id: Post UUID
        request: Vote direction
        cast_vote_use_case: Cast vote use case from DI
        jwt_service: JWT service for token verification (injected)
        auth_token: JWT token from cookie
        authorization: Optional Bearer token header

    Returns:
        The updated post, carrying the caller's resulting vote
    """
    return await _cast(
        VotableType.POST,
        post_id,
        request,
        cast_vote_use_case,
        jwt_service,
        auth_token,
        authorization,
    )


@router.post("/comment/{comment_id}", response_model=CommentView)
async def vote_on_comment(
    comment_id: UUID,
    request: CastVoteAPIRequest,
    cast_vote_use_case: FromDishka[CastVoteUseCase],
    jwt_service: FromDishka[JWTService],
    auth_token: str | None = Cookie(default=None),
    authorization: str | None = Header(default=None),
) -> CastVoteResponse:
    """Vote on a comment. Same toggle and switch rules as post votes."""
    return await _cast(
        VotableType.COMMENT,
        comment_id,
        request,
        cast_vote_use_case,
        jwt_service,
        auth_token,
        authorization,
    )


@router.post("/{votable_type}/{votable_id}/recount", response_model=RepairCountersResponse)
async def recount_votes(
    votable_type: VotableType,
    votable_id: UUID,
    repair_counters_use_case: FromDishka[RepairCountersUseCase],
    jwt_service: FromDishka[JWTService],
    auth_token: str | None = Cookie(default=None),
    authorization: str | None = Header(default=None),
) -> RepairCountersResponse:
    """Recompute an item's counters from the vote ledger (admin only)."""
    user_id = require_user_id(
        jwt_service, auth_token, authorization, "repair counters"
    )
    return await repair_counters_use_case.execute(
        RepairCountersRequest(
            votable_type=votable_type,
            votable_id=votable_id,
            user_id=user_id,
        )
    )
