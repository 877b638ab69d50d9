"""Poll routes."""

from datetime import datetime
from typing import Optional
from uuid import UUID

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Cookie, Header, status
from pydantic import BaseModel, ConfigDict, Field

from engage.application.usecase.poll import (
    CreatePollRequest,
    CreatePollUseCase,
    DeletePollRequest,
    DeletePollResponse,
    DeletePollUseCase,
    GetPollRequest,
    GetPollStatsRequest,
    GetPollStatsUseCase,
    GetPollUseCase,
    ListPostPollsRequest,
    ListPostPollsResponse,
    ListPostPollsUseCase,
    PollStatsView,
    PollView,
    UpdatePollRequest,
    UpdatePollUseCase,
    VotePollRequest,
    VotePollUseCase,
)
from engage.domain.service import JWTService
from engage.interface.api.auth import optional_user_id, require_user_id

router = APIRouter(prefix="/polls", tags=["polls"], route_class=DishkaRoute)


class CreatePollAPIRequest(BaseModel):
    """API request for creating a poll on a post."""

    model_config = ConfigDict(populate_by_name=True)

    post_id: UUID = Field(alias="postId")
    question: str = Field(min_length=1, max_length=500)
    description: Optional[str] = Field(default=None, max_length=2000)
    options: list[str] = Field(min_length=2, max_length=20)
    allow_multiple_votes: bool = Field(default=False, alias="allowMultipleVotes")
    expires_at: Optional[datetime] = Field(default=None, alias="expiresAt")


class VotePollAPIRequest(BaseModel):
    """API request for voting on poll options."""

    model_config = ConfigDict(populate_by_name=True)

    # Emptiness and duplicates are rejected by the poll service
    option_ids: list[UUID] = Field(alias="optionIds", max_length=20)


class UpdatePollAPIRequest(BaseModel):
    """API request for a partial poll update."""

    model_config = ConfigDict(populate_by_name=True)

    question: Optional[str] = Field(default=None, min_length=1, max_length=500)
    description: Optional[str] = Field(default=None, max_length=2000)
    is_active: Optional[bool] = Field(default=None, alias="isActive")
    allow_multiple_votes: Optional[bool] = Field(
        default=None, alias="allowMultipleVotes"
    )
    expires_at: Optional[datetime] = Field(default=None, alias="expiresAt")


@router.post("", response_model=PollView, status_code=status.HTTP_201_CREATED)
async def create_poll(
    request: CreatePollAPIRequest,
    create_poll_use_case: FromDishka[CreatePollUseCase],
    jwt_service: FromDishka[JWTService],
    auth_token: str | None = Cookie(default=None),
    authorization: str | None = Header(default=None),
) -> PollView:
    """Create a poll on a post.

    Only the post author or an admin may attach a poll, and a post has at
    most one active poll. Requires authentication.

    Args:
        request: Poll definition
        create_poll_use_case: Create poll use case from DI
        jwt_service: JWT service for token verification (injected)
        auth_token: JWT token from cookie
        authorization: Optional Bearer token header

    Returns:
        The new poll with empty results
    """
    user_id = require_user_id(jwt_service, auth_token, authorization, "create polls")
    return await create_poll_use_case.execute(
        CreatePollRequest(
            post_id=request.post_id,
            question=request.question,
            description=request.description,
            options=request.options,
            allow_multiple_votes=request.allow_multiple_votes,
            expires_at=request.expires_at,
            user_id=user_id,
        )
    )


@router.get("/post/{post_id}", response_model=ListPostPollsResponse)
async def list_post_polls(
    post_id: UUID,
    list_post_polls_use_case: FromDishka[ListPostPollsUseCase],
    jwt_service: FromDishka[JWTService],
    auth_token: str | None = Cookie(default=None),
    authorization: str | None = Header(default=None),
) -> ListPostPollsResponse:
    """List the active polls of a post with their results."""
    return await list_post_polls_use_case.execute(
        ListPostPollsRequest(
            post_id=post_id,
            user_id=optional_user_id(jwt_service, auth_token, authorization),
        )
    )


@router.get("/{poll_id}", response_model=PollView)
async def get_poll(
    poll_id: UUID,
    get_poll_use_case: FromDishka[GetPollUseCase],
    jwt_service: FromDishka[JWTService],
    auth_token: str | None = Cookie(default=None),
    authorization: str | None = Header(default=None),
) -> PollView:
    """Get a poll with its current results.

    Authentication is optional; when present, the results show which
    options the caller chose.
    """
    return await get_poll_use_case.execute(
        GetPollRequest(
            poll_id=poll_id,
            user_id=optional_user_id(jwt_service, auth_token, authorization),
        )
    )


@router.get("/{poll_id}/stats", response_model=PollStatsView)
async def get_poll_stats(
    poll_id: UUID,
    get_poll_stats_use_case: FromDishka[GetPollStatsUseCase],
    jwt_service: FromDishka[JWTService],
    auth_token: str | None = Cookie(default=None),
    authorization: str | None = Header(default=None),
) -> PollStatsView:
    """Get voter and per-option counts of a poll (admin only)."""
    user_id = require_user_id(
        jwt_service, auth_token, authorization, "view poll statistics"
    )
    return await get_poll_stats_use_case.execute(
        GetPollStatsRequest(poll_id=poll_id, user_id=user_id)
    )


@router.post("/{poll_id}/votes", response_model=PollView)
async def vote_on_poll(
    poll_id: UUID,
    request: VotePollAPIRequest,
    vote_poll_use_case: FromDishka[VotePollUseCase],
    jwt_service: FromDishka[JWTService],
    auth_token: str | None = Cookie(default=None),
    authorization: str | None = Header(default=None),
) -> PollView:
    """Vote for one or more options of a poll.

    Single-choice polls accept exactly one option, once per user.
    Multiple-choice polls accept several options, each at most once per user.

    Args:
        poll_id: Poll UUID
        request: Chosen option IDs
        vote_poll_use_case: Vote poll use case from DI
        jwt_service: JWT service for token verification (injected)
        auth_token: JWT token from cookie
        authorization: Optional Bearer token header

    Returns:
        Updated poll results
    """
    user_id = require_user_id(jwt_service, auth_token, authorization, "vote")
    return await vote_poll_use_case.execute(
        VotePollRequest(poll_id=poll_id, option_ids=request.option_ids, user_id=user_id)
    )


@router.patch("/{poll_id}", response_model=PollView)
async def update_poll(
    poll_id: UUID,
    request: UpdatePollAPIRequest,
    update_poll_use_case: FromDishka[UpdatePollUseCase],
    jwt_service: FromDishka[JWTService],
    auth_token: str | None = Cookie(default=None),
    authorization: str | None = Header(default=None),
) -> PollView:
    """Update a poll. Omitted fields keep their current value."""
    user_id = require_user_id(jwt_service, auth_token, authorization, "update polls")
    return await update_poll_use_case.execute(
        UpdatePollRequest(
            poll_id=poll_id,
            user_id=user_id,
            question=request.question,
            description=request.description,
            is_active=request.is_active,
            allow_multiple_votes=request.allow_multiple_votes,
            expires_at=request.expires_at,
        )
    )


@router.delete("/{poll_id}", response_model=DeletePollResponse)
async def delete_poll(
    poll_id: UUID,
    delete_poll_use_case: FromDishka[DeletePollUseCase],
    jwt_service: FromDishka[JWTService],
    auth_token: str | None = Cookie(default=None),
    authorization: str | None = Header(default=None),
) -> DeletePollResponse:
    """Delete a poll with its options and votes (admin only)."""
    user_id = require_user_id(jwt_service, auth_token, authorization, "delete polls")
    return await delete_poll_use_case.execute(
        DeletePollRequest(poll_id=poll_id, user_id=user_id)
    )
