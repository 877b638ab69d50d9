"""Comment routes."""

from uuid import UUID

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Cookie, Header, status
from pydantic import BaseModel, Field

from engage.application.usecase.comment import (
    CommentView,
    CreateCommentRequest,
    CreateCommentUseCase,
    DeleteCommentRequest,
    DeleteCommentResponse,
    DeleteCommentUseCase,
    GetCommentsRequest,
    GetCommentsResponse,
    GetCommentsUseCase,
)
from engage.domain.service import JWTService
from engage.interface.api.auth import optional_user_id, require_user_id

router = APIRouter(prefix="/comments", tags=["comments"], route_class=DishkaRoute)


class CreateCommentAPIRequest(BaseModel):
    """API request for creating a comment."""

    text: str = Field(min_length=1, max_length=10000)


@router.get("/post/{post_id}", response_model=GetCommentsResponse)
async def get_comments_for_post(
    post_id: UUID,
    get_comments_use_case: FromDishka[GetCommentsUseCase],
    jwt_service: FromDishka[JWTService],
    auth_token: str | None = Cookie(default=None),
    authorization: str | None = Header(default=None),
) -> GetCommentsResponse:
    """Get all comments on a post, most upvoted first.

    Authentication is optional; when present, each comment carries the
    caller's vote.

    Args:
        post_id: Post UUID
        get_comments_use_case: Get comments use case from DI
        jwt_service: JWT service for token verification (injected)
        auth_token: JWT token from cookie
        authorization: Optional Bearer token header

    Returns:
        Comments on the post
    """
    return await get_comments_use_case.execute(
        GetCommentsRequest(
            post_id=post_id,
            user_id=optional_user_id(jwt_service, auth_token, authorization),
        )
    )


@router.post(
    "/post/{post_id}", response_model=CommentView, status_code=status.HTTP_201_CREATED
)
async def create_comment(
    post_id: UUID,
    request: CreateCommentAPIRequest,
    create_comment_use_case: FromDishka[CreateCommentUseCase],
    jwt_service: FromDishka[JWTService],
    auth_token: str | None = Cookie(default=None),
    authorization: str | None = Header(default=None),
) -> CommentView:
    """Comment on a post. Requires authentication."""
    user_id = require_user_id(jwt_service, auth_token, authorization, "comment")
    return await create_comment_use_case.execute(
        CreateCommentRequest(post_id=post_id, text=request.text, user_id=user_id)
    )


@router.delete("/{comment_id}", response_model=DeleteCommentResponse)
async def delete_comment(
    comment_id: UUID,
    delete_comment_use_case: FromDishka[DeleteCommentUseCase],
    jwt_service: FromDishka[JWTService],
    auth_token: str | None = Cookie(default=None),
    authorization: str | None = Header(default=None),
) -> DeleteCommentResponse:
    """Delete a comment (its author or an admin)."""
    user_id = require_user_id(
        jwt_service, auth_token, authorization, "delete comments"
    )
    return await delete_comment_use_case.execute(
        DeleteCommentRequest(comment_id=comment_id, user_id=user_id)
    )
