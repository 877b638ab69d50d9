"""Post routes."""

from uuid import UUID

from dishka.integrations.fastapi import DishkaRoute, FromDishka
from fastapi import APIRouter, Cookie, Header, Query, status
from pydantic import BaseModel, Field

from engage.application.usecase.post import (
    CreatePostRequest,
    CreatePostUseCase,
    DeletePostResponse,
    DeletePostUseCase,
    GetPostRequest,
    GetPostUseCase,
    ListPostsRequest,
    ListPostsResponse,
    ListPostsUseCase,
    ModeratePostRequest,
    PostView,
    ToggleBlockPostUseCase,
    UpdatePostRequest,
    UpdatePostUseCase,
)
from engage.domain.service import JWTService
from engage.domain.value import PostSortOrder
from engage.interface.api.auth import optional_user_id, require_user_id

router = APIRouter(prefix="/posts", tags=["posts"], route_class=DishkaRoute)


class CreatePostAPIRequest(BaseModel):
    """API request for creating a post."""

    title: str = Field(min_length=1, max_length=300)
    content: str = Field(min_length=1, max_length=20000)


class UpdatePostAPIRequest(BaseModel):
    """API request for editing a post."""

    title: str = Field(min_length=1, max_length=300)
    content: str = Field(min_length=1, max_length=20000)


@router.get("", response_model=ListPostsResponse)
async def list_posts(
    list_posts_use_case: FromDishka[ListPostsUseCase],
    jwt_service: FromDishka[JWTService],
    page: int = Query(default=1, ge=1),
    limit: int | None = Query(default=None, ge=1),
    sort: PostSortOrder = Query(default=PostSortOrder.RECENT),
    auth_token: str | None = Cookie(default=None),
    authorization: str | None = Header(default=None),
) -> ListPostsResponse:
    """List posts, newest first or by score.

    Args:
        list_posts_use_case: List posts use case from DI
        jwt_service: JWT service for token verification (injected)
        page: 1-based page number
        limit: Page size (defaults to the configured page size)
        sort: "recent" or "popular"
        auth_token: JWT token from cookie
        authorization: Optional Bearer token header

    Returns:
        One page of posts and pagination metadata
    """
    return await list_posts_use_case.execute(
        ListPostsRequest(
            sort=sort,
            page=page,
            limit=limit,
            user_id=optional_user_id(jwt_service, auth_token, authorization),
        )
    )


@router.post("", response_model=PostView, status_code=status.HTTP_201_CREATED)
async def create_post(
    request: CreatePostAPIRequest,
    create_post_use_case: FromDishka[CreatePostUseCase],
    jwt_service: FromDishka[JWTService],
    auth_token: str | None = Cookie(default=None),
    authorization: str | None = Header(default=None),
) -> PostView:
    """Create a new post. Requires authentication."""
    user_id = require_user_id(jwt_service, auth_token, authorization, "create posts")
    return await create_post_use_case.execute(
        CreatePostRequest(title=request.title, content=request.content, user_id=user_id)
    )


@router.get("/{identifier}", response_model=PostView)
async def get_post(
    identifier: str,
    get_post_use_case: FromDishka[GetPostUseCase],
    jwt_service: FromDishka[JWTService],
    auth_token: str | None = Cookie(default=None),
    authorization: str | None = Header(default=None),
) -> PostView:
    """Get a post by UUID or slug.

    Authentication is optional; when present, the response includes the
    caller's vote on the post.
    """
    return await get_post_use_case.execute(
        GetPostRequest(
            identifier=identifier,
            user_id=optional_user_id(jwt_service, auth_token, authorization),
        )
    )


@router.put("/{post_id}", response_model=PostView)
async def update_post(
    post_id: UUID,
    request: UpdatePostAPIRequest,
    update_post_use_case: FromDishka[UpdatePostUseCase],
    jwt_service: FromDishka[JWTService],
    auth_token: str | None = Cookie(default=None),
    authorization: str | None = Header(default=None),
) -> PostView:
    """Edit the title and content of a post (its author only).

    The slug is kept, so links to the post stay valid.
    """
    user_id = require_user_id(jwt_service, auth_token, authorization, "edit posts")
    return await update_post_use_case.execute(
        UpdatePostRequest(
            post_id=post_id,
            title=request.title,
            content=request.content,
            user_id=user_id,
        )
    )


@router.patch("/{post_id}/block", response_model=PostView)
async def toggle_block_post(
    post_id: UUID,
    toggle_block_post_use_case: FromDishka[ToggleBlockPostUseCase],
    jwt_service: FromDishka[JWTService],
    auth_token: str | None = Cookie(default=None),
    authorization: str | None = Header(default=None),
) -> PostView:
    """Block or unblock a post (admin only).

    Blocked posts stay readable but accept no new votes, comments or polls.
    """
    user_id = require_user_id(
        jwt_service, auth_token, authorization, "moderate posts"
    )
    return await toggle_block_post_use_case.execute(
        ModeratePostRequest(post_id=post_id, user_id=user_id)
    )


@router.delete("/{post_id}", response_model=DeletePostResponse)
async def delete_post(
    post_id: UUID,
    delete_post_use_case: FromDishka[DeletePostUseCase],
    jwt_service: FromDishka[JWTService],
    auth_token: str | None = Cookie(default=None),
    authorization: str | None = Header(default=None),
) -> DeletePostResponse:
    """Delete a post with its comments, votes and polls (admin only)."""
    user_id = require_user_id(
        jwt_service, auth_token, authorization, "delete posts"
    )
    return await delete_post_use_case.execute(
        ModeratePostRequest(post_id=post_id, user_id=user_id)
    )
