"""Post use cases."""

from .create_post import CreatePostRequest, CreatePostUseCase
from .get_post import GetPostRequest, GetPostUseCase, PostView
from .list_posts import (
    ListPostsRequest,
    ListPostsResponse,
    ListPostsUseCase,
    Pagination,
)
from .moderate_post import (
    DeletePostResponse,
    DeletePostUseCase,
    ModeratePostRequest,
    ToggleBlockPostUseCase,
)
from .update_post import UpdatePostRequest, UpdatePostUseCase

__all__ = [
    "CreatePostRequest",
    "CreatePostUseCase",
    "DeletePostResponse",
    "DeletePostUseCase",
    "GetPostRequest",
    "GetPostUseCase",
    "ListPostsRequest",
    "ListPostsResponse",
    "ListPostsUseCase",
    "ModeratePostRequest",
    "Pagination",
    "PostView",
    "ToggleBlockPostUseCase",
    "UpdatePostRequest",
    "UpdatePostUseCase",
]
