"""List posts use case."""

from uuid import UUID

from pydantic import BaseModel, Field

from engage.config import ListingSettings
from engage.domain.service import PostService, VoteService
from engage.domain.value import PostSortOrder, UserId, VotableType

from .get_post import PostView


class ListPostsRequest(BaseModel):
    """List posts request."""

    sort: PostSortOrder = PostSortOrder.RECENT
    page: int = Field(default=1, ge=1)
    limit: int | None = Field(default=None, ge=1)
    user_id: str | None = None  # Current user ID (if authenticated)


class Pagination(BaseModel):
    """Pagination metadata of a listing."""

    current_page: int
    total_pages: int
    total_posts: int
    posts_per_page: int


class ListPostsResponse(BaseModel):
    """List posts response."""

    posts: list[PostView]
    pagination: Pagination


class ListPostsUseCase:
    """Use case for listing posts."""

    def __init__(
        self,
        post_service: PostService,
        vote_service: VoteService,
        listing_settings: ListingSettings,
    ) -> None:
        """Initialize list posts use case.

        Args:
            post_service: Post domain service
            vote_service: Vote domain service
            listing_settings: Page size defaults
        """
        self.post_service = post_service
        self.vote_service = vote_service
        self.listing_settings = listing_settings

    async def execute(self, request: ListPostsRequest) -> ListPostsResponse:
        """Execute list posts flow.

        The page size falls back to the configured default and is capped
        at the configured maximum.
        """
        page_size = min(
            request.limit or self.listing_settings.page_size,
            self.listing_settings.max_page_size,
        )
        page = await self.post_service.list_posts(request.sort, request.page, page_size)

        viewer = UserId(UUID(request.user_id)) if request.user_id else None
        votes = await self.vote_service.get_user_votes(
            viewer, VotableType.POST, [post.id for post in page.posts]
        )

        return ListPostsResponse(
            posts=[PostView.from_post(post, votes.get(post.id)) for post in page.posts],
            pagination=Pagination(
                current_page=page.page,
                total_pages=page.total_pages,
                total_posts=page.total,
                posts_per_page=page.page_size,
            ),
        )
