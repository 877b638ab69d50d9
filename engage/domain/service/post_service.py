"""Post domain service."""

import re
from dataclasses import dataclass
from uuid import UUID, uuid4

import logfire

from engage.domain.error import ForbiddenError, NotFoundError, ValidationError
from engage.domain.model.post import Post
from engage.domain.repository import PostRepository, UnitOfWork
from engage.domain.value import PostId, PostSortOrder, Slug, UserId

from .base import Service
from .cache_invalidator import CacheInvalidator
from .user_service import UserService


@dataclass
class PostPage:
    """One page of the post listing."""

    posts: list[Post]
    total: int
    page: int
    page_size: int

    @property
    def total_pages(self) -> int:
        return (self.total + self.page_size - 1) // self.page_size


class PostService(Service):
    """Domain service for post operations."""

    def __init__(
        self,
        post_repository: PostRepository,
        user_service: UserService,
        unit_of_work: UnitOfWork,
        cache_invalidator: CacheInvalidator,
    ) -> None:
        """Initialize post service.

        Args:
            post_repository: Post repository
            user_service: User domain service
            unit_of_work: Commits writes before caches are invalidated
            cache_invalidator: Invalidates cached post reads
        """
        self.post_repository = post_repository
        self.user_service = user_service
        self.unit_of_work = unit_of_work
        self.cache_invalidator = cache_invalidator

    async def get_post_by_id(self, post_id: PostId) -> Post | None:
        """Get a post by ID.

        Args:
            post_id: Post ID

        Returns:
            Post if found, None otherwise
        """
        with logfire.span("post_service.get_post_by_id", post_id=str(post_id)):
            post = await self.post_repository.find_by_id(post_id)
            if not post:
                logfire.warn("Post not found", post_id=str(post_id))
            return post

    async def require_post(self, post_id: PostId) -> Post:
        """Get a post by ID or fail.

        Raises:
            NotFoundError: If post not found
        """
        post = await self.get_post_by_id(post_id)
        if not post:
            raise NotFoundError("Post", str(post_id))
        return post

    async def require_open_post(self, post_id: PostId) -> Post:
        """Get a post that still accepts votes and comments.

        Raises:
            NotFoundError: If post not found
            ForbiddenError: If the post is blocked
        """
        post = await self.require_post(post_id)
        if post.blocked:
            logfire.warn("Blocked post rejected", post_id=str(post_id))
            raise ForbiddenError("This post is blocked")
        return post

    async def get_post(self, identifier: str) -> Post:
        """Get a post by ID or by slug.

        Args:
            identifier: Post UUID or slug

        Returns:
            The post

        Raises:
            NotFoundError: If no post matches
        """
        with logfire.span("post_service.get_post", identifier=identifier):
            try:
                post_id = PostId(UUID(identifier))
            except ValueError:
                post = await self._find_by_slug(identifier)
            else:
                post = await self.post_repository.find_by_id(post_id)

            if not post:
                logfire.warn("Post not found", identifier=identifier)
                raise NotFoundError("Post", identifier)
            return post

    async def _find_by_slug(self, identifier: str) -> Post | None:
        try:
            slug = Slug(identifier)
        except ValueError:
            return None
        return await self.post_repository.find_by_slug(slug)

    async def list_posts(
        self, sort: PostSortOrder, page: int, page_size: int
    ) -> PostPage:
        """List posts, one page at a time.

        Args:
            sort: Sort order (recent or popular)
            page: 1-based page number
            page_size: Posts per page

        Returns:
            The requested page with the total post count
        """
        with logfire.span(
            "post_service.list_posts", sort=sort.value, page=page, page_size=page_size
        ):
            posts = await self.post_repository.find_all(
                sort=sort, limit=page_size, offset=(page - 1) * page_size
            )
            total = await self.post_repository.count()
            logfire.info("Posts listed", count=len(posts), total=total)
            return PostPage(posts=posts, total=total, page=page, page_size=page_size)

    async def create_post(self, author_id: UserId, title: str, content: str) -> Post:
        """Create a post.

        Args:
            author_id: Author user ID
            title: Post title
            content: Post body

        Returns:
            The created post

        Raises:
            ValidationError: If title or content is blank
            ForbiddenError: If the author may not publish
        """
        with logfire.span("post_service.create_post", author_id=str(author_id)):
            if not title.strip() or not content.strip():
                raise ValidationError("Title and content are required")

            author = await self.user_service.require_author(author_id)

            post_id = PostId(uuid4())
            slug = await self.generate_unique_slug(title, post_id)
            post = Post(
                id=post_id,
                slug=slug,
                title=title.strip(),
                content=content,
                author_id=author.id,
                author_handle=author.handle,
            )

            saved = await self.post_repository.save(post)
            logfire.info("Post created", post_id=str(saved.id), slug=saved.slug.root)

            await self.unit_of_work.commit()
            await self.cache_invalidator.invalidate_post(saved.id, saved.slug)
            return saved

    async def update_post(
        self, post_id: PostId, actor_id: UserId, title: str, content: str
    ) -> Post:
        """Edit the title and body of a post (its author only).

        The slug stays as it was, so existing links keep working.

        Raises:
            ValidationError: If title or content is blank
            NotFoundError: If post not found
            ForbiddenError: If the actor did not write the post
        """
        with logfire.span(
            "post_service.update_post", post_id=str(post_id), actor_id=str(actor_id)
        ):
            if not title.strip() or not content.strip():
                raise ValidationError("Title and content are required")

            actor = await self.user_service.get_by_id(actor_id)
            post = await self.require_post(post_id)
            if post.author_id != actor.id:
                logfire.warn(
                    "Post edit denied", post_id=str(post_id), actor_id=str(actor_id)
                )
                raise ForbiddenError("Only the author can edit this post")

            updated = await self.post_repository.update_content(
                post_id, title.strip(), content
            )
            if not updated:
                raise NotFoundError("Post", str(post_id))

            logfire.info("Post updated", post_id=str(post_id))
            await self.unit_of_work.commit()
            await self.cache_invalidator.invalidate_post(updated.id, updated.slug)
            return updated

    async def toggle_blocked(self, post_id: PostId, actor_id: UserId) -> Post:
        """Flip the moderation flag of a post (admin only).

        Raises:
            ForbiddenError: If the actor is not an administrator
            NotFoundError: If post not found
        """
        with logfire.span("post_service.toggle_blocked", post_id=str(post_id)):
            await self.user_service.require_admin(actor_id)
            post = await self.require_post(post_id)

            updated = await self.post_repository.set_blocked(post_id, not post.blocked)
            if not updated:
                raise NotFoundError("Post", str(post_id))

            logfire.info(
                "Post moderation flag changed",
                post_id=str(post_id),
                blocked=updated.blocked,
            )
            await self.unit_of_work.commit()
            await self.cache_invalidator.invalidate_post(updated.id, updated.slug)
            return updated

    async def delete_post(self, post_id: PostId, actor_id: UserId) -> None:
        """Delete a post with its comments, votes and polls (admin only).

        Raises:
            ForbiddenError: If the actor is not an administrator
            NotFoundError: If post not found
        """
        with logfire.span("post_service.delete_post", post_id=str(post_id)):
            await self.user_service.require_admin(actor_id)
            post = await self.require_post(post_id)

            if not await self.post_repository.delete(post_id):
                raise NotFoundError("Post", str(post_id))

            logfire.info("Post deleted", post_id=str(post_id))
            await self.unit_of_work.commit()
            await self.cache_invalidator.invalidate_post(post.id, post.slug)

    async def generate_unique_slug(self, title: str, post_id: PostId) -> Slug:
        """Generate a unique slug from a title.

        Handles collisions by appending numeric suffixes.

        Args:
            title: Post title to slugify
            post_id: Post ID (used for fallback if title produces empty slug)

        Returns:
            Unique slug for the post
        """
        base_slug_str = self._slugify(title)

        if not base_slug_str:
            return Slug(f"post-{post_id.hex[:8]}")

        slug_str = base_slug_str
        counter = 1
        while await self.post_repository.slug_exists(Slug(slug_str)):
            suffix = f"-{counter}"
            # Ensure we don't exceed 100 chars with suffix
            slug_str = base_slug_str[: 100 - len(suffix)].rstrip("-") + suffix
            counter += 1

        if counter > 1:
            logfire.debug("Slug collision resolved", slug=slug_str, attempts=counter)
        return Slug(slug_str)

    @staticmethod
    def _slugify(title: str) -> str:
        """Convert title to URL-safe slug format.

        Args:
            title: Title to slugify

        Returns:
            URL-safe slug string (may be empty if title has no valid chars)
        """
        slug = re.sub(r"[^a-z0-9]+", "-", title.lower())
        return slug.strip("-")[:100].rstrip("-")
