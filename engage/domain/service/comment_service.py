"""Comment domain service."""

from uuid import uuid4

import logfire

from engage.domain.error import ForbiddenError, NotFoundError, ValidationError
from engage.domain.model.comment import Comment
from engage.domain.repository import CommentRepository, UnitOfWork
from engage.domain.value import CommentId, PostId, UserId

from .base import Service
from .cache_invalidator import CacheInvalidator
from .post_service import PostService
from .user_service import UserService


class CommentService(Service):
    """Domain service for comment operations."""

    def __init__(
        self,
        comment_repository: CommentRepository,
        post_service: PostService,
        user_service: UserService,
        unit_of_work: UnitOfWork,
        cache_invalidator: CacheInvalidator,
    ) -> None:
        """Initialize comment service.

        Args:
            comment_repository: Comment repository
            post_service: Post domain service
            user_service: User domain service
            unit_of_work: Commits writes before caches are invalidated
            cache_invalidator: Invalidates cached comment reads
        """
        self.comment_repository = comment_repository
        self.post_service = post_service
        self.user_service = user_service
        self.unit_of_work = unit_of_work
        self.cache_invalidator = cache_invalidator

    async def get_comment_by_id(self, comment_id: CommentId) -> Comment | None:
        """Get a comment by ID.

        Returns:
            Comment if found, None otherwise
        """
        with logfire.span(
            "comment_service.get_comment_by_id", comment_id=str(comment_id)
        ):
            comment = await self.comment_repository.find_by_id(comment_id)
            if not comment:
                logfire.warn("Comment not found", comment_id=str(comment_id))
            return comment

    async def get_comments_for_post(self, post_id: PostId) -> list[Comment]:
        """List comments on a post, most upvoted first.

        Raises:
            NotFoundError: If post not found
        """
        with logfire.span("comment_service.get_comments_for_post", post_id=str(post_id)):
            await self.post_service.require_post(post_id)
            comments = await self.comment_repository.find_by_post(post_id)
            logfire.info("Comments fetched", post_id=str(post_id), count=len(comments))
            return comments

    async def create_comment(
        self, post_id: PostId, author_id: UserId, text: str
    ) -> Comment:
        """Create a comment on a post.

        Args:
            post_id: Post ID
            author_id: Author user ID
            text: Comment text

        Returns:
            Created comment

        Raises:
            ValidationError: If text is blank
            ForbiddenError: If the author may not publish or the post is blocked
            NotFoundError: If post not found
        """
        with logfire.span(
            "comment_service.create_comment",
            post_id=str(post_id),
            author_id=str(author_id),
        ):
            if not text.strip():
                raise ValidationError("Comment text is required")

            author = await self.user_service.require_author(author_id)
            post = await self.post_service.require_open_post(post_id)

            comment = Comment(
                id=CommentId(uuid4()),
                post_id=post.id,
                author_id=author.id,
                author_handle=author.handle,
                text=text,
            )
            saved = await self.comment_repository.save(comment)
            logfire.info("Comment created", comment_id=str(saved.id), post_id=str(post_id))

            await self.unit_of_work.commit()

            await self.cache_invalidator.invalidate_comments(post.id, post.slug)
            return saved

    async def delete_comment(self, comment_id: CommentId, actor_id: UserId) -> None:
        """Delete a comment. Allowed for its author and for administrators.

        Raises:
            NotFoundError: If comment not found
            ForbiddenError: If the actor neither wrote it nor is an admin
        """
        with logfire.span(
            "comment_service.delete_comment",
            comment_id=str(comment_id),
            actor_id=str(actor_id),
        ):
            actor = await self.user_service.get_by_id(actor_id)
            comment = await self.get_comment_by_id(comment_id)
            if not comment:
                raise NotFoundError("Comment", str(comment_id))
            if comment.author_id != actor.id and not actor.is_admin:
                raise ForbiddenError("Not authorized to delete this comment")

            if not await self.comment_repository.delete(comment_id):
                raise NotFoundError("Comment", str(comment_id))

            logfire.info("Comment deleted", comment_id=str(comment_id))
            post = await self.post_service.get_post_by_id(comment.post_id)
            await self.unit_of_work.commit()
            await self.cache_invalidator.invalidate_comments(
                comment.post_id, post.slug if post else None
            )
