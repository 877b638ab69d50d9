"""Post repository interface."""

from abc import ABC, abstractmethod
from typing import List, Optional

from engage.domain.model.post import Post
from engage.domain.value import PostId, PostSortOrder, Slug


class PostRepository(ABC):
    """Repository for Post aggregate.

    Vote counters are deliberately absent from this interface: they are
    owned by the vote ledger (see ``VoteRepository.apply``).
    """

    @abstractmethod
    async def find_by_id(self, post_id: PostId) -> Optional[Post]:
        """Find a post by ID.

        Args:
            post_id: The post's unique identifier

        Returns:
            The post if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_by_slug(self, slug: Slug) -> Optional[Post]:
        """Find a post by its URL slug.

        Args:
            slug: The post's slug

        Returns:
            The post if found, None otherwise
        """
        pass

    @abstractmethod
    async def slug_exists(self, slug: Slug) -> bool:
        """Check whether a slug is already taken."""
        pass

    @abstractmethod
    async def find_all(
        self,
        sort: PostSortOrder = PostSortOrder.RECENT,
        limit: int = 5,
        offset: int = 0,
    ) -> List[Post]:
        """Find posts with sorting and pagination.

        Args:
            sort: Sort order (recent or popular)
            limit: Maximum number of posts to return
            offset: Number of posts to skip

        Returns:
            List of posts
        """
        pass

    @abstractmethod
    async def count(self) -> int:
        """Count all posts."""
        pass

    @abstractmethod
    async def save(self, post: Post) -> Post:
        """Insert a new post.

        New posts start with zero vote counters.

        Args:
            post: The post to save

        Returns:
            The saved post
        """
        pass

    @abstractmethod
    async def update_content(
        self, post_id: PostId, title: str, content: str
    ) -> Optional[Post]:
        """Replace the title and body of a post. The slug is kept.

        Returns:
            The updated post, or None if it doesn't exist
        """
        pass

    @abstractmethod
    async def set_blocked(self, post_id: PostId, blocked: bool) -> Optional[Post]:
        """Set the moderation flag of a post.

        Returns:
            The updated post, or None if it doesn't exist
        """
        pass

    @abstractmethod
    async def delete(self, post_id: PostId) -> bool:
        """Delete a post together with its comments, votes and polls.

        Returns:
            True if a post was deleted, False if none existed
        """
        pass
