"""In-memory post repository for testing."""

from datetime import datetime
from typing import Optional

from engage.domain.model.post import Post
from engage.domain.repository.post import PostRepository
from engage.domain.value import PostId, PostSortOrder, Slug, VotableType

from .store import InMemoryStore


class InMemoryPostRepository(PostRepository):
    """In-memory implementation of PostRepository for testing."""

    def __init__(self, store: InMemoryStore | None = None) -> None:
        self._store = store or InMemoryStore()

    async def find_by_id(self, post_id: PostId) -> Optional[Post]:
        """Find a post by ID."""
        return self._store.posts.get(post_id)

    async def find_by_slug(self, slug: Slug) -> Optional[Post]:
        """Find a post by slug."""
        for post in self._store.posts.values():
            if post.slug == slug:
                return post
        return None

    async def slug_exists(self, slug: Slug) -> bool:
        """Check if a slug is taken."""
        return any(post.slug == slug for post in self._store.posts.values())

    async def find_all(
        self,
        sort: PostSortOrder = PostSortOrder.RECENT,
        limit: int = 5,
        offset: int = 0,
    ) -> list[Post]:
        """Find posts with sorting and pagination."""
        posts = list(self._store.posts.values())
        posts.sort(key=lambda p: p.created_at, reverse=True)
        if sort == PostSortOrder.POPULAR:
            # Stable sort keeps newest first among equal scores
            posts.sort(key=lambda p: p.score, reverse=True)
        return posts[offset : offset + limit]

    async def count(self) -> int:
        """Count all posts."""
        return len(self._store.posts)

    async def save(self, post: Post) -> Post:
        """Insert a new post with zero counters."""
        saved = post.model_copy(update={"upvotes": 0, "downvotes": 0})
        self._store.posts[saved.id] = saved
        return saved

    async def update_content(
        self, post_id: PostId, title: str, content: str
    ) -> Optional[Post]:
        """Replace the title and body of a post."""
        post = self._store.posts.get(post_id)
        if not post:
            return None
        updated = post.model_copy(
            update={"title": title, "content": content, "updated_at": datetime.now()}
        )
        self._store.posts[post_id] = updated
        return updated

    async def set_blocked(self, post_id: PostId, blocked: bool) -> Optional[Post]:
        """Set the moderation flag of a post."""
        post = self._store.posts.get(post_id)
        if not post:
            return None
        updated = post.model_copy(update={"blocked": blocked, "updated_at": datetime.now()})
        self._store.posts[post_id] = updated
        return updated

    async def delete(self, post_id: PostId) -> bool:
        """Delete a post with its comments, votes and polls."""
        store = self._store
        if store.posts.pop(post_id, None) is None:
            return False

        store.drop_votes_on(VotableType.POST, post_id)
        for comment_id in [c.id for c in store.comments.values() if c.post_id == post_id]:
            del store.comments[comment_id]
            store.drop_votes_on(VotableType.COMMENT, comment_id)
        for poll_id in [p.id for p in store.polls.values() if p.post_id == post_id]:
            del store.polls[poll_id]
            for vote_id in [v.id for v in store.poll_votes.values() if v.poll_id == poll_id]:
                del store.poll_votes[vote_id]
        return True
