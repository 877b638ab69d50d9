"""Test configuration and shared helpers."""

import re
from datetime import datetime
from uuid import UUID, uuid4

import logfire

from engage.config import AuthSettings
from engage.domain.model import Comment, Post, User
from engage.domain.repository import CommentRepository, PostRepository, UserRepository
from engage.domain.value import CommentId, Handle, PostId, Slug, UserId, UserRole
from engage.util.jwt import create_token

# Keep spans local and quiet during tests
logfire.configure(send_to_logfire=False, console=False)


def make_slug(title: str, post_id: UUID | str | None = None) -> Slug:
    """Helper function to generate slugs for test posts.

    Args:
        title: Post title to generate slug from
        post_id: Optional post ID used when the title has no usable characters

    Returns:
        Valid Slug value object
    """
    slug_str = re.sub(r"[^a-z0-9]+", "-", title.lower())
    slug_str = re.sub(r"-+", "-", slug_str).strip("-")[:100]

    if not slug_str and post_id:
        slug_str = f"post-{str(post_id)[:8]}"
    elif not slug_str:
        slug_str = "test-post"

    return Slug(slug_str)


def make_token(user: User, settings: AuthSettings | None = None) -> str:
    """Sign a token for ``user`` the way the authentication service would."""
    return create_token(str(user.id), user.handle.root, settings or AuthSettings())


async def seed_user(
    env,
    handle: str = "voter",
    role: UserRole = UserRole.USER,
    verified: bool = True,
    blocked: bool = False,
) -> User:
    """Store a user in the environment's user repository."""
    user_repo = await env.get(UserRepository)
    return await user_repo.save(
        User(
            id=UserId(uuid4()),
            handle=Handle(root=f"{handle}-{uuid4().hex[:6]}"),
            role=role,
            verified=verified,
            blocked=blocked,
            created_at=datetime.now(),
        )
    )


async def seed_post(
    env,
    author: User,
    title: str = "Budget vote thread",
    blocked: bool = False,
    created_at: datetime | None = None,
) -> Post:
    """Store a post in the environment's post repository (counters start at 0)."""
    post_repo = await env.get(PostRepository)
    post_id = PostId(uuid4())
    now = created_at or datetime.now()
    return await post_repo.save(
        Post(
            id=post_id,
            slug=Slug(f"{make_slug(title, post_id).root}-{post_id.hex[:6]}"),
            title=title,
            content="Discussion body",
            author_id=author.id,
            author_handle=author.handle,
            blocked=blocked,
            created_at=now,
            updated_at=now,
        )
    )


async def seed_comment(env, post: Post, author: User, text: str = "Agreed") -> Comment:
    """Store a comment in the environment's comment repository."""
    comment_repo = await env.get(CommentRepository)
    now = datetime.now()
    return await comment_repo.save(
        Comment(
            id=CommentId(uuid4()),
            post_id=post.id,
            author_id=author.id,
            author_handle=author.handle,
            text=text,
            created_at=now,
            updated_at=now,
        )
    )
