"""Mappers for converting between database rows and domain models.

Since we're using Pydantic domain models (immutable), we use manual mapping
instead of SQLAlchemy's classical imperative mapping. Timestamps are left
out of the insert dicts so the database clock stamps new rows.
"""

from typing import Any, Dict, Sequence
from uuid import UUID

from engage.domain.model import Comment, Poll, PollOption, PollVote, Post, User, Vote
from engage.domain.value import (
    CommentId,
    Handle,
    PollId,
    PollOptionId,
    PollVoteId,
    PostId,
    Slug,
    UserId,
    UserRole,
    VotableType,
    VoteId,
    VoteType,
)


def _uuid(value: Any) -> UUID:
    """Normalize a UUID column value (asyncpg returns its own UUID type)."""
    return value if type(value) is UUID else UUID(str(value))


def row_to_user(row: Dict[str, Any]) -> User:
    """Convert database row to User domain model."""
    return User(
        id=UserId(_uuid(row["id"])),
        handle=Handle(row["handle"]),
        role=UserRole(row["role"]),
        verified=row["verified"],
        blocked=row["blocked"],
        created_at=row["created_at"],
    )


def user_to_dict(user: User) -> Dict[str, Any]:
    """Convert User domain model to database dict."""
    return {
        "id": user.id,
        "handle": user.handle.root,
        "role": user.role.value,
        "verified": user.verified,
        "blocked": user.blocked,
    }


def row_to_post(row: Dict[str, Any]) -> Post:
    """Convert database row to Post domain model.

    Args:
        row: Database row as dict

    Returns:
        Post domain model
    """
    return Post(
        id=PostId(_uuid(row["id"])),
        slug=Slug(row["slug"]),
        title=row["title"],
        content=row["content"],
        author_id=UserId(_uuid(row["author_id"])),
        author_handle=Handle(row["author_handle"]),
        upvotes=row["upvotes"],
        downvotes=row["downvotes"],
        blocked=row["blocked"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def post_to_dict(post: Post) -> Dict[str, Any]:
    """Convert Post domain model to database dict.

    Counters are not included: new rows start at zero and only the vote
    ledger changes them afterwards.
    """
    return {
        "id": post.id,
        "slug": post.slug.root,
        "title": post.title,
        "content": post.content,
        "author_id": post.author_id,
        "author_handle": post.author_handle.root,
        "blocked": post.blocked,
    }


def row_to_comment(row: Dict[str, Any]) -> Comment:
    """Convert database row to Comment domain model."""
    return Comment(
        id=CommentId(_uuid(row["id"])),
        post_id=PostId(_uuid(row["post_id"])),
        author_id=UserId(_uuid(row["author_id"])),
        author_handle=Handle(row["author_handle"]),
        text=row["text"],
        upvotes=row["upvotes"],
        downvotes=row["downvotes"],
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def comment_to_dict(comment: Comment) -> Dict[str, Any]:
    """Convert Comment domain model to database dict."""
    return {
        "id": comment.id,
        "post_id": comment.post_id,
        "author_id": comment.author_id,
        "author_handle": comment.author_handle.root,
        "text": comment.text,
    }


def row_to_vote(row: Dict[str, Any]) -> Vote:
    """Convert database row to Vote domain model."""
    return Vote(
        id=VoteId(_uuid(row["id"])),
        user_id=UserId(_uuid(row["user_id"])),
        votable_type=VotableType(row["votable_type"]),
        votable_id=_uuid(row["votable_id"]),
        vote_type=VoteType(row["vote_type"]),
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def row_to_poll_option(row: Dict[str, Any]) -> PollOption:
    """Convert database row to PollOption domain model."""
    return PollOption(
        id=PollOptionId(_uuid(row["id"])),
        poll_id=PollId(_uuid(row["poll_id"])),
        option_text=row["option_text"],
        position=row["position"],
    )


def row_to_poll(row: Dict[str, Any], options: Sequence[PollOption]) -> Poll:
    """Convert a polls row and its option rows to a Poll aggregate.

    Args:
        row: Poll row as dict
        options: The poll's options (any order)

    Returns:
        Poll domain model with options ordered by position
    """
    return Poll(
        id=PollId(_uuid(row["id"])),
        post_id=PostId(_uuid(row["post_id"])),
        author_id=UserId(_uuid(row["author_id"])),
        question=row["question"],
        description=row.get("description"),
        allow_multiple_votes=row["allow_multiple_votes"],
        is_active=row["is_active"],
        expires_at=row.get("expires_at"),
        options=sorted(options, key=lambda option: option.position),
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def poll_to_dict(poll: Poll) -> Dict[str, Any]:
    """Convert Poll domain model to a polls table dict (options excluded)."""
    return {
        "id": poll.id,
        "post_id": poll.post_id,
        "author_id": poll.author_id,
        "question": poll.question,
        "description": poll.description,
        "allow_multiple_votes": poll.allow_multiple_votes,
        "is_active": poll.is_active,
        "expires_at": poll.expires_at,
    }


def poll_option_to_dict(option: PollOption) -> Dict[str, Any]:
    """Convert PollOption domain model to database dict."""
    return {
        "id": option.id,
        "poll_id": option.poll_id,
        "option_text": option.option_text,
        "position": option.position,
    }


def row_to_poll_vote(row: Dict[str, Any]) -> PollVote:
    """Convert database row to PollVote domain model."""
    return PollVote(
        id=PollVoteId(_uuid(row["id"])),
        poll_id=PollId(_uuid(row["poll_id"])),
        poll_option_id=PollOptionId(_uuid(row["poll_option_id"])),
        user_id=UserId(_uuid(row["user_id"])),
        created_at=row["created_at"],
    )


def poll_vote_to_dict(vote: PollVote, exclusive: bool) -> Dict[str, Any]:
    """Convert PollVote domain model to database dict.

    Args:
        vote: Poll vote
        exclusive: Whether the poll is single-choice
    """
    return {
        "id": vote.id,
        "poll_id": vote.poll_id,
        "poll_option_id": vote.poll_option_id,
        "user_id": vote.user_id,
        "exclusive": exclusive,
    }
