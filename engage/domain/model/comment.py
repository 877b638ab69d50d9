"""Comment entity."""

from datetime import datetime

from pydantic import Field

from engage.domain.model.common import DomainModel
from engage.domain.value import CommentId, Handle, PostId, UserId


class Comment(DomainModel):
    """Comment on a post.

    Comments have no moderation flag of their own; a comment is blocked
    whenever its post is blocked.
    """

    id: CommentId
    post_id: PostId
    author_id: UserId
    author_handle: Handle
    text: str = Field(min_length=1, max_length=10000)
    upvotes: int = Field(default=0, ge=0)
    downvotes: int = Field(default=0, ge=0)
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)
