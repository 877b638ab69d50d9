"""Domain value objects for Engage.

Value objects are immutable and defined by their values, not identity.
They encapsulate validation rules and business logic.
"""

import re
from enum import Enum

from pydantic import field_validator

from engage.domain.value.common import RootValueObject


class VoteType(str, Enum):
    """Reaction recorded in the vote ledger."""

    UPVOTE = "upvote"
    DOWNVOTE = "downvote"


class VoteDirection(str, Enum):
    """Direction requested by a client (``{"direction": "up"}``)."""

    UP = "up"
    DOWN = "down"

    @property
    def vote_type(self) -> VoteType:
        """Ledger vote type for this direction."""
        return VoteType.UPVOTE if self is VoteDirection.UP else VoteType.DOWNVOTE


class VotableType(str, Enum):
    """Type of entity that can receive a binary vote."""

    POST = "post"
    COMMENT = "comment"


class UserRole(str, Enum):
    """Role of a user account."""

    USER = "user"
    ADMIN = "admin"


class PostSortOrder(str, Enum):
    """Sort order for post listings."""

    RECENT = "recent"  # created_at DESC
    POPULAR = "popular"  # (upvotes - downvotes) DESC, then created_at DESC


class Handle(RootValueObject[str]):
    """Public username shown next to content."""

    @field_validator("root")
    @classmethod
    def validate_handle_format(cls, v: str) -> str:
        """Validate handle is not empty and within length limits."""
        if len(v) < 1 or len(v) > 255:
            raise ValueError("Handle must be 1-255 characters")
        return v


class Slug(RootValueObject[str]):
    """URL-safe slug for posts.

    Must be lowercase, alphanumeric with hyphens, 1-100 characters.
    Examples: 'housing-policy-thread', 'budget-vote-2025'
    """

    @field_validator("root")
    @classmethod
    def validate_slug_format(cls, v: str) -> str:
        """Validate slug format."""
        if not re.match(r"^[a-z0-9]+(?:-[a-z0-9]+)*$", v):
            raise ValueError(
                "Slug must be lowercase alphanumeric with hyphens, "
                "no leading/trailing hyphens or consecutive hyphens"
            )
        if len(v) < 1 or len(v) > 100:
            raise ValueError("Slug must be 1-100 characters")
        return v
