"""User aggregate root.

Accounts are created by the authentication service; this backend only
reads them to decide whether the caller may vote, author or moderate.
"""

from datetime import datetime

from pydantic import Field

from engage.domain.model.common import DomainModel
from engage.domain.value import Handle, UserId, UserRole


class User(DomainModel):
    """User aggregate root."""

    id: UserId
    handle: Handle
    role: UserRole = UserRole.USER
    verified: bool = False
    blocked: bool = False
    created_at: datetime = Field(default_factory=datetime.now)

    @property
    def is_admin(self) -> bool:
        """Whether the user holds the administrator role."""
        return self.role == UserRole.ADMIN
