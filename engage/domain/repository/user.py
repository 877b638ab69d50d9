"""User repository interface."""

from abc import ABC, abstractmethod
from typing import Optional

from engage.domain.model.user import User
from engage.domain.value import UserId


class UserRepository(ABC):
    """Repository for User aggregate.

    Accounts are provisioned by the authentication service; this backend
    reads them and flips moderation flags.
    """

    @abstractmethod
    async def find_by_id(self, user_id: UserId) -> Optional[User]:
        """Find a user by ID.

        Args:
            user_id: The user's unique identifier

        Returns:
            The user if found, None otherwise
        """
        pass

    @abstractmethod
    async def save(self, user: User) -> User:
        """Save a user (create or update).

        Args:
            user: The user to save

        Returns:
            The saved user
        """
        pass
