"""User domain service."""

import logfire

from engage.domain.error import ForbiddenError, NotFoundError
from engage.domain.model import User
from engage.domain.repository import UserRepository
from engage.domain.value import UserId

from .base import Service


class UserService(Service):
    """Domain service for user lookups and permission gates."""

    def __init__(self, user_repository: UserRepository) -> None:
        """Initialize user service.

        Args:
            user_repository: User repository
        """
        self.user_repository = user_repository

    async def get_by_id(self, user_id: UserId) -> User:
        """Get user by ID.

        Args:
            user_id: User ID

        Returns:
            User entity

        Raises:
            NotFoundError: If user not found
        """
        with logfire.span("user_service.get_by_id", user_id=str(user_id)):
            user = await self.user_repository.find_by_id(user_id)
            if not user:
                logfire.warn("User not found", user_id=str(user_id))
                raise NotFoundError("User", str(user_id))
            return user

    async def require_active(self, user_id: UserId) -> User:
        """Load a user whose account is not blocked.

        Raises:
            NotFoundError: If user not found
            ForbiddenError: If the user is blocked
        """
        user = await self.get_by_id(user_id)
        if user.blocked:
            logfire.warn("Blocked user rejected", user_id=str(user_id))
            raise ForbiddenError("Your account has been blocked")
        return user

    async def require_participant(self, user_id: UserId) -> User:
        """Load an active user who has verified their account.

        Administrators are exempt from verification.

        Raises:
            NotFoundError: If user not found
            ForbiddenError: If the user is blocked or unverified
        """
        user = await self.require_active(user_id)
        if not user.verified and not user.is_admin:
            logfire.warn("Unverified user rejected", user_id=str(user_id))
            raise ForbiddenError("Email verification required")
        return user

    async def require_author(self, user_id: UserId) -> User:
        """Load a user allowed to publish posts and comments.

        Administrators moderate content and never author it.

        Raises:
            NotFoundError: If user not found
            ForbiddenError: If the user may not publish
        """
        user = await self.require_participant(user_id)
        if user.is_admin:
            raise ForbiddenError("Administrators cannot publish content")
        return user

    async def require_admin(self, user_id: UserId) -> User:
        """Load a user holding the administrator role.

        Raises:
            NotFoundError: If user not found
            ForbiddenError: If the user is not an administrator
        """
        user = await self.get_by_id(user_id)
        if not user.is_admin:
            logfire.warn("Admin action denied", user_id=str(user_id))
            raise ForbiddenError("Administrator access required")
        return user
