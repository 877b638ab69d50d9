"""JWT token domain service."""

import logfire

from engage.config import AuthSettings
from engage.util.jwt import JWTError, TokenPayload, create_token, verify_token

from .base import Service


class JWTService(Service):
    """Domain service for JWT token operations."""

    def __init__(self, auth_settings: AuthSettings) -> None:
        """Initialize JWT service.

        Args:
            auth_settings: Authentication settings
        """
        self.auth_settings = auth_settings

    def create_token(self, user_id: str, handle: str) -> str:
        """Create JWT token for user.

        Args:
            user_id: User ID
            handle: Public handle

        Returns:
            JWT token string
        """
        with logfire.span("jwt_service.create_token", user_id=user_id, handle=handle):
            token = create_token(user_id, handle, self.auth_settings)
            logfire.info("JWT token created", user_id=user_id, handle=handle)
            return token

    def verify_token(self, token: str) -> TokenPayload:
        """Verify JWT token and extract payload.

        Raises:
            JWTError: If token is invalid or expired
        """
        with logfire.span("jwt_service.verify_token"):
            try:
                payload = verify_token(token, self.auth_settings)
            except JWTError as e:
                logfire.warn("JWT token verification failed", error=str(e))
                raise
            logfire.debug("JWT token verified", user_id=payload.user_id)
            return payload

    def get_user_id_from_token(self, token: str | None) -> str | None:
        """Extract user ID from JWT token without raising exceptions.

        Used by routes that authenticate optionally: an invalid token is
        treated the same as no token.

        Args:
            token: JWT token string (optional)

        Returns:
            User ID if token is valid, None if token is missing or invalid
        """
        if not token:
            return None

        try:
            return self.verify_token(token).user_id
        except JWTError:
            return None
