"""Request authentication helpers for routes."""

from uuid import UUID

from fastapi import HTTPException, status

from engage.domain.service import JWTService


def extract_token(auth_token: str | None, authorization: str | None) -> str | None:
    """Pick the JWT from the auth cookie, falling back to a Bearer header."""
    if auth_token:
        return auth_token
    if authorization:
        scheme, _, credentials = authorization.partition(" ")
        if scheme.lower() == "bearer" and credentials.strip():
            return credentials.strip()
    return None


def optional_user_id(
    jwt_service: JWTService, auth_token: str | None, authorization: str | None
) -> str | None:
    """User ID of the caller, or None for anonymous or invalid credentials."""
    user_id = jwt_service.get_user_id_from_token(
        extract_token(auth_token, authorization)
    )
    if user_id is None:
        return None

    try:
        UUID(user_id)
    except ValueError:
        return None
    return user_id


def require_user_id(
    jwt_service: JWTService,
    auth_token: str | None,
    authorization: str | None,
    action: str,
) -> str:
    """User ID of the caller.

    Raises:
        HTTPException: 401 if no valid credentials were sent
    """
    user_id = optional_user_id(jwt_service, auth_token, authorization)
    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Authentication required to {action}",
        )
    return user_id
