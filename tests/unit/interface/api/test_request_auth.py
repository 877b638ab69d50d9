"""Unit tests for route authentication helpers."""

from uuid import uuid4

import pytest
from fastapi import HTTPException

from engage.config import AuthSettings
from engage.domain.service import JWTService
from engage.interface.api.auth import extract_token, optional_user_id, require_user_id


@pytest.fixture
def jwt_service():
    return JWTService(AuthSettings())


class TestExtractToken:
    """Picking the token from cookie or header."""

    def test_cookie_wins_over_header(self):
        assert extract_token("cookie-token", "Bearer header-token") == "cookie-token"

    def test_bearer_header(self):
        assert extract_token(None, "Bearer header-token") == "header-token"

    @pytest.mark.parametrize("header", ["Basic abc", "Bearer ", "header-token", None])
    def test_unusable_header(self, header):
        assert extract_token(None, header) is None


class TestUserIdHelpers:
    """Resolving the caller from a token."""

    def test_valid_token(self, jwt_service):
        user_id = str(uuid4())
        token = jwt_service.create_token(user_id, "alice")

        assert optional_user_id(jwt_service, None, f"Bearer {token}") == user_id
        assert require_user_id(jwt_service, token, None, "vote") == user_id

    def test_non_uuid_subject_is_anonymous(self, jwt_service):
        """Tokens whose user ID is not a UUID identify nobody."""
        token = jwt_service.create_token("did:plc:abc123", "alice")

        assert optional_user_id(jwt_service, token, None) is None

    def test_require_raises_401(self, jwt_service):
        with pytest.raises(HTTPException) as exc_info:
            require_user_id(jwt_service, None, None, "vote")

        assert exc_info.value.status_code == 401
        assert exc_info.value.detail == "Authentication required to vote"
