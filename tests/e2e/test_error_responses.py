"""End-to-end tests for error response shapes."""

from uuid import uuid4

from tests.conftest import make_token, seed_comment, seed_post, seed_user
from tests.harness import create_api_fixture

api = create_api_fixture()


def _auth(user) -> dict[str, str]:
    return {"Authorization": f"Bearer {make_token(user)}"}


class TestErrorResponses:
    """Every error body is {"error": ..., "detail": ...}."""

    def test_invalid_direction_is_400(self, api):
        """Malformed bodies are validation errors."""
        author = api.seed(seed_user, "author")
        post = api.seed(seed_post, author)

        response = api.client.post(
            f"/votes/post/{post.id}",
            json={"direction": "sideways"},
            headers=_auth(author),
        )

        assert response.status_code == 400
        data = response.json()
        assert data["error"] == "validation"
        assert data["detail"][0]["loc"] == ["body", "direction"]

    def test_invalid_query_is_400(self, api):
        """Out-of-range query parameters are validation errors."""
        response = api.client.get("/posts", params={"page": 0})

        assert response.status_code == 400
        assert response.json()["error"] == "validation"

    def test_malformed_path_id_is_400(self, api):
        """Non-UUID path IDs are validation errors."""
        response = api.client.get("/polls/not-a-uuid")

        assert response.status_code == 400

    def test_missing_post_is_404(self, api):
        """Unknown post IDs are not found."""
        response = api.client.get(f"/posts/{uuid4()}")

        assert response.status_code == 404
        assert response.json()["error"] == "not_found"

    def test_vote_on_missing_post_is_404(self, api):
        """Votes on unknown items are not found."""
        voter = api.seed(seed_user)

        response = api.client.post(
            f"/votes/post/{uuid4()}", json={"direction": "up"}, headers=_auth(voter)
        )

        assert response.status_code == 404

    def test_unverified_voter_is_403(self, api):
        """Unverified accounts cannot vote on comments."""
        author = api.seed(seed_user, "author")
        voter = api.seed(seed_user, verified=False)
        post = api.seed(seed_post, author)
        comment = api.seed(seed_comment, post, author)

        response = api.client.post(
            f"/votes/comment/{comment.id}",
            json={"direction": "up"},
            headers=_auth(voter),
        )

        assert response.status_code == 403
        assert response.json()["error"] == "forbidden"

    def test_invalid_token_is_401(self, api):
        """Tokens that fail verification count as anonymous."""
        author = api.seed(seed_user, "author")
        post = api.seed(seed_post, author)

        response = api.client.post(
            f"/votes/post/{post.id}",
            json={"direction": "up"},
            headers={"Authorization": "Bearer not-a-jwt"},
        )

        assert response.status_code == 401
        assert response.json() == {
            "error": "unauthenticated",
            "detail": "Authentication required to vote",
        }

    def test_unknown_route_is_404(self, api):
        """Framework errors use the same shape."""
        response = api.client.get("/nowhere")

        assert response.status_code == 404
        assert response.json()["error"] == "not_found"
