"""End-to-end tests for post and comment voting."""

from engage.domain.value import UserRole
from tests.conftest import make_token, seed_comment, seed_post, seed_user
from tests.harness import create_api_fixture

api = create_api_fixture()


def _auth(user) -> dict[str, str]:
    return {"Authorization": f"Bearer {make_token(user)}"}


class TestVoteAPI:
    """Voting through the HTTP API."""

    def test_vote_requires_authentication(self, api):
        """Anonymous votes are rejected with 401."""
        author = api.seed(seed_user, "author")
        post = api.seed(seed_post, author)

        response = api.client.post(f"/votes/post/{post.id}", json={"direction": "up"})

        assert response.status_code == 401
        assert response.json()["error"] == "unauthenticated"

    def test_vote_toggle_and_switch(self, api):
        """Up, up again (withdraw), then down."""
        author = api.seed(seed_user, "author")
        voter = api.seed(seed_user)
        post = api.seed(seed_post, author)
        url = f"/votes/post/{post.id}"

        first = api.client.post(url, json={"direction": "up"}, headers=_auth(voter))
        second = api.client.post(url, json={"direction": "up"}, headers=_auth(voter))
        third = api.client.post(url, json={"direction": "down"}, headers=_auth(voter))

        assert first.status_code == 200
        assert first.json()["upvotes"] == 1
        assert first.json()["user_vote"] == "upvote"
        assert second.json()["upvotes"] == 0
        assert second.json()["user_vote"] is None
        assert third.json()["downvotes"] == 1
        assert third.json()["user_vote"] == "downvote"

    def test_auth_cookie_is_accepted(self, api):
        """The auth cookie works like a Bearer token."""
        author = api.seed(seed_user, "author")
        voter = api.seed(seed_user)
        post = api.seed(seed_post, author)

        response = api.client.post(
            f"/votes/post/{post.id}",
            json={"direction": "down"},
            headers={"Cookie": f"auth_token={make_token(voter)}"},
        )

        assert response.status_code == 200
        assert response.json()["downvotes"] == 1

    def test_comment_vote(self, api):
        """Comments are voted on the same way."""
        author = api.seed(seed_user, "author")
        voter = api.seed(seed_user)
        post = api.seed(seed_post, author)
        comment = api.seed(seed_comment, post, author)

        response = api.client.post(
            f"/votes/comment/{comment.id}",
            json={"direction": "up"},
            headers=_auth(voter),
        )

        body = response.json()
        assert response.status_code == 200
        assert body["comment_id"] == str(comment.id)
        assert body["post_id"] == str(post.id)
        assert body["text"] == comment.text
        assert (body["upvotes"], body["downvotes"]) == (1, 0)
        assert body["user_vote"] == "upvote"

    def test_post_vote_returns_updated_post(self, api):
        """The response is the post itself, as the voter now sees it."""
        author = api.seed(seed_user, "author")
        voter = api.seed(seed_user)
        post = api.seed(seed_post, author)

        response = api.client.post(
            f"/votes/post/{post.id}", json={"direction": "down"}, headers=_auth(voter)
        )
        body = response.json()

        assert response.status_code == 200
        assert set(body) == {
            "post_id",
            "slug",
            "title",
            "content",
            "author_id",
            "author_handle",
            "upvotes",
            "downvotes",
            "blocked",
            "created_at",
            "updated_at",
            "user_vote",
        }
        assert body["post_id"] == str(post.id)
        assert body["slug"] == post.slug.root
        assert body["title"] == post.title
        assert (body["upvotes"], body["downvotes"]) == (0, 1)
        assert body["user_vote"] == "downvote"

    def test_unverified_user_votes_on_posts_only(self, api):
        """Post votes only need an unblocked account; comment votes need a verified one."""
        author = api.seed(seed_user, "author")
        unverified = api.seed(seed_user, "fresh", verified=False)
        post = api.seed(seed_post, author)
        comment = api.seed(seed_comment, post, author)

        on_post = api.client.post(
            f"/votes/post/{post.id}", json={"direction": "up"}, headers=_auth(unverified)
        )
        on_comment = api.client.post(
            f"/votes/comment/{comment.id}",
            json={"direction": "up"},
            headers=_auth(unverified),
        )

        assert on_post.status_code == 200
        assert on_post.json()["upvotes"] == 1
        assert on_comment.status_code == 403
        assert on_comment.json()["error"] == "forbidden"

    def test_vote_on_blocked_post_forbidden(self, api):
        """Blocked posts reject votes with 403."""
        author = api.seed(seed_user, "author")
        voter = api.seed(seed_user)
        post = api.seed(seed_post, author, blocked=True)

        response = api.client.post(
            f"/votes/post/{post.id}", json={"direction": "up"}, headers=_auth(voter)
        )

        assert response.status_code == 403
        assert response.json()["error"] == "forbidden"

    def test_recount_admin_only(self, api):
        """Only admins may recompute counters."""
        author = api.seed(seed_user, "author")
        admin = api.seed(seed_user, "admin", role=UserRole.ADMIN)
        post = api.seed(seed_post, author)
        url = f"/votes/post/{post.id}/recount"

        as_author = api.client.post(url, headers=_auth(author))
        as_admin = api.client.post(url, headers=_auth(admin))

        assert as_author.status_code == 403
        assert as_admin.status_code == 200
        assert as_admin.json() == {
            "votable_type": "post",
            "votable_id": str(post.id),
            "upvotes": 0,
            "downvotes": 0,
        }
