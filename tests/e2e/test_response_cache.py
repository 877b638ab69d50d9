"""End-to-end tests for the anonymous read cache."""

from engage.adapter.cache import InMemoryResponseCache
from tests.conftest import make_token, seed_comment, seed_post, seed_user
from tests.harness import create_api_fixture

api = create_api_fixture()


def _auth(user) -> dict[str, str]:
    return {"Authorization": f"Bearer {make_token(user)}"}


class TestResponseCache:
    """Caching of anonymous GET responses."""

    def test_second_anonymous_read_is_a_hit(self, api):
        """The first read fills the cache, the second is served from it."""
        author = api.seed(seed_user, "author")
        api.seed(seed_post, author)

        first = api.client.get("/posts")
        second = api.client.get("/posts")

        assert first.headers["x-cache"] == "MISS"
        assert second.headers["x-cache"] == "HIT"
        assert second.json() == first.json()

    def test_query_string_is_part_of_the_key(self, api):
        """Different pages are cached separately."""
        first = api.client.get("/posts?page=1")
        second = api.client.get("/posts?page=2")

        assert first.headers["x-cache"] == "MISS"
        assert second.headers["x-cache"] == "MISS"
        cache = api.get(InMemoryResponseCache)
        assert {"cache:/posts?page=1", "cache:/posts?page=2"} <= set(cache.keys())

    def test_authenticated_reads_bypass_cache(self, api):
        """Bearer and cookie credentials are never cached."""
        author = api.seed(seed_user, "author")
        token = make_token(author)

        with_header = api.client.get("/posts", headers=_auth(author))
        with_cookie = api.client.get("/posts", headers={"Cookie": f"auth_token={token}"})

        assert with_header.status_code == 200
        assert "x-cache" not in with_header.headers
        assert "x-cache" not in with_cookie.headers
        assert api.get(InMemoryResponseCache).keys() == []

    def test_vote_invalidates_listing_and_post(self, api):
        """A vote evicts every cached view of the post."""
        author = api.seed(seed_user, "author")
        voter = api.seed(seed_user)
        post = api.seed(seed_post, author)
        api.client.get("/posts")
        api.client.get("/posts?sort=popular")
        api.client.get(f"/posts/{post.slug.root}")

        api.client.post(
            f"/votes/post/{post.id}", json={"direction": "up"}, headers=_auth(voter)
        )
        listing = api.client.get("/posts")
        by_slug = api.client.get(f"/posts/{post.slug.root}")

        assert listing.headers["x-cache"] == "MISS"
        assert listing.json()["posts"][0]["upvotes"] == 1
        assert by_slug.headers["x-cache"] == "MISS"
        assert by_slug.json()["upvotes"] == 1
        assert "cache:/posts?sort=popular" not in api.get(InMemoryResponseCache).keys()

    def test_vote_invalidates_post_read_with_query_string(self, api):
        """A post read with extra query parameters is evicted too."""
        author = api.seed(seed_user, "author")
        voter = api.seed(seed_user)
        post = api.seed(seed_post, author)
        url = f"/posts/{post.id}?ref=home"
        api.client.get(url)
        assert api.client.get(url).headers["x-cache"] == "HIT"

        api.client.post(
            f"/votes/post/{post.id}", json={"direction": "up"}, headers=_auth(voter)
        )
        response = api.client.get(url)

        assert response.headers["x-cache"] == "MISS"
        assert response.json()["upvotes"] == 1

    def test_comment_vote_invalidates_paged_comment_listing(self, api):
        """Comment listings requested with a query string are evicted."""
        author = api.seed(seed_user, "author")
        voter = api.seed(seed_user)
        post = api.seed(seed_post, author)
        comment = api.seed(seed_comment, post, author)
        url = f"/comments/post/{post.id}?sort=top"
        api.client.get(url)

        api.client.post(
            f"/votes/comment/{comment.id}", json={"direction": "up"}, headers=_auth(voter)
        )
        response = api.client.get(url)

        assert response.headers["x-cache"] == "MISS"
        assert response.json()["comments"][0]["upvotes"] == 1

    def test_comment_vote_invalidates_comment_listing(self, api):
        """Comment votes evict the post's comment listing."""
        author = api.seed(seed_user, "author")
        voter = api.seed(seed_user)
        post = api.seed(seed_post, author)
        comment = api.seed(seed_comment, post, author)
        url = f"/comments/post/{post.id}"
        api.client.get(url)

        api.client.post(
            f"/votes/comment/{comment.id}", json={"direction": "down"}, headers=_auth(voter)
        )
        response = api.client.get(url)

        assert response.headers["x-cache"] == "MISS"
        assert response.json()["comments"][0]["downvotes"] == 1

    def test_errors_are_not_cached(self, api):
        """Only 200 responses are stored."""
        first = api.client.get("/posts/no-such-post")
        second = api.client.get("/posts/no-such-post")

        assert first.status_code == 404
        assert second.headers["x-cache"] == "MISS"

    def test_cache_outage_serves_uncached(self, api):
        """Reads and votes keep working while the cache is down."""
        author = api.seed(seed_user, "author")
        voter = api.seed(seed_user)
        post = api.seed(seed_post, author)
        api.get(InMemoryResponseCache).available = False

        read = api.client.get("/posts")
        vote = api.client.post(
            f"/votes/post/{post.id}", json={"direction": "up"}, headers=_auth(voter)
        )

        assert read.status_code == 200
        assert "x-cache" not in read.headers
        assert vote.status_code == 200
        assert vote.json()["upvotes"] == 1
