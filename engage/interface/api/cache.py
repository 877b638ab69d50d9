"""Read-through response cache for anonymous GET requests.

Implemented as a pure ASGI middleware so the cached body can be replayed
without entering the router. Requests carrying credentials always reach
the application because their bodies include the caller's own votes.
"""

import logfire
from starlette.requests import cookie_parser
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from engage.config import AuthSettings, CacheSettings
from engage.domain.error import CacheUnavailableError
from engage.domain.service import ResponseCache


class ResponseCacheMiddleware:
    """Serve cacheable GET responses from the ResponseCache.

    The cache and its settings are resolved from the application's DI
    container on each request, so tests can swap in an in-memory cache.
    A cache outage never fails a read: the request is served uncached.
    """

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http" or scope["method"] != "GET":
            await self.app(scope, receive, send)
            return

        container = getattr(scope["app"].state, "dishka_container", None)
        if container is None:
            await self.app(scope, receive, send)
            return

        settings = await container.get(CacheSettings)
        auth_settings = await container.get(AuthSettings)
        if not self._is_cacheable(scope, settings, auth_settings.cookie_name):
            await self.app(scope, receive, send)
            return

        cache = await container.get(ResponseCache)
        key = self._cache_key(scope, settings)

        try:
            cached = await cache.get(key)
        except CacheUnavailableError as e:
            logfire.warn("Cache read skipped", key=key, error=str(e))
            await self.app(scope, receive, send)
            return

        if cached is not None:
            await self._send_cached(send, cached)
            return

        await self._call_and_store(scope, receive, send, cache, key, settings)

    @staticmethod
    def _is_cacheable(
        scope: Scope, settings: CacheSettings, cookie_name: str
    ) -> bool:
        if not settings.enabled:
            return False

        path = scope["path"]
        if not any(
            path == prefix or path.startswith(f"{prefix}/")
            for prefix in settings.cached_prefixes
        ):
            return False

        return not _has_credentials(scope, cookie_name)

    @staticmethod
    def _cache_key(scope: Scope, settings: CacheSettings) -> str:
        query = scope.get("query_string", b"").decode("latin-1")
        path = f"{scope['path']}?{query}" if query else scope["path"]
        return f"{settings.key_prefix}{path}"

    @staticmethod
    async def _send_cached(send: Send, body: bytes) -> None:
        await send(
            {
                "type": "http.response.start",
                "status": 200,
                "headers": [
                    (b"content-type", b"application/json"),
                    (b"content-length", str(len(body)).encode("latin-1")),
                    (b"x-cache", b"HIT"),
                ],
            }
        )
        await send({"type": "http.response.body", "body": body})

    async def _call_and_store(
        self,
        scope: Scope,
        receive: Receive,
        send: Send,
        cache: ResponseCache,
        key: str,
        settings: CacheSettings,
    ) -> None:
        status_code = 0
        chunks: list[bytes] = []

        async def send_wrapper(message: Message) -> None:
            nonlocal status_code
            if message["type"] == "http.response.start":
                status_code = message["status"]
                message.setdefault("headers", [])
                message["headers"] = [*message["headers"], (b"x-cache", b"MISS")]
            elif message["type"] == "http.response.body":
                chunks.append(message.get("body", b""))
            await send(message)

        await self.app(scope, receive, send_wrapper)

        if status_code != 200:
            return

        try:
            await cache.set(key, b"".join(chunks), settings.ttl_seconds)
        except CacheUnavailableError as e:
            logfire.warn("Cache write skipped", key=key, error=str(e))


def _has_credentials(scope: Scope, cookie_name: str) -> bool:
    for name, value in scope.get("headers", []):
        if name == b"authorization":
            return True
        if name == b"cookie":
            # Any auth cookie counts, valid or not
            if cookie_name in cookie_parser(value.decode("latin-1")):
                return True
    return False
