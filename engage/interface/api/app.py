"""FastAPI application."""

from contextlib import asynccontextmanager

from dishka import AsyncContainer
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from engage.config import Settings
from engage.interface.api.cache import ResponseCacheMiddleware
from engage.interface.api.errors import register_error_handlers
from engage.interface.api.routes import comments, health, polls, posts, votes
from engage.util.di.container import create_container, setup_di
from engage.util.observability import instrument_fastapi


def create_app(container: AsyncContainer | None = None) -> FastAPI:
    """Create FastAPI application.

    Note: Logfire should be configured before calling this function.
    In production, start_app.py handles this.
    In tests, conftest.py configures it locally.

    Args:
        container: DI container to serve requests from. Defaults to the
            production container built from environment settings.
    """
    settings = Settings()
    container = container or create_container()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        # Disposes the engine and closes the Redis pool
        await container.close()

    app_instance = FastAPI(
        title="Engage API",
        description="Voting, poll tallying and cached reads for posts and comments",
        version="0.1.0",
        lifespan=lifespan,
    )

    # Instrument FastAPI for automatic tracing of HTTP requests
    instrument_fastapi(app_instance)

    register_error_handlers(app_instance)

    # Added before CORS so that CORS wraps cached responses too
    app_instance.add_middleware(ResponseCacheMiddleware)

    app_instance.add_middleware(
        CORSMiddleware,
        allow_origins=[
            settings.api.frontend_url,
            "http://localhost:3000",  # Local development
            "http://localhost:5173",  # Vite default
        ],
        allow_credentials=True,
        allow_methods=["GET", "POST", "DELETE", "OPTIONS", "PATCH"],
        allow_headers=[
            "Authorization",
            "Content-Type",
            "Accept",
            "Origin",
            "Cache-Control",
            "X-Requested-With",
        ],
        expose_headers=["Content-Length", "Content-Type", "X-Cache"],
        max_age=600,  # Cache preflight requests for 10 minutes
    )

    setup_di(app_instance, container)

    # Register routes
    app_instance.include_router(health.router)
    app_instance.include_router(posts.router)
    app_instance.include_router(comments.router)
    app_instance.include_router(votes.router)
    app_instance.include_router(polls.router)

    return app_instance
