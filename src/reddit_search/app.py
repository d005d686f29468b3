"""FastAPI application factory and lifespan management."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI

from reddit_search.config import Settings
from reddit_search.favorites import FavoritesStore, LocalStorage
from reddit_search.middleware.cors import configure_cors
from reddit_search.middleware.logging import RequestLoggingMiddleware
from reddit_search.reddit import RedditClient
from reddit_search.routes import favorites, health, search, sessions
from reddit_search.search import SessionRegistry

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Manage application lifecycle events.

    Creates the shared remote API client, the favorites store and the
    session registry on startup. On shutdown every open session is
    closed, cancelling outstanding requests, before the HTTP client is
    closed.

    Args:
        app: FastAPI application instance.

    Yields:
        None during application runtime.
    """
    settings: Settings = app.state.settings
    logger.info(
        "api_startup",
        host=settings.host,
        port=settings.port,
        reddit_base_url=settings.reddit_base_url,
    )

    reddit_client = RedditClient.from_settings(settings)
    favorites_store = FavoritesStore(LocalStorage(settings.storage_path))
    session_registry = SessionRegistry(
        reddit_client,
        favorites_store,
        max_sessions=settings.max_sessions,
        idle_timeout=settings.session_idle_timeout,
    )

    app.state.reddit_client = reddit_client
    app.state.favorites = favorites_store
    app.state.sessions = session_registry

    try:
        yield
    finally:
        session_registry.close_all()
        await reddit_client.aclose()
        logger.info("api_shutdown")


def create_app(settings: Settings | None = None) -> FastAPI:
    """Factory function to create configured FastAPI application.

    Args:
        settings: Configuration instance. Creates default if None.

    Returns:
        Configured FastAPI application.
    """
    if settings is None:
        settings = Settings()

    app = FastAPI(
        title="Reddit Search",
        version="0.1.0",
        lifespan=lifespan,
        docs_url="/api/v1/docs" if settings.debug else None,
        redoc_url=None,
        openapi_url="/api/v1/openapi.json" if settings.debug else None,
    )
    app.state.settings = settings

    configure_cors(app, settings.cors_origins)
    app.add_middleware(RequestLoggingMiddleware)

    app.include_router(health.router, prefix="/api/v1")
    app.include_router(search.router, prefix="/api/v1")
    app.include_router(favorites.router, prefix="/api/v1")
    app.include_router(sessions.router, prefix="/api/v1")

    return app
