# src/mecha_board/main.py
"""Main entry point for the Mecha Board application."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from mecha_board.api.v1 import news_router, votes_router
from mecha_board.core.errors import StorageError
from mecha_board.core.logging import configure_logging
from mecha_board.core.settings import Settings, settings as default_settings
from mecha_board.repositories.news_store import NewsStore, open_store

logger = logging.getLogger(__name__)


async def _storage_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("Storage failure on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Storage operation failed"},
    )


def create_app(app_settings: Settings | None = None) -> FastAPI:
    """Build the FastAPI application around one news store.

    The store is opened on startup and closed on shutdown; uvicorn routes
    SIGINT and SIGTERM through the shutdown handlers.
    """
    app_settings = app_settings or default_settings

    app = FastAPI(
        title=app_settings.app_name,
        description="News board with human and machine voting",
        version=app_settings.app_version,
    )
    app.state.settings = app_settings
    app.state.store = None

    app.add_middleware(GZipMiddleware)
    app.add_exception_handler(StorageError, _storage_error_handler)

    app.include_router(news_router, prefix="/api/v1")
    app.include_router(votes_router, prefix="/api/v1")

    @app.on_event("startup")
    async def on_startup() -> None:
        app.state.store = await open_store(app_settings)

    @app.on_event("shutdown")
    async def on_shutdown() -> None:
        store: NewsStore | None = getattr(app.state, "store", None)
        if store is not None:
            await store.close()
            app.state.store = None

    @app.get("/health")
    async def health_check() -> dict[str, str]:
        """Health check endpoint to verify the service is running."""
        return {"status": "ok"}

    @app.get("/")
    async def root() -> dict[str, str]:
        """Root endpoint with basic information about the API."""
        return {
            "name": app_settings.app_name,
            "version": app_settings.app_version,
            "docs": "/docs",
        }

    return app


app = create_app()


def run() -> None:
    """Run the API server with uvicorn using the configured host and port."""
    import uvicorn

    configure_logging(default_settings.log_level)
    uvicorn.run(
        "mecha_board.main:app",
        host=default_settings.host,
        port=default_settings.port,
        log_level=default_settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
