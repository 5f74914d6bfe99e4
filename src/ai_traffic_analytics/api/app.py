"""
FastAPI application factory.

Usage:
    uvicorn ai_traffic_analytics.api.app:create_app --factory
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.types import ASGIApp, Receive, Scope, Send

from .. import __version__
from ..config.settings import Settings, get_settings
from ..storage import StorageBackend, get_backend
from .errors import MSG_MISSING_FIELDS, error_response
from .routes import analytics, track, websites

logger = logging.getLogger(__name__)

# Paths that set their own CORS headers for any origin
PUBLIC_CORS_PATHS = frozenset(["/api/track"])


class DashboardCORSMiddleware(CORSMiddleware):
    """CORSMiddleware that leaves public paths to their own handlers."""

    def __init__(
        self,
        app: ASGIApp,
        public_paths: frozenset = PUBLIC_CORS_PATHS,
        **kwargs: Any,
    ):
        super().__init__(app, **kwargs)
        self.public_paths = public_paths

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] == "http" and scope["path"].rstrip("/") in self.public_paths:
            await self.app(scope, receive, send)
            return
        await super().__call__(scope, receive, send)


def create_app(
    backend: Optional[StorageBackend] = None,
    settings: Optional[Settings] = None,
) -> FastAPI:
    """
    Build the API application.

    Args:
        backend: Storage backend to serve from; created from settings when
            omitted and closed on shutdown
        settings: Application settings (defaults to get_settings())
    """
    settings = settings or get_settings()
    owns_backend = backend is None

    if backend is None:
        kwargs = {}
        if settings.storage_backend == "sqlite":
            kwargs["db_path"] = Path(settings.sqlite_db_path)
        backend = get_backend(settings.storage_backend, **kwargs)

    backend.initialize()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        logger.info(f"API started with {backend.backend_type} backend")
        yield
        if owns_backend:
            backend.close()

    app = FastAPI(
        title="AI Traffic Analytics API",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.backend = backend
    app.state.settings = settings

    app.include_router(track.router, prefix="/api", tags=["Tracking"])
    app.include_router(websites.router, prefix="/api", tags=["Websites"])
    app.include_router(analytics.router, prefix="/api", tags=["Analytics"])

    app.add_middleware(
        DashboardCORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_methods=["GET", "POST", "PATCH", "OPTIONS"],
        allow_headers=["Content-Type"],
        max_age=86400,
    )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        logger.info(f"Rejected request to {request.url.path}: {exc.errors()}")
        return error_response(400, MSG_MISSING_FIELDS)

    @app.get("/health", response_model=None)
    def health_check() -> Any:
        """Health check endpoint."""
        storage = backend.health_check()
        content = {
            "status": "ok" if storage["healthy"] else "degraded",
            "service": "api",
            "storage": storage,
        }
        return JSONResponse(status_code=200 if storage["healthy"] else 503, content=content)

    return app
