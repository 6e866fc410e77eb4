"""
FastAPI Application Entry Point

This module builds the FastAPI application and configures:
- The registry, its JSON store and the URL service (one set per app,
  built when the application starts up)
- Admin API and redirect routes
- Middleware (logging, CORS)

Run with ``uvicorn shortlink.main:app`` or the ``shortlink`` console
script, which binds to settings.host / settings.port.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from shortlink.api import endpoints
from shortlink.api.schemas import HealthResponse, ServiceInfoResponse
from shortlink.core.logging_config import configure_logging
from shortlink.core.setting import Settings, settings as default_settings
from shortlink.db.json_store import JsonFileStore
from shortlink.db.registry import Registry
from shortlink.middleware.logging import add_logging_middleware
from shortlink.services.short_code_generator import ShortCodeGenerator
from shortlink.services.url_service import URLService

logger = logging.getLogger(__name__)

VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """
    Set up logging and load the registry on startup.

    Logging is only configured when nothing has configured the root logger
    yet, so run() and embedding applications keep their own setup.
    """
    settings: Settings = app.state.settings

    if not logging.getLogger().handlers:
        configure_logging(settings.log_level)

    registry = Registry.load(JsonFileStore(settings.store_path))
    generator = ShortCodeGenerator(
        length=settings.short_code_length,
        max_attempts=settings.short_code_max_attempts
    )
    app.state.url_service = URLService(registry, generator)

    if not settings.admin_token:
        logger.warning("admin_token is not configured; the admin API will reject every request")

    yield


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the application.

    Nothing is read from disk here; the registry is loaded from
    settings.store_path when the application starts, and a missing or
    damaged file yields an empty registry.
    """
    settings = settings or default_settings

    app = FastAPI(
        title="URL Shortener Service",
        description="Short links with permanent redirects and visit counting",
        version=VERSION,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.settings = settings

    add_logging_middleware(app)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Health endpoints defined before the routers so a root-level redirect
    # prefix cannot shadow them
    @app.get("/", response_model=ServiceInfoResponse, tags=["Health"])
    async def root() -> ServiceInfoResponse:
        return ServiceInfoResponse(message="URL Shortener Service", version=VERSION, docs="/docs")

    @app.get("/health", response_model=HealthResponse, tags=["Health"])
    async def health_check(request: Request) -> HealthResponse:
        entries = await request.app.state.url_service.count()
        return HealthResponse(status="healthy", entries=entries)

    app.include_router(endpoints.admin_router, prefix=settings.api_prefix, tags=["Admin"])
    app.include_router(endpoints.redirect_router, prefix=settings.redirect_prefix, tags=["Redirect"])

    return app


app = create_app()


def run() -> None:
    """Start the server on the configured host and port."""
    configure_logging(default_settings.log_level)
    logger.info(f"Server running on http://{default_settings.host}:{default_settings.port}")
    uvicorn.run(
        app,
        host=default_settings.host,
        port=default_settings.port,
        log_config=None,
    )


if __name__ == "__main__":
    run()
