"""CodeSync FastAPI application entry point."""

from __future__ import annotations

import logging

from fastapi import FastAPI

from .common.exceptions import register_exception_handlers
from .common.logging import setup_logging
from .common.middleware import register_middleware
from .lifecycles import create_application_lifespan
from .routers import api_router
from .settings import Settings, get_settings

logger = logging.getLogger(__name__)
API_PREFIX = "/api"


def create_app(settings: Settings | None = None) -> FastAPI:
    """Return a configured FastAPI application."""

    settings = settings or get_settings()
    setup_logging(settings)

    docs = settings.api_docs_enabled

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        docs_url=f"{API_PREFIX}/docs" if docs else None,
        redoc_url=None,
        openapi_url=f"{API_PREFIX}/openapi.json" if docs else None,
        debug=settings.debug,
        lifespan=create_application_lifespan(settings=settings),
    )

    app.state.settings = settings
    register_middleware(app, settings)
    register_exception_handlers(app)
    app.include_router(api_router, prefix=API_PREFIX)
    logger.debug("app.created", extra={"docs_enabled": settings.api_docs_enabled})
    return app


__all__ = [
    "API_PREFIX",
    "create_app",
]
