"""FastAPI lifespan helpers for the CodeSync application."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.routing import Lifespan
from sqlalchemy.engine import make_url

from codesync_api.db.database import DatabaseConfig, create_schema, db
from codesync_api.settings import Settings

logger = logging.getLogger(__name__)


def create_application_lifespan(
    *,
    settings: Settings,
) -> Lifespan[FastAPI]:
    """Return the FastAPI lifespan handler used by the app factory."""

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        app.state.settings = settings
        if not settings.database_url:
            raise RuntimeError("Database settings are required (set CODESYNC_DATABASE_URL).")
        safe_url = make_url(settings.database_url).render_as_string(hide_password=True)

        logger.info("db.init.start", extra={"database_url": safe_url})
        db.init(DatabaseConfig.from_settings(settings))
        try:
            await create_schema()
            logger.info("db.init.complete", extra={"database_url": safe_url})
            yield
        finally:
            await db.dispose()
            logger.info("db.dispose.complete", extra={"database_url": safe_url})

    return lifespan


__all__ = ["create_application_lifespan"]
