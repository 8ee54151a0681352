"""Async SQLite engine, session factory and the per-request session dependency.

The app opens one engine at startup (``db.init``) and closes it on shutdown
(``db.dispose``). Each request gets its own ``AsyncSession`` that commits
when the handler returns and rolls back when it raises.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from sqlalchemy import event
from sqlalchemy.engine import URL, make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from codesync_api.settings import Settings

logger = logging.getLogger(__name__)

_SQLITE_PRAGMAS = (
    "PRAGMA foreign_keys=ON",
    "PRAGMA journal_mode=WAL",
    "PRAGMA synchronous=NORMAL",
)


@dataclass(frozen=True, slots=True)
class DatabaseConfig:
    url: str
    echo: bool = False
    busy_timeout_ms: int = 30_000

    @classmethod
    def from_settings(cls, settings: Settings) -> DatabaseConfig:
        return cls(
            url=settings.database_url,
            echo=settings.database_echo,
            busy_timeout_ms=settings.database_sqlite_busy_timeout_ms,
        )


def build_async_url(cfg: DatabaseConfig) -> str:
    """Return ``cfg.url`` on the aiosqlite driver; other backends are rejected."""
    url = make_url(cfg.url)
    if url.get_backend_name() != "sqlite":
        raise ValueError("Only SQLite databases are supported.")
    return url.set(drivername="sqlite+aiosqlite").render_as_string(hide_password=False)


def _sqlite_file(url: URL) -> Path | None:
    """Filesystem path behind ``url``, or ``None`` for in-memory databases."""
    database = (url.database or "").strip()
    if not database or database == ":memory:" or database.startswith("file:"):
        return None
    return Path(database).resolve()


def _engine_options(url: URL, cfg: DatabaseConfig) -> dict[str, Any]:
    options: dict[str, Any] = {
        "echo": cfg.echo,
        "connect_args": {"check_same_thread": False, "timeout": cfg.busy_timeout_ms / 1000},
    }
    if _sqlite_file(url) is None:
        # An in-memory database lives only as long as its single connection.
        options["poolclass"] = StaticPool
    else:
        options["pool_pre_ping"] = True
    return options


class Database:
    """Process-wide engine and session factory."""

    def __init__(self) -> None:
        self._cfg: DatabaseConfig | None = None
        self._engine: AsyncEngine | None = None
        self._sessionmaker: async_sessionmaker[AsyncSession] | None = None

    @property
    def is_initialized(self) -> bool:
        return self._engine is not None

    @property
    def engine(self) -> AsyncEngine:
        if self._engine is None:
            raise RuntimeError("Database not initialized. Call db.init(...) at startup.")
        return self._engine

    @property
    def sessionmaker(self) -> async_sessionmaker[AsyncSession]:
        if self._sessionmaker is None:
            raise RuntimeError("Database not initialized. Call db.init(...) at startup.")
        return self._sessionmaker

    def init(self, cfg: DatabaseConfig) -> None:
        """Open the engine; calling again with the same config is a no-op."""
        if self._engine is not None and self._cfg == cfg:
            return

        url = make_url(build_async_url(cfg))
        path = _sqlite_file(url)
        if path is not None:
            path.parent.mkdir(parents=True, exist_ok=True)

        engine = create_async_engine(url, **_engine_options(url, cfg))
        busy_timeout = f"PRAGMA busy_timeout={int(cfg.busy_timeout_ms)}"

        @event.listens_for(engine.sync_engine, "connect")
        def _apply_pragmas(dbapi_conn, _record) -> None:
            cursor = dbapi_conn.cursor()
            try:
                cursor.execute(busy_timeout)
                for pragma in _SQLITE_PRAGMAS:
                    cursor.execute(pragma)
            finally:
                cursor.close()

        self._cfg = cfg
        self._engine = engine
        self._sessionmaker = async_sessionmaker(engine, expire_on_commit=False, autoflush=False)
        logger.debug("db.init", extra={"database_url": url.render_as_string(hide_password=True)})

    async def dispose(self) -> None:
        if self._engine is not None:
            await self._engine.dispose()
        self._cfg = None
        self._engine = None
        self._sessionmaker = None


db = Database()


async def create_schema(database: Database | None = None) -> None:
    """Create missing tables on ``database`` (the process-wide one by default)."""
    # Importing the models registers their tables on the metadata.
    from codesync_api import models  # noqa: F401
    from codesync_api.db.base import metadata

    async with (database or db).engine.begin() as conn:
        await conn.run_sync(metadata.create_all)


@asynccontextmanager
async def session_scope() -> AsyncIterator[AsyncSession]:
    """A session outside the request cycle; the caller commits."""
    session = db.sessionmaker()
    try:
        yield session
    finally:
        await asyncio.shield(session.close())


async def get_db_session() -> AsyncIterator[AsyncSession]:
    """FastAPI dependency: one ``AsyncSession`` per request."""
    async with session_scope() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


__all__ = [
    "Database",
    "DatabaseConfig",
    "build_async_url",
    "create_schema",
    "db",
    "get_db_session",
    "session_scope",
]
