from __future__ import annotations

from pathlib import Path

import pytest
from sqlalchemy import text

from codesync_api.db.database import Database, DatabaseConfig, build_async_url, create_schema
from codesync_api.features.sessions.repository import CodingSessionsRepository
from codesync_api.features.tree.exceptions import SessionNotFoundError
from codesync_api.models import CodingSession


def test_build_async_url_swaps_driver() -> None:
    cfg = DatabaseConfig(url="sqlite:///./data/db/codesync.sqlite")

    assert build_async_url(cfg) == "sqlite+aiosqlite:///./data/db/codesync.sqlite"


def test_build_async_url_rejects_other_backends() -> None:
    with pytest.raises(ValueError):
        build_async_url(DatabaseConfig(url="postgresql://localhost/codesync"))


def test_uninitialized_database_raises() -> None:
    database = Database()

    assert not database.is_initialized
    with pytest.raises(RuntimeError):
        _ = database.engine


@pytest.mark.asyncio
async def test_file_database_creates_parent_directory(tmp_path: Path) -> None:
    target = tmp_path / "nested" / "db" / "codesync.sqlite"
    database = Database()
    database.init(DatabaseConfig(url=f"sqlite:///{target}"))
    try:
        await create_schema(database)
        async with database.engine.connect() as conn:
            fk = (await conn.execute(text("PRAGMA foreign_keys"))).scalar_one()
        assert fk == 1
        assert target.exists()
    finally:
        await database.dispose()

    assert not database.is_initialized


@pytest.mark.asyncio
async def test_repository_round_trip_in_memory() -> None:
    database = Database()
    database.init(DatabaseConfig(url="sqlite+aiosqlite:///:memory:"))
    try:
        await create_schema(database)
        async with database.sessionmaker() as session:
            repo = CodingSessionsRepository(session)
            record = await repo.add(CodingSession(session_name="demo", files_json="[]"))

            assert record.public_id
            assert record.created_at.tzinfo is not None

            record.files_json = '{"name":"","type":"folder","children":[]}'
            await repo.save(record)
            await session.commit()

            loaded = await repo.load_by_public_id(record.public_id)
            assert loaded.files_json.startswith("{")
            assert await repo.get_by_public_id("missing") is None
            with pytest.raises(SessionNotFoundError):
                await repo.load_by_public_id("missing")
    finally:
        await database.dispose()
