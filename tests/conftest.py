"""Shared pytest fixtures for CodeSync tests."""

from __future__ import annotations

import os
from collections.abc import AsyncIterator, Iterator

import pytest
import pytest_asyncio
from asgi_lifespan import LifespanManager
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from codesync_api.main import create_app
from codesync_api.settings import reload_settings

_ENV_VARS = (
    "CODESYNC_DATABASE_URL",
    "CODESYNC_LOGGING_LEVEL",
    "CODESYNC_SERVER_CORS_ORIGINS",
)


@pytest.fixture(scope="session")
def _database_url(tmp_path_factory: pytest.TempPathFactory) -> str:
    """Provide a file-backed SQLite database URL for the test session."""

    db_path = tmp_path_factory.mktemp("codesync-db") / "codesync.sqlite"
    return f"sqlite+aiosqlite:///{db_path}"


@pytest.fixture(scope="session", autouse=True)
def _configure_environment(_database_url: str) -> Iterator[None]:
    """Point settings at the ephemeral database for the whole run."""

    previous = {name: os.environ.get(name) for name in _ENV_VARS}
    os.environ["CODESYNC_DATABASE_URL"] = _database_url
    os.environ["CODESYNC_LOGGING_LEVEL"] = "DEBUG"
    os.environ.pop("CODESYNC_SERVER_CORS_ORIGINS", None)
    settings = reload_settings()
    assert settings.database_url == _database_url

    yield

    for name, value in previous.items():
        if value is None:
            os.environ.pop(name, None)
        else:
            os.environ[name] = value
    reload_settings()


@pytest.fixture()
def app() -> FastAPI:
    """Return an application instance for integration-style tests."""

    return create_app()


@pytest_asyncio.fixture()
async def async_client(app: FastAPI) -> AsyncIterator[AsyncClient]:
    """Provide an HTTPX async client bound to the FastAPI app."""

    async with LifespanManager(app):
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://testserver") as client:
            yield client


@pytest_asyncio.fixture()
async def public_id(async_client: AsyncClient) -> str:
    """Create a fresh coding session and return its public identifier."""

    response = await async_client.post("/api/sessions", json={"sessionName": "fixture"})
    assert response.status_code == 201, response.text
    return response.json()["publicId"]
