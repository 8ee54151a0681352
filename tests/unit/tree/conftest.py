from __future__ import annotations

import pytest

from codesync_api.features.tree.exceptions import SessionNotFoundError
from codesync_api.features.tree.service import TreeService
from codesync_api.models import CodingSession
from codesync_api.settings import Settings


class InMemorySessionStore:
    """Dict-backed stand-in for the session repository."""

    def __init__(self) -> None:
        self.records: dict[str, CodingSession] = {}
        self.saved: list[str] = []

    def add(self, public_id: str, blob: str = "") -> CodingSession:
        record = CodingSession(public_id=public_id, session_name=None, files_json=blob)
        self.records[public_id] = record
        return record

    async def load_by_public_id(self, public_id: str) -> CodingSession:
        record = self.records.get(public_id)
        if record is None:
            raise SessionNotFoundError(public_id)
        return record

    async def save(self, session: CodingSession) -> None:
        self.saved.append(session.files_json)


@pytest.fixture()
def store() -> InMemorySessionStore:
    return InMemorySessionStore()


@pytest.fixture()
def settings() -> Settings:
    return Settings(_env_file=None)


@pytest.fixture()
def service(store: InMemorySessionStore, settings: Settings) -> TreeService:
    return TreeService(sessions=store, settings=settings)
