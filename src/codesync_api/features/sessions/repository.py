"""Persistence helpers for coding sessions."""

from __future__ import annotations

from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession

from codesync_api.features.tree.exceptions import SessionNotFoundError
from codesync_api.models import CodingSession


class CodingSessionsRepository:
    """Query helpers for coding session records.

    Also serves as the tree feature's ``SessionStore``.
    """

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    def base_query(self) -> Select[tuple[CodingSession]]:
        return select(CodingSession)

    async def get_by_public_id(self, public_id: str) -> CodingSession | None:
        stmt = self.base_query().where(CodingSession.public_id == public_id).limit(1)
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def load_by_public_id(self, public_id: str) -> CodingSession:
        record = await self.get_by_public_id(public_id)
        if record is None:
            raise SessionNotFoundError(public_id)
        return record

    async def add(self, record: CodingSession) -> CodingSession:
        self._session.add(record)
        await self._session.flush()
        await self._session.refresh(record)
        return record

    async def save(self, record: CodingSession) -> None:
        self._session.add(record)
        await self._session.flush()


__all__ = ["CodingSessionsRepository"]
