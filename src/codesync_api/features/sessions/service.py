"""Service layer for coding sessions."""

from __future__ import annotations

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from codesync_api.common.logging import log_context
from codesync_api.features.tree.exceptions import SessionNotFoundError
from codesync_api.features.tree.nodes import FileData
from codesync_api.features.tree.store import serialize_legacy
from codesync_api.models import CodingSession
from codesync_api.settings import Settings

from .repository import CodingSessionsRepository

logger = logging.getLogger(__name__)


class SessionsService:
    """Create and look up coding sessions."""

    def __init__(self, *, session: AsyncSession, settings: Settings) -> None:
        self._repo = CodingSessionsRepository(session)
        self._settings = settings

    def starter_blob(self) -> str:
        """New sessions start in the legacy form with a single welcome file.

        The first tree access migrates it.
        """
        starter = FileData(
            name=self._settings.session_starter_filename,
            content=self._settings.session_starter_content,
            is_folder=False,
        )
        return serialize_legacy([starter])

    async def create_session(self, *, session_name: str | None = None) -> CodingSession:
        name = (session_name or "").strip() or None
        logger.debug("session.create.start", extra=log_context(session_name=name))

        record = CodingSession(session_name=name, files_json=self.starter_blob())
        record = await self._repo.add(record)

        logger.info(
            "session.create.success",
            extra=log_context(session_id=record.public_id, session_name=name),
        )
        return record

    async def get_session(self, public_id: str) -> CodingSession:
        logger.debug("session.get.start", extra=log_context(session_id=public_id))
        try:
            return await self._repo.load_by_public_id(public_id)
        except SessionNotFoundError:
            logger.warning("session.get.not_found", extra=log_context(session_id=public_id))
            raise


__all__ = ["SessionsService"]
