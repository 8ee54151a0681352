"""Service factories used by API routers.

This module should be the single place routers import per-request service
constructors from.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from codesync_api.db.database import get_db_session
from codesync_api.settings import Settings, get_settings

SessionDep = Annotated[AsyncSession, Depends(get_db_session)]
SettingsDep = Annotated[Settings, Depends(get_settings)]


def get_sessions_service(session: SessionDep, settings: SettingsDep):
    from codesync_api.features.sessions.service import SessionsService

    return SessionsService(session=session, settings=settings)


def get_tree_service(session: SessionDep, settings: SettingsDep):
    from codesync_api.features.sessions.repository import CodingSessionsRepository
    from codesync_api.features.tree.service import TreeService

    return TreeService(sessions=CodingSessionsRepository(session), settings=settings)


__all__ = [
    "SessionDep",
    "SettingsDep",
    "get_sessions_service",
    "get_tree_service",
]
