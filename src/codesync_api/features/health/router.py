"""Operational liveness endpoint."""

from __future__ import annotations

import logging

from fastapi import APIRouter, status
from sqlalchemy import text

from codesync_api.api.deps import SettingsDep
from codesync_api.db.base import utc_now
from codesync_api.db.database import session_scope

from .schemas import HealthCheckResponse, HealthComponentStatus

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get(
    "",
    response_model=HealthCheckResponse,
    status_code=status.HTTP_200_OK,
    summary="Service health status",
    response_model_exclude_none=True,
)
async def read_health(settings: SettingsDep) -> HealthCheckResponse:
    """Return liveness plus a cheap database round trip."""

    api = HealthComponentStatus(name="api", status="available", detail=f"v{settings.app_version}")
    try:
        async with session_scope() as session:
            await session.execute(text("SELECT 1"))
    except Exception:
        logger.exception("health.database.unavailable")
        database = HealthComponentStatus(name="database", status="unavailable")
        return HealthCheckResponse(
            status="error",
            timestamp=utc_now(),
            components=[api, database],
        )

    database = HealthComponentStatus(name="database", status="available", detail="connected")
    return HealthCheckResponse(status="ok", timestamp=utc_now(), components=[api, database])


__all__ = ["router"]
