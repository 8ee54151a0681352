"""HTTP routes for creating and reading coding sessions."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, status

from codesync_api.api.deps import get_sessions_service
from codesync_api.features.tree.exceptions import SessionNotFoundError
from codesync_api.features.tree.http import PublicIdPath, raise_problem

from .schemas import SessionCreatedResponse, SessionCreateRequest, SessionDetail
from .service import SessionsService

router = APIRouter()


@router.post(
    "",
    response_model=SessionCreatedResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a coding session",
)
async def create_session(
    service: Annotated[SessionsService, Depends(get_sessions_service)],
    payload: SessionCreateRequest | None = None,
) -> SessionCreatedResponse:
    record = await service.create_session(
        session_name=payload.session_name if payload is not None else None
    )
    return SessionCreatedResponse.model_validate(record)


@router.get(
    "/{public_id}",
    response_model=SessionDetail,
    summary="Read a coding session",
)
async def read_session(
    public_id: PublicIdPath,
    service: Annotated[SessionsService, Depends(get_sessions_service)],
) -> SessionDetail:
    try:
        record = await service.get_session(public_id)
    except SessionNotFoundError as exc:
        raise_problem(exc.code, status.HTTP_404_NOT_FOUND, detail=exc.message)
    return SessionDetail.model_validate(record)


__all__ = ["router"]
