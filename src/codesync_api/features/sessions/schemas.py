"""Pydantic schemas for the sessions module."""

from __future__ import annotations

from datetime import datetime

from pydantic import Field

from codesync_api.common.schema import BaseSchema


class SessionCreateRequest(BaseSchema):
    session_name: str | None = Field(default=None, alias="sessionName", max_length=255)


class SessionCreatedResponse(BaseSchema):
    """Identifier clients use for every tree call."""

    public_id: str = Field(alias="publicId")
    session_name: str | None = Field(default=None, alias="sessionName")
    created_at: datetime = Field(alias="createdAt")


class SessionDetail(SessionCreatedResponse):
    updated_at: datetime = Field(alias="updatedAt")


__all__ = ["SessionCreateRequest", "SessionCreatedResponse", "SessionDetail"]
