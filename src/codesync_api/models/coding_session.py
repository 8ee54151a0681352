"""Coding session record: one serialized file tree per session."""

from __future__ import annotations

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from codesync_api.common.ids import generate_public_id
from codesync_api.db.base import Base, TimestampMixin, UUIDPrimaryKeyMixin


class CodingSession(UUIDPrimaryKeyMixin, TimestampMixin, Base):
    """A collaborative editing session and the blob holding its file tree."""

    __tablename__ = "coding_sessions"

    public_id: Mapped[str] = mapped_column(
        String(64), nullable=False, unique=True, default=generate_public_id
    )
    session_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    files_json: Mapped[str] = mapped_column(Text, nullable=False, default="")

    def __repr__(self) -> str:
        return f"CodingSession(public_id={self.public_id!r}, session_name={self.session_name!r})"


__all__ = ["CodingSession"]
