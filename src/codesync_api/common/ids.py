"""Identifier helpers for CodeSync."""

from __future__ import annotations

import uuid

# uuid.uuid7 ships with Python 3.14; earlier interpreters get random UUIDs.
_primary_key_factory = getattr(uuid, "uuid7", uuid.uuid4)


def generate_uuid7() -> uuid.UUID:
    """Primary key value, time-ordered where the interpreter supports it."""
    return _primary_key_factory()


def generate_public_id() -> str:
    """Opaque identifier clients use to address a session."""
    return str(uuid.uuid4())


__all__ = ["generate_public_id", "generate_uuid7"]
