"""ORM models."""

from .coding_session import CodingSession

__all__ = ["CodingSession"]
