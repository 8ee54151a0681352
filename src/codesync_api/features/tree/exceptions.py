"""Domain-specific exceptions for file tree operations.

Every caller-facing error carries a machine ``code`` that the HTTP layer
forwards in the problem payload.
"""

from __future__ import annotations


class TreeError(Exception):
    """Base class for caller-facing tree errors."""

    code = "tree_error"

    def __init__(self, message: str, *, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code


class InvalidArgumentError(TreeError):
    """Raised when a path, name or request shape is unusable."""

    code = "invalid_path"


class NotFoundError(TreeError):
    """Raised when a path segment or target node cannot be resolved."""

    code = "node_not_found"


class SessionNotFoundError(NotFoundError):
    """Raised when no coding session matches the public identifier."""

    code = "session_not_found"

    def __init__(self, public_id: str) -> None:
        super().__init__(f"session not found: {public_id}")
        self.public_id = public_id


class ConflictError(TreeError):
    """Raised when a name is already taken by a sibling."""

    code = "name_conflict"


class TreeCorruptedError(Exception):
    """Raised when a stored blob cannot be rebuilt into a tree."""

    def __init__(self, public_id: str, reason: str) -> None:
        super().__init__(f"tree for session {public_id} is corrupted: {reason}")
        self.public_id = public_id
        self.reason = reason


__all__ = [
    "ConflictError",
    "InvalidArgumentError",
    "NotFoundError",
    "SessionNotFoundError",
    "TreeCorruptedError",
    "TreeError",
]
