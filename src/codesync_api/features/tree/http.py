"""Shared HTTP helpers for the tree and session features."""

from __future__ import annotations

from typing import Annotated, NoReturn

from fastapi import HTTPException, Path, status

from .exceptions import (
    ConflictError,
    InvalidArgumentError,
    NotFoundError,
    TreeCorruptedError,
    TreeError,
)

PublicIdPath = Annotated[
    str,
    Path(
        ...,
        description="Public session identifier",
        min_length=1,
    ),
]

_STATUS_BY_ERROR: tuple[tuple[type[TreeError], int], ...] = (
    (InvalidArgumentError, status.HTTP_400_BAD_REQUEST),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (ConflictError, status.HTTP_409_CONFLICT),
)


def raise_problem(
    code: str,
    status_code: int,
    *,
    detail: str | None = None,
    title: str | None = None,
    meta: dict | None = None,
) -> NoReturn:
    """Raise a Problem Details-style HTTPException."""

    payload = {
        "type": "about:blank",
        "title": title or code.replace("_", " ").title(),
        "status": status_code,
        "detail": detail,
        "code": code,
    }
    if meta:
        payload["meta"] = meta
    raise HTTPException(status_code, detail=payload)


def raise_tree_problem(exc: TreeError) -> NoReturn:
    """Translate a caller-facing tree error into its HTTP problem."""

    for error_type, status_code in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            raise_problem(exc.code, status_code, detail=exc.message)
    raise_problem(exc.code, status.HTTP_400_BAD_REQUEST, detail=exc.message)


def raise_corrupted_problem(exc: TreeCorruptedError) -> NoReturn:
    raise_problem(
        "tree_corrupted",
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail="The session's file tree could not be loaded.",
        meta={"publicId": exc.public_id},
    )


__all__ = [
    "PublicIdPath",
    "raise_corrupted_problem",
    "raise_problem",
    "raise_tree_problem",
]
