"""Pydantic schemas for the file tree endpoints."""

from __future__ import annotations

from pydantic import Field

from codesync_api.common.schema import BaseSchema

from .nodes import NodeKind, TreeNode


class TreeResponse(BaseSchema):
    """A session's whole tree."""

    public_id: str = Field(alias="publicId")
    tree: TreeNode


class NodeCreateRequest(BaseSchema):
    path: str = Field(..., description="Slash-separated path of the new node.")
    kind: NodeKind = Field(default=NodeKind.FILE, alias="type")
    content: str | None = Field(default="", description="Initial content; ignored for folders.")


class ContentUpdateRequest(BaseSchema):
    path: str
    content: str | None = ""


class RenameRequest(BaseSchema):
    path: str
    new_name: str = Field(alias="newName")


class MoveRequest(BaseSchema):
    """Move ``from`` into the folder ``to`` (``""`` is the root)."""

    from_path: str = Field(alias="from")
    to_folder: str = Field(default="", alias="to")


class DuplicateRequest(BaseSchema):
    path: str
    target_name: str | None = Field(default=None, alias="targetName")


class NodePathResponse(BaseSchema):
    """Path of a node after a rename or move."""

    path: str


class DuplicateResponse(BaseSchema):
    new_path: str = Field(alias="newPath")


class UploadResponse(BaseSchema):
    path: str
    created: bool


class SearchHitOut(BaseSchema):
    path: str
    line: int = Field(..., ge=1)
    content: str


__all__ = [
    "ContentUpdateRequest",
    "DuplicateRequest",
    "DuplicateResponse",
    "MoveRequest",
    "NodeCreateRequest",
    "NodePathResponse",
    "RenameRequest",
    "SearchHitOut",
    "TreeResponse",
    "UploadResponse",
]
