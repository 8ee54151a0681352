"""Node types for the virtual file tree.

A session's files live in one recursive structure: folders own an ordered
list of children and files own text content. The same pydantic model
validates the stored blob and renders API responses.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class NodeKind(str, Enum):
    """Discriminates folders from files."""

    FILE = "file"
    FOLDER = "folder"


class TreeNode(BaseModel):
    """A folder or a file inside a session tree.

    Files never carry ``children`` and folders never carry ``content``; the
    validator normalizes incoming payloads so that a file's content is at
    least ``""`` and a folder's children at least ``[]``.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    name: str = ""
    kind: NodeKind = Field(alias="type")
    content: str | None = None
    children: list[TreeNode] | None = None

    @field_validator("name", mode="before")
    @classmethod
    def _v_name(cls, value: Any) -> str:
        return "" if value is None else value

    @model_validator(mode="after")
    def _normalize(self) -> TreeNode:
        if self.kind is NodeKind.FILE:
            if self.content is None:
                self.content = ""
            self.children = None
        else:
            if self.children is None:
                self.children = []
            self.content = None
        return self

    @property
    def is_folder(self) -> bool:
        return self.kind is NodeKind.FOLDER

    @property
    def is_file(self) -> bool:
        return self.kind is NodeKind.FILE

    def clone(self) -> TreeNode:
        """Return a structural copy of this node and its whole subtree."""
        return self.model_copy(deep=True)

    def to_json(self) -> str:
        """Compact JSON with a fixed field order (``name, type, content|children``)."""
        return self.model_dump_json(by_alias=True, exclude_none=True)


TreeNode.model_rebuild()


def new_folder(name: str) -> TreeNode:
    return TreeNode(name=name, kind=NodeKind.FOLDER)


def new_file(name: str, content: str | None = "") -> TreeNode:
    return TreeNode(name=name, kind=NodeKind.FILE, content=content)


def new_root() -> TreeNode:
    """Return an empty root folder (named ``""``)."""
    return new_folder("")


class FileData(BaseModel):
    """Legacy flat entry: ``name`` may be a full slash path, ``/`` suffix marks a folder."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    name: str | None = None
    content: str | None = None
    is_folder: bool = Field(default=False, alias="isFolder")

    @field_validator("is_folder", mode="before")
    @classmethod
    def _v_is_folder(cls, value: Any) -> Any:
        return False if value is None else value


__all__ = [
    "FileData",
    "NodeKind",
    "TreeNode",
    "new_file",
    "new_folder",
    "new_root",
]
