"""Slash-separated path handling over a session tree."""

from __future__ import annotations

import re
from collections.abc import Sequence

from .exceptions import InvalidArgumentError, NotFoundError
from .nodes import TreeNode, new_folder

_REPEATED_SLASHES = re.compile(r"/+")
_RESERVED_NAMES = {".", ".."}

# Each tree level adds two levels of JSON nesting; the JSON parser gives up
# near 200, so stored trees stay well below that.
MAX_TREE_DEPTH = 64


def split_path(path: str | None) -> list[str]:
    """Split ``path`` into segments; an empty result addresses the root.

    Repeated slashes collapse and leading or trailing slashes are ignored, so
    ``"//a///b/"`` yields ``["a", "b"]``.
    """
    if not path:
        return []
    normalized = _REPEATED_SLASHES.sub("/", path).strip("/")
    if not normalized:
        return []
    return normalized.split("/")


def join_path(segments: Sequence[str]) -> str:
    return "/".join(segments)


def normalize_path(path: str | None) -> str:
    return join_path(split_path(path))


def find_child(parent: TreeNode, name: str) -> TreeNode | None:
    """Return the child called ``name`` (any kind) or ``None``."""
    for child in parent.children or ():
        if child.name == name:
            return child
    return None


def find_parent(root: TreeNode, segments: Sequence[str]) -> TreeNode:
    """Walk every segment except the last; each one must be an existing folder."""
    current = root
    for segment in segments[:-1]:
        nxt = find_child(current, segment)
        if nxt is None or not nxt.is_folder:
            raise NotFoundError(f"folder not found: {segment}", code="folder_not_found")
        current = nxt
    return current


def ensure_folder(root: TreeNode, segments: Sequence[str]) -> TreeNode:
    """Walk every segment, creating missing folders along the way.

    Every segment must be a valid node name. A segment already taken by a file
    cannot become a folder without breaking sibling-name uniqueness, so it is
    rejected. Nothing is created unless the whole path can be.
    """
    for segment in segments:
        validate_name(segment)

    current = root
    for segment in segments:
        nxt = find_child(current, segment)
        if nxt is None:
            nxt = new_folder(segment)
            current.children.append(nxt)
        elif not nxt.is_folder:
            raise InvalidArgumentError(
                f"destination segment is a file: {segment}",
                code="invalid_destination",
            )
        current = nxt
    return current


def is_ancestor_path(ancestor: Sequence[str], candidate: Sequence[str]) -> bool:
    """True when ``ancestor`` is a strict leading prefix of ``candidate``."""
    if len(ancestor) >= len(candidate):
        return False
    return list(candidate[: len(ancestor)]) == list(ancestor)


def validate_name(name: str | None) -> str:
    """Return ``name`` when it is usable as a single node name."""
    if name is None or not name.strip():
        raise InvalidArgumentError("name must not be blank", code="invalid_name")
    if "/" in name:
        raise InvalidArgumentError(f"name must not contain '/': {name}", code="invalid_name")
    if name in _RESERVED_NAMES:
        raise InvalidArgumentError(f"name is reserved: {name}", code="invalid_name")
    return name


def subtree_height(node: TreeNode) -> int:
    """Levels occupied by ``node`` and its deepest descendant (a file is 1)."""
    return 1 + max((subtree_height(child) for child in node.children or ()), default=0)


def require_depth(depth: int, max_depth: int, path: str) -> None:
    """Reject a change that would put a node deeper than ``max_depth`` levels."""
    if depth > max_depth:
        raise InvalidArgumentError(
            f"tree depth would exceed {max_depth} levels: {path}",
            code="path_too_deep",
        )


def require_segments(path: str | None) -> list[str]:
    """Split ``path`` and reject anything that resolves to the root."""
    segments = split_path(path)
    if not segments:
        raise InvalidArgumentError("path must not address the root", code="invalid_path")
    return segments


__all__ = [
    "MAX_TREE_DEPTH",
    "ensure_folder",
    "find_child",
    "find_parent",
    "is_ancestor_path",
    "join_path",
    "normalize_path",
    "require_depth",
    "require_segments",
    "split_path",
    "subtree_height",
    "validate_name",
]
