"""In-memory mutations over a loaded session tree.

Each function resolves everything it needs before touching the tree, so a
raised error never leaves a half-applied change behind for the caller to
persist.
"""

from __future__ import annotations

from .exceptions import ConflictError, InvalidArgumentError, NotFoundError
from .nodes import NodeKind, TreeNode, new_file, new_folder
from .paths import (
    MAX_TREE_DEPTH,
    ensure_folder,
    find_child,
    find_parent,
    is_ancestor_path,
    join_path,
    require_depth,
    require_segments,
    split_path,
    subtree_height,
    validate_name,
)


def _resolve(root: TreeNode, segments: list[str]) -> tuple[TreeNode, TreeNode]:
    parent = find_parent(root, segments)
    node = find_child(parent, segments[-1])
    if node is None:
        raise NotFoundError(f"node not found: {join_path(segments)}", code="node_not_found")
    return parent, node


def _detach(parent: TreeNode, node: TreeNode) -> None:
    # Identity, not equality: pydantic models compare by value.
    for index, child in enumerate(parent.children):
        if child is node:
            del parent.children[index]
            return


def _ensure_free(parent: TreeNode, name: str) -> None:
    if find_child(parent, name) is not None:
        raise ConflictError(f"name already exists: {name}", code="name_conflict")


def create_node(
    root: TreeNode,
    path: str,
    kind: NodeKind,
    content: str | None = None,
    *,
    max_depth: int = MAX_TREE_DEPTH,
) -> TreeNode:
    """Append a new file or folder at ``path``; the parent folder must exist."""
    segments = require_segments(path)
    name = validate_name(segments[-1])
    require_depth(len(segments), max_depth, join_path(segments))
    parent = find_parent(root, segments)
    _ensure_free(parent, name)
    node = new_folder(name) if kind is NodeKind.FOLDER else new_file(name, content)
    parent.children.append(node)
    return node


def update_file_content(root: TreeNode, path: str, content: str | None) -> TreeNode:
    segments = require_segments(path)
    _, node = _resolve(root, segments)
    if not node.is_file:
        raise InvalidArgumentError(f"not a file: {join_path(segments)}", code="not_a_file")
    node.content = content or ""
    return node


def delete_node(root: TreeNode, path: str) -> TreeNode:
    """Remove the node at ``path`` together with its subtree."""
    segments = require_segments(path)
    parent, node = _resolve(root, segments)
    _detach(parent, node)
    return node


def rename_node(root: TreeNode, path: str, new_name: str) -> str:
    """Rename in place and return the new path.

    Renaming to the current name counts as a collision.
    """
    validate_name(new_name)
    segments = require_segments(path)
    parent, node = _resolve(root, segments)
    _ensure_free(parent, new_name)
    node.name = new_name
    return join_path([*segments[:-1], new_name])


def move_node(
    root: TreeNode,
    from_path: str,
    to_folder: str,
    *,
    max_depth: int = MAX_TREE_DEPTH,
) -> str:
    """Move a node under ``to_folder`` (created on demand) and return its new path."""
    from_segments = require_segments(from_path)
    dest_segments = split_path(to_folder)

    parent, node = _resolve(root, from_segments)
    if dest_segments == from_segments or is_ancestor_path(from_segments, dest_segments):
        raise InvalidArgumentError(
            f"cannot move {join_path(from_segments)} into itself",
            code="invalid_destination",
        )

    require_depth(
        len(dest_segments) + subtree_height(node),
        max_depth,
        join_path([*dest_segments, node.name]),
    )
    dest = ensure_folder(root, dest_segments)
    _ensure_free(dest, node.name)

    _detach(parent, node)
    dest.children.append(node)
    return join_path([*dest_segments, node.name])


def duplicate_node(root: TreeNode, path: str, target_name: str | None = None) -> str:
    """Deep-copy a node next to the original and return the copy's path."""
    segments = require_segments(path)
    parent, node = _resolve(root, segments)

    if target_name is not None and target_name.strip():
        new_name = validate_name(target_name)
        _ensure_free(parent, new_name)
    else:
        new_name = unique_copy_name(parent, node.name, keep_extension=node.is_file)

    copy = node.clone()
    copy.name = new_name
    parent.children.append(copy)
    return join_path([*segments[:-1], new_name])


def split_extension(name: str) -> tuple[str, str]:
    """Split on the last dot unless it leads the name (``.env`` has no extension)."""
    index = name.rfind(".")
    if index > 0:
        return name[:index], name[index:]
    return name, ""


def unique_copy_name(parent: TreeNode, name: str, *, keep_extension: bool) -> str:
    """First free name among ``<base>-copy``, ``<base>-copy 2``, ``<base>-copy 3``..."""
    base, ext = split_extension(name) if keep_extension else (name, "")
    attempt = 1
    while True:
        suffix = "-copy" if attempt == 1 else f"-copy {attempt}"
        candidate = f"{base}{suffix}{ext}"
        if find_child(parent, candidate) is None:
            return candidate
        attempt += 1


__all__ = [
    "create_node",
    "delete_node",
    "duplicate_node",
    "move_node",
    "rename_node",
    "split_extension",
    "unique_copy_name",
    "update_file_content",
]
