"""Conversion between the legacy flat file list and the tree form."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from typing import Any

from pydantic import ValidationError

from codesync_api.common.logging import log_context

from .nodes import FileData, TreeNode, new_file, new_folder, new_root
from .exceptions import InvalidArgumentError
from .paths import MAX_TREE_DEPTH, find_child, join_path, split_path, validate_name

logger = logging.getLogger(__name__)


def _kind_clash(root: TreeNode, segments: list[str], is_folder: bool) -> str | None:
    """Return the first segment whose existing node has the wrong kind."""
    current: TreeNode | None = root
    for index, segment in enumerate(segments):
        if current is None:
            return None
        existing = find_child(current, segment)
        if existing is None:
            return None
        last = index == len(segments) - 1
        wants_folder = is_folder or not last
        if existing.is_folder != wants_folder:
            return segment
        current = existing if existing.is_folder else None
    return None


def flat_list_to_tree(
    entries: Iterable[FileData],
    *,
    max_depth: int = MAX_TREE_DEPTH,
) -> TreeNode:
    """Build a tree from legacy entries, preserving input order among siblings.

    Intermediate folders are created on demand and repeated folder entries
    collapse into one node. A repeated file entry replaces the earlier
    content. Entries without a usable name, deeper than ``max_depth`` levels,
    or that would need a folder where a file sits (or the reverse) are skipped.
    """
    root = new_root()
    for entry in entries:
        raw_name = entry.name or ""
        segments = split_path(raw_name)
        if not segments:
            logger.debug(
                "tree.legacy.entry_skipped",
                extra=log_context(path=raw_name, reason="empty_name"),
            )
            continue
        if len(segments) > max_depth:
            logger.warning(
                "tree.legacy.entry_skipped",
                extra=log_context(path=raw_name, reason="too_deep", depth=len(segments)),
            )
            continue
        if not _usable_segments(segments):
            logger.warning(
                "tree.legacy.entry_skipped",
                extra=log_context(path=raw_name, reason="invalid_name"),
            )
            continue

        is_folder = bool(entry.is_folder) or raw_name.endswith("/")
        clash = _kind_clash(root, segments, is_folder)
        if clash is not None:
            logger.warning(
                "tree.legacy.kind_clash",
                extra=log_context(path=join_path(segments), segment=clash, is_folder=is_folder),
            )
            continue

        current = root
        for segment in segments[:-1]:
            current = _ensure_folder_child(current, segment)

        name = segments[-1]
        if is_folder:
            _ensure_folder_child(current, name)
            continue

        existing = find_child(current, name)
        if existing is not None:
            existing.content = entry.content or ""
        else:
            current.children.append(new_file(name, entry.content))
    return root


def _usable_segments(segments: list[str]) -> bool:
    try:
        for segment in segments:
            validate_name(segment)
    except InvalidArgumentError:
        return False
    return True


def parse_entries(items: Iterable[Any]) -> list[FileData]:
    """Validate raw legacy items one by one, dropping the ones that do not fit.

    ``null`` items are skipped quietly; anything else that is not a usable
    entry is skipped with a WARNING.
    """
    entries: list[FileData] = []
    for index, item in enumerate(items):
        if item is None:
            continue
        try:
            entries.append(FileData.model_validate(item))
        except ValidationError as exc:
            logger.warning(
                "tree.legacy.entry_invalid",
                extra=log_context(index=index, errors=exc.error_count()),
            )
    return entries


def _ensure_folder_child(parent: TreeNode, name: str) -> TreeNode:
    existing = find_child(parent, name)
    if existing is not None:
        return existing
    folder = new_folder(name)
    parent.children.append(folder)
    return folder


def tree_to_flat_list(root: TreeNode) -> list[FileData]:
    """Flatten ``root`` in pre-order; folders get a trailing ``/`` and no content."""
    return list(_flatten(root, []))


def _flatten(node: TreeNode, prefix: list[str]) -> Iterator[FileData]:
    for child in node.children or ():
        segments = [*prefix, child.name]
        path = join_path(segments)
        if child.is_folder:
            yield FileData(name=f"{path}/", content=None, is_folder=True)
            yield from _flatten(child, segments)
        else:
            yield FileData(name=path, content=child.content, is_folder=False)


__all__ = ["flat_list_to_tree", "parse_entries", "tree_to_flat_list"]
