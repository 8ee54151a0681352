"""Line-oriented full-text search over file contents."""

from __future__ import annotations

import re
from collections.abc import Iterator
from dataclasses import dataclass

from .exceptions import InvalidArgumentError
from .nodes import TreeNode
from .paths import join_path

_LINE_BREAK = re.compile(r"\r?\n")


@dataclass(slots=True)
class SearchHit:
    """One matching line."""

    path: str
    line: int
    content: str


def search_tree(
    root: TreeNode,
    query: str,
    *,
    min_length: int = 3,
    max_results: int = 100,
) -> list[SearchHit]:
    """Case-insensitive substring search, capped at ``max_results`` hits."""
    if query is None or len(query) < min_length:
        raise InvalidArgumentError(
            f"query must be at least {min_length} characters",
            code="query_too_short",
        )

    needle = query.lower()
    hits: list[SearchHit] = []
    for path, node in _preorder_files(root, []):
        for number, text in enumerate(_LINE_BREAK.split(node.content or ""), start=1):
            if needle in text.lower():
                hits.append(SearchHit(path=path, line=number, content=text.strip()))
                if len(hits) >= max_results:
                    return hits
    return hits


def _preorder_files(node: TreeNode, prefix: list[str]) -> Iterator[tuple[str, TreeNode]]:
    for child in node.children or ():
        segments = [*prefix, child.name]
        if child.is_folder:
            yield from _preorder_files(child, segments)
        else:
            yield join_path(segments), child


__all__ = ["SearchHit", "search_tree"]
