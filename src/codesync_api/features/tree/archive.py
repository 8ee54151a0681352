"""Zip export of a whole session tree."""

from __future__ import annotations

import io
import zipfile

from .nodes import TreeNode
from .paths import join_path


def build_archive(root: TreeNode) -> bytes:
    """Return a deflated zip holding one entry per node, in pre-order.

    Folders become directory entries (``path/``) and files carry their
    content as UTF-8. The root itself has no entry.
    """
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, mode="w", compression=zipfile.ZIP_DEFLATED) as archive:
        _write_children(archive, root, [])
    buffer.seek(0)
    return buffer.read()


def _write_children(archive: zipfile.ZipFile, node: TreeNode, prefix: list[str]) -> None:
    for child in node.children or ():
        segments = [*prefix, child.name]
        path = join_path(segments)
        if child.is_folder:
            archive.mkdir(path)
            _write_children(archive, child, segments)
        else:
            archive.writestr(path, (child.content or "").encode("utf-8"))


def archive_filename(public_id: str) -> str:
    return f"session-{public_id}.zip"


__all__ = ["archive_filename", "build_archive"]
