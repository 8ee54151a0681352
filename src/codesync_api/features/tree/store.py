"""Loading and persisting a session's tree blob."""

from __future__ import annotations

import logging
from typing import Any, Protocol

from pydantic import TypeAdapter, ValidationError

from codesync_api.common.logging import log_context
from codesync_api.models import CodingSession

from .exceptions import TreeCorruptedError
from .legacy import flat_list_to_tree, parse_entries
from .nodes import FileData, TreeNode, new_root
from .paths import MAX_TREE_DEPTH

logger = logging.getLogger(__name__)

_LEGACY_ADAPTER = TypeAdapter(list[FileData])
_RAW_LIST_ADAPTER = TypeAdapter(list[Any])


class SessionStore(Protocol):
    """Lookup and write-back of coding session records."""

    async def load_by_public_id(self, public_id: str) -> CodingSession:
        """Return the session or raise ``SessionNotFoundError``."""
        ...

    async def save(self, session: CodingSession) -> None:
        """Persist the whole session record."""
        ...


def is_legacy_blob(blob: str) -> bool:
    return blob.lstrip().startswith("[")


def serialize_tree(root: TreeNode) -> str:
    return root.to_json()


def parse_tree_blob(public_id: str, blob: str) -> TreeNode:
    """Parse a tree-form blob; anything unusable raises ``TreeCorruptedError``."""
    try:
        root = TreeNode.model_validate_json(blob)
    except ValidationError as exc:
        raise TreeCorruptedError(public_id, "invalid tree json") from exc
    if not root.is_folder:
        raise TreeCorruptedError(public_id, "root is not a folder")
    return root


def serialize_legacy(entries: list[FileData]) -> str:
    """Render entries in the legacy flat-list form (``name, content, isFolder``)."""
    return _LEGACY_ADAPTER.dump_json(entries, by_alias=True).decode("utf-8")


def parse_legacy_blob(
    public_id: str, blob: str, *, max_depth: int = MAX_TREE_DEPTH
) -> TreeNode:
    """Parse a legacy list; only a blob that is not a JSON array is corrupt."""
    try:
        items = _RAW_LIST_ADAPTER.validate_json(blob)
    except ValidationError as exc:
        raise TreeCorruptedError(public_id, "invalid legacy file list") from exc
    return flat_list_to_tree(parse_entries(items), max_depth=max_depth)


class TreeStore:
    """Turns a session blob into a root node and writes whole trees back."""

    def __init__(self, sessions: SessionStore, *, max_depth: int = MAX_TREE_DEPTH) -> None:
        self._sessions = sessions
        self._max_depth = max_depth

    async def load_root(self, session: CodingSession) -> TreeNode:
        """Return the session's root folder, migrating the legacy form in place.

        A blank blob yields an empty root that is not written back. A legacy
        list is converted and persisted before returning, so later loads see
        the tree form.
        """
        blob = session.files_json or ""
        public_id = session.public_id
        try:
            if not blob.strip():
                return new_root()
            if is_legacy_blob(blob):
                root = parse_legacy_blob(public_id, blob, max_depth=self._max_depth)
                await self.persist(session, root)
                logger.info(
                    "tree.migrate.legacy",
                    extra=log_context(session_id=public_id, nodes=_count_nodes(root)),
                )
                return root
            return parse_tree_blob(public_id, blob)
        except TreeCorruptedError:
            logger.exception(
                "tree.load.corrupted",
                extra=log_context(session_id=public_id, blob_length=len(blob)),
            )
            raise

    async def persist(self, session: CodingSession, root: TreeNode) -> None:
        session.files_json = serialize_tree(root)
        await self._sessions.save(session)
        logger.debug(
            "tree.persist",
            extra=log_context(session_id=session.public_id, blob_length=len(session.files_json)),
        )


def _count_nodes(node: TreeNode) -> int:
    return sum(1 + _count_nodes(child) for child in node.children or ())


__all__ = [
    "SessionStore",
    "TreeStore",
    "is_legacy_blob",
    "parse_legacy_blob",
    "parse_tree_blob",
    "serialize_legacy",
    "serialize_tree",
]
