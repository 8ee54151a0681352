"""Service layer for the session file tree.

Every operation runs one full cycle: load the session, rebuild the root from
its blob, apply the change in memory and write the whole tree back. The pure
tree functions live in :mod:`.operations`; this module adds session lookup,
persistence and logging around them.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, TypeVar

from codesync_api.common.logging import log_context
from codesync_api.settings import Settings

from . import operations
from .archive import build_archive
from .exceptions import ConflictError, TreeError
from .nodes import NodeKind, TreeNode
from .paths import join_path, normalize_path, split_path, validate_name
from .search import SearchHit, search_tree
from .store import SessionStore, TreeStore

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(slots=True)
class UploadResult:
    """Where an uploaded file landed and whether it was new."""

    path: str
    created: bool


class TreeService:
    """Coordinate tree loading, mutation and persistence for one session at a time."""

    def __init__(self, *, sessions: SessionStore, settings: Settings) -> None:
        self._sessions = sessions
        self._store = TreeStore(sessions, max_depth=settings.tree_max_depth)
        self._settings = settings

    # ---- Reads -----------------------------------------------------------

    async def get_tree(self, public_id: str) -> TreeNode:
        return await self._read("get", public_id, lambda root: root)

    async def search_project(self, public_id: str, query: str) -> list[SearchHit]:
        hits = await self._read(
            "search",
            public_id,
            lambda root: search_tree(
                root,
                query,
                min_length=self._settings.search_min_query_length,
                max_results=self._settings.search_max_results,
            ),
            query=query,
        )
        logger.debug(
            "tree.search.hits",
            extra=log_context(session_id=public_id, query=query, count=len(hits)),
        )
        return hits

    async def download_archive(self, public_id: str) -> bytes:
        payload = await self._read("download", public_id, build_archive)
        logger.info(
            "tree.download.success",
            extra=log_context(session_id=public_id, size=len(payload)),
        )
        return payload

    # ---- Mutations -------------------------------------------------------

    async def create_node(
        self,
        public_id: str,
        *,
        path: str,
        kind: NodeKind,
        content: str | None = None,
    ) -> TreeNode:
        return await self._mutate(
            "create",
            public_id,
            lambda root: operations.create_node(
                root, path, kind, content, max_depth=self._settings.tree_max_depth
            ),
            path=path,
            kind=kind.value,
        )

    async def update_file_content(
        self,
        public_id: str,
        *,
        path: str,
        content: str | None,
    ) -> TreeNode:
        return await self._mutate(
            "update",
            public_id,
            lambda root: operations.update_file_content(root, path, content),
            path=path,
            length=len(content or ""),
        )

    async def delete_node(self, public_id: str, *, path: str) -> None:
        await self._mutate(
            "delete",
            public_id,
            lambda root: operations.delete_node(root, path),
            path=path,
        )

    async def rename_node(self, public_id: str, *, path: str, new_name: str) -> str:
        return await self._mutate(
            "rename",
            public_id,
            lambda root: operations.rename_node(root, path, new_name),
            path=path,
            new_name=new_name,
        )

    async def move_node(self, public_id: str, *, from_path: str, to_folder: str) -> str:
        return await self._mutate(
            "move",
            public_id,
            lambda root: operations.move_node(
                root, from_path, to_folder, max_depth=self._settings.tree_max_depth
            ),
            path=from_path,
            destination=to_folder,
        )

    async def duplicate_node(
        self,
        public_id: str,
        *,
        path: str,
        target_name: str | None = None,
    ) -> str:
        return await self._mutate(
            "duplicate",
            public_id,
            lambda root: operations.duplicate_node(root, path, target_name),
            path=path,
            target_name=target_name,
        )

    async def upload_file(
        self,
        public_id: str,
        *,
        parent_path: str | None,
        filename: str | None,
        data: bytes,
    ) -> UploadResult:
        """Store ``data`` as ``parent_path/filename``, overwriting an existing file."""
        text = data.decode("utf-8", errors="replace")

        def _apply(root: TreeNode) -> UploadResult:
            name = validate_name(filename)
            target = join_path([*split_path(parent_path), name])
            try:
                operations.create_node(
                    root, target, NodeKind.FILE, text, max_depth=self._settings.tree_max_depth
                )
            except ConflictError:
                operations.update_file_content(root, target, text)
                return UploadResult(path=target, created=False)
            return UploadResult(path=target, created=True)

        return await self._mutate(
            "upload",
            public_id,
            _apply,
            path=normalize_path(parent_path),
            upload_name=filename,
            size=len(data),
        )

    # ---- Internal helpers ------------------------------------------------

    async def _read(
        self,
        event: str,
        public_id: str,
        reader: Callable[[TreeNode], T],
        **fields: Any,
    ) -> T:
        logger.debug(f"tree.{event}.start", extra=log_context(session_id=public_id, **fields))
        try:
            session = await self._sessions.load_by_public_id(public_id)
            root = await self._store.load_root(session)
            return reader(root)
        except TreeError as exc:
            self._log_rejected(event, public_id, exc, fields)
            raise

    async def _mutate(
        self,
        event: str,
        public_id: str,
        mutation: Callable[[TreeNode], T],
        **fields: Any,
    ) -> T:
        logger.debug(f"tree.{event}.start", extra=log_context(session_id=public_id, **fields))
        try:
            session = await self._sessions.load_by_public_id(public_id)
            root = await self._store.load_root(session)
            result = mutation(root)
        except TreeError as exc:
            self._log_rejected(event, public_id, exc, fields)
            raise

        await self._store.persist(session, root)
        logger.info(f"tree.{event}.success", extra=log_context(session_id=public_id, **fields))
        return result

    @staticmethod
    def _log_rejected(event: str, public_id: str, exc: TreeError, fields: dict[str, Any]) -> None:
        logger.warning(
            f"tree.{event}.rejected",
            extra=log_context(session_id=public_id, code=exc.code, reason=exc.message, **fields),
        )


__all__ = ["TreeService", "UploadResult"]
