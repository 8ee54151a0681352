"""HTTP routes for the per-session virtual file tree."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, File, Form, Query, Request, Response, UploadFile, status
from fastapi.responses import JSONResponse

from codesync_api.api.deps import SettingsDep, get_tree_service

from .archive import archive_filename
from .exceptions import TreeCorruptedError, TreeError
from .http import PublicIdPath, raise_corrupted_problem, raise_problem, raise_tree_problem
from .nodes import NodeKind, TreeNode
from .schemas import (
    ContentUpdateRequest,
    DuplicateRequest,
    DuplicateResponse,
    MoveRequest,
    NodeCreateRequest,
    NodePathResponse,
    RenameRequest,
    SearchHitOut,
    TreeResponse,
    UploadResponse,
)
from .service import TreeService

router = APIRouter()

TreeServiceDep = Annotated[TreeService, Depends(get_tree_service)]

UPLOAD_FILE_FIELD = File(..., description="File to store in the tree.")
UPLOAD_PATH_FIELD = Form("", description="Folder that receives the file; empty for the root.")


@router.get(
    "/{public_id}",
    response_model=TreeResponse,
    response_model_exclude_none=True,
    summary="Read the session tree",
)
async def read_tree(public_id: PublicIdPath, service: TreeServiceDep) -> TreeResponse:
    try:
        root = await service.get_tree(public_id)
    except TreeError as exc:
        raise_tree_problem(exc)
    except TreeCorruptedError as exc:
        raise_corrupted_problem(exc)
    return TreeResponse(public_id=public_id, tree=root)


@router.post(
    "/{public_id}",
    response_model=TreeNode,
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
    summary="Create a file or folder",
)
async def create_node(
    public_id: PublicIdPath,
    payload: NodeCreateRequest,
    service: TreeServiceDep,
) -> TreeNode:
    try:
        return await service.create_node(
            public_id,
            path=payload.path,
            kind=NodeKind(payload.kind),
            content=payload.content,
        )
    except TreeError as exc:
        raise_tree_problem(exc)
    except TreeCorruptedError as exc:
        raise_corrupted_problem(exc)


@router.put(
    "/{public_id}/content",
    response_model=TreeNode,
    response_model_exclude_none=True,
    summary="Replace a file's content",
)
async def update_content(
    public_id: PublicIdPath,
    payload: ContentUpdateRequest,
    service: TreeServiceDep,
) -> TreeNode:
    try:
        return await service.update_file_content(
            public_id,
            path=payload.path,
            content=payload.content,
        )
    except TreeError as exc:
        raise_tree_problem(exc)
    except TreeCorruptedError as exc:
        raise_corrupted_problem(exc)


@router.delete(
    "/{public_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Delete a node and its subtree",
)
async def delete_node(
    public_id: PublicIdPath,
    service: TreeServiceDep,
    path: Annotated[str, Query(description="Path of the node to delete.")] = "",
) -> Response:
    try:
        await service.delete_node(public_id, path=path)
    except TreeError as exc:
        raise_tree_problem(exc)
    except TreeCorruptedError as exc:
        raise_corrupted_problem(exc)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/{public_id}/rename",
    response_model=NodePathResponse,
    summary="Rename a node",
)
async def rename_node(
    public_id: PublicIdPath,
    payload: RenameRequest,
    service: TreeServiceDep,
) -> NodePathResponse:
    try:
        new_path = await service.rename_node(
            public_id,
            path=payload.path,
            new_name=payload.new_name,
        )
    except TreeError as exc:
        raise_tree_problem(exc)
    except TreeCorruptedError as exc:
        raise_corrupted_problem(exc)
    return NodePathResponse(path=new_path)


@router.post(
    "/{public_id}/move",
    response_model=NodePathResponse,
    summary="Move a node into another folder",
)
async def move_node(
    public_id: PublicIdPath,
    payload: MoveRequest,
    service: TreeServiceDep,
) -> NodePathResponse:
    try:
        new_path = await service.move_node(
            public_id,
            from_path=payload.from_path,
            to_folder=payload.to_folder,
        )
    except TreeError as exc:
        raise_tree_problem(exc)
    except TreeCorruptedError as exc:
        raise_corrupted_problem(exc)
    return NodePathResponse(path=new_path)


@router.post(
    "/{public_id}/duplicate",
    response_model=DuplicateResponse,
    summary="Duplicate a node next to the original",
)
async def duplicate_node(
    public_id: PublicIdPath,
    payload: DuplicateRequest,
    service: TreeServiceDep,
) -> DuplicateResponse:
    try:
        new_path = await service.duplicate_node(
            public_id,
            path=payload.path,
            target_name=payload.target_name,
        )
    except TreeError as exc:
        raise_tree_problem(exc)
    except TreeCorruptedError as exc:
        raise_corrupted_problem(exc)
    return DuplicateResponse(new_path=new_path)


@router.post(
    "/{public_id}/upload",
    response_model=UploadResponse,
    responses={status.HTTP_201_CREATED: {"model": UploadResponse}},
    summary="Upload a text file into the tree",
)
async def upload_file(
    public_id: PublicIdPath,
    request: Request,
    service: TreeServiceDep,
    settings: SettingsDep,
    file: UploadFile = UPLOAD_FILE_FIELD,
    path: str = UPLOAD_PATH_FIELD,
) -> JSONResponse:
    limit = settings.upload_max_bytes
    data = await file.read(limit + 1)
    if len(data) > limit:
        raise_problem(
            "upload_too_large",
            status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"Uploads are limited to {limit} bytes.",
        )

    try:
        result = await service.upload_file(
            public_id,
            parent_path=path,
            filename=file.filename,
            data=data,
        )
    except TreeError as exc:
        raise_tree_problem(exc)
    except TreeCorruptedError as exc:
        raise_corrupted_problem(exc)

    payload = UploadResponse(path=result.path, created=result.created)
    headers: dict[str, str] = {}
    if result.created:
        headers["Location"] = str(request.url_for("read_tree", public_id=public_id).path)
    return JSONResponse(
        status_code=status.HTTP_201_CREATED if result.created else status.HTTP_200_OK,
        content=payload.model_dump(mode="json"),
        headers=headers,
    )


@router.get(
    "/{public_id}/search",
    response_model=list[SearchHitOut],
    summary="Search file contents line by line",
)
async def search_project(
    public_id: PublicIdPath,
    service: TreeServiceDep,
    query: Annotated[str, Query(description="Case-insensitive text to look for.")] = "",
) -> list[SearchHitOut]:
    try:
        hits = await service.search_project(public_id, query)
    except TreeError as exc:
        raise_tree_problem(exc)
    except TreeCorruptedError as exc:
        raise_corrupted_problem(exc)
    return [SearchHitOut(path=hit.path, line=hit.line, content=hit.content) for hit in hits]


@router.get(
    "/{public_id}/download",
    response_class=Response,
    responses={status.HTTP_200_OK: {"content": {"application/zip": {}}}},
    summary="Download the session as a zip archive",
)
async def download_archive(public_id: PublicIdPath, service: TreeServiceDep) -> Response:
    try:
        payload = await service.download_archive(public_id)
    except TreeError as exc:
        raise_tree_problem(exc)
    except TreeCorruptedError as exc:
        raise_corrupted_problem(exc)
    return Response(
        content=payload,
        media_type="application/zip",
        headers={"Content-Disposition": f'attachment; filename="{archive_filename(public_id)}"'},
    )


__all__ = ["router"]
