"""HTTP tests for the session file tree endpoints."""

from __future__ import annotations

import io
import zipfile

import pytest
from fastapi import FastAPI
from httpx import AsyncClient

from codesync_api.settings import get_settings

pytestmark = pytest.mark.asyncio


async def _tree(client: AsyncClient, public_id: str) -> dict:
    response = await client.get(f"/api/tree/{public_id}")
    assert response.status_code == 200, response.text
    return response.json()["tree"]


async def _create(client: AsyncClient, public_id: str, path: str, **body) -> dict:
    response = await client.post(f"/api/tree/{public_id}", json={"path": path, **body})
    assert response.status_code == 201, response.text
    return response.json()


def _problem(response) -> dict:
    return response.json()["detail"]


async def test_create_read_update_delete(async_client: AsyncClient, public_id: str) -> None:
    folder = await _create(async_client, public_id, "src", type="folder")
    assert folder == {"name": "src", "type": "folder", "children": []}

    node = await _create(async_client, public_id, "src/index.js", content="hello")
    assert node == {"name": "index.js", "type": "file", "content": "hello"}

    updated = await async_client.put(
        f"/api/tree/{public_id}/content",
        json={"path": "src/index.js", "content": "bye"},
    )
    assert updated.status_code == 200, updated.text
    assert updated.json()["content"] == "bye"

    deleted = await async_client.delete(f"/api/tree/{public_id}", params={"path": "src"})
    assert deleted.status_code == 204
    assert deleted.content == b""

    tree = await _tree(async_client, public_id)
    assert [child["name"] for child in tree["children"]] == ["main.js"]


async def test_error_statuses_and_codes(async_client: AsyncClient, public_id: str) -> None:
    conflict = await async_client.post(f"/api/tree/{public_id}", json={"path": "main.js"})
    assert conflict.status_code == 409
    assert _problem(conflict)["code"] == "name_conflict"

    missing_parent = await async_client.post(
        f"/api/tree/{public_id}", json={"path": "nope/a.js"}
    )
    assert missing_parent.status_code == 404

    root_path = await async_client.post(f"/api/tree/{public_id}", json={"path": "/"})
    assert root_path.status_code == 400
    assert _problem(root_path)["code"] == "invalid_path"

    folder_content = await async_client.put(
        f"/api/tree/{public_id}/content", json={"path": "", "content": "x"}
    )
    assert folder_content.status_code == 400

    missing_node = await async_client.delete(
        f"/api/tree/{public_id}", params={"path": "ghost.txt"}
    )
    assert missing_node.status_code == 404
    assert _problem(missing_node)["code"] == "node_not_found"


async def test_unknown_session_is_404(async_client: AsyncClient) -> None:
    response = await async_client.get("/api/tree/unknown-session")

    assert response.status_code == 404
    assert _problem(response)["code"] == "session_not_found"


async def test_rename_returns_new_path(async_client: AsyncClient, public_id: str) -> None:
    await _create(async_client, public_id, "lib", type="folder")
    await _create(async_client, public_id, "lib/util.js", content="u")

    response = await async_client.post(
        f"/api/tree/{public_id}/rename", json={"path": "lib", "newName": "shared"}
    )

    assert response.status_code == 200, response.text
    assert response.json() == {"path": "shared"}
    tree = await _tree(async_client, public_id)
    shared = next(child for child in tree["children"] if child["name"] == "shared")
    assert shared["children"] == [{"name": "util.js", "type": "file", "content": "u"}]

    bad = await async_client.post(
        f"/api/tree/{public_id}/rename", json={"path": "shared", "newName": "a/b"}
    )
    assert bad.status_code == 400
    assert _problem(bad)["code"] == "invalid_name"


async def test_move_and_cycle_rejection(async_client: AsyncClient, public_id: str) -> None:
    await _create(async_client, public_id, "src", type="folder")
    await _create(async_client, public_id, "src/lib", type="folder")

    moved = await async_client.post(
        f"/api/tree/{public_id}/move", json={"from": "main.js", "to": "src/lib"}
    )
    assert moved.status_code == 200, moved.text
    assert moved.json() == {"path": "src/lib/main.js"}

    cycle = await async_client.post(
        f"/api/tree/{public_id}/move", json={"from": "src", "to": "src/lib"}
    )
    assert cycle.status_code == 400
    assert _problem(cycle)["code"] == "invalid_destination"

    back = await async_client.post(f"/api/tree/{public_id}/move", json={"from": "src/lib/main.js"})
    assert back.json() == {"path": "main.js"}


async def test_duplicate(async_client: AsyncClient, public_id: str) -> None:
    first = await async_client.post(f"/api/tree/{public_id}/duplicate", json={"path": "main.js"})
    named = await async_client.post(
        f"/api/tree/{public_id}/duplicate",
        json={"path": "main.js", "targetName": "entry.js"},
    )

    assert first.status_code == 200, first.text
    assert first.json() == {"newPath": "main-copy.js"}
    assert named.json() == {"newPath": "entry.js"}

    tree = await _tree(async_client, public_id)
    assert [child["name"] for child in tree["children"]] == ["main.js", "main-copy.js", "entry.js"]


async def test_upload_creates_then_overwrites(async_client: AsyncClient, public_id: str) -> None:
    await _create(async_client, public_id, "docs", type="folder")

    created = await async_client.post(
        f"/api/tree/{public_id}/upload",
        data={"path": "docs"},
        files={"file": ("readme.md", b"# Title\n", "text/markdown")},
    )
    assert created.status_code == 201, created.text
    assert created.json() == {"path": "docs/readme.md", "created": True}
    assert created.headers["location"] == f"/api/tree/{public_id}"

    replaced = await async_client.post(
        f"/api/tree/{public_id}/upload",
        data={"path": "docs"},
        files={"file": ("readme.md", b"# Updated\n", "text/markdown")},
    )
    assert replaced.status_code == 200, replaced.text
    assert replaced.json() == {"path": "docs/readme.md", "created": False}

    tree = await _tree(async_client, public_id)
    docs = next(child for child in tree["children"] if child["name"] == "docs")
    assert docs["children"][0]["content"] == "# Updated\n"


async def test_upload_into_missing_folder(async_client: AsyncClient, public_id: str) -> None:
    response = await async_client.post(
        f"/api/tree/{public_id}/upload",
        data={"path": "missing"},
        files={"file": ("a.txt", b"a", "text/plain")},
    )

    assert response.status_code == 404


async def test_upload_size_limit(
    app: FastAPI, async_client: AsyncClient, public_id: str
) -> None:
    tuned = get_settings().model_copy(update={"upload_max_bytes": 4})
    app.dependency_overrides[get_settings] = lambda: tuned
    try:
        response = await async_client.post(
            f"/api/tree/{public_id}/upload",
            files={"file": ("big.txt", b"12345", "text/plain")},
        )
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 413
    assert _problem(response)["code"] == "upload_too_large"
    tree = await _tree(async_client, public_id)
    assert [child["name"] for child in tree["children"]] == ["main.js"]


async def test_search(async_client: AsyncClient, public_id: str) -> None:
    await _create(async_client, public_id, "notes.txt", content="first\n  TODO: write tests\nlast")

    short = await async_client.get(f"/api/tree/{public_id}/search", params={"query": "to"})
    assert short.status_code == 400
    assert _problem(short)["code"] == "query_too_short"

    hits = await async_client.get(f"/api/tree/{public_id}/search", params={"query": "todo"})
    assert hits.status_code == 200, hits.text
    assert hits.json() == [{"path": "notes.txt", "line": 2, "content": "TODO: write tests"}]


async def test_download_archive(async_client: AsyncClient, public_id: str) -> None:
    await _create(async_client, public_id, "src", type="folder")
    await _create(async_client, public_id, "src/index.js", content="hello")

    response = await async_client.get(f"/api/tree/{public_id}/download")

    assert response.status_code == 200
    assert response.headers["content-type"] == "application/zip"
    assert response.headers["content-disposition"] == (
        f'attachment; filename="session-{public_id}.zip"'
    )
    with zipfile.ZipFile(io.BytesIO(response.content)) as archive:
        assert archive.namelist() == ["main.js", "src/", "src/index.js"]
        assert archive.read("src/index.js") == b"hello"


async def test_request_id_is_echoed(async_client: AsyncClient, public_id: str) -> None:
    response = await async_client.get(
        f"/api/tree/{public_id}", headers={"X-Request-ID": "req-42"}
    )

    assert response.headers["x-request-id"] == "req-42"


async def test_move_rejects_unsafe_or_too_deep_destinations(
    async_client: AsyncClient, public_id: str
) -> None:
    traversal = await async_client.post(
        f"/api/tree/{public_id}/move", json={"from": "main.js", "to": "../.."}
    )
    assert traversal.status_code == 400
    assert _problem(traversal)["code"] == "invalid_name"

    deep = "/".join(f"d{i}" for i in range(100))
    too_deep = await async_client.post(
        f"/api/tree/{public_id}/move", json={"from": "main.js", "to": deep}
    )
    assert too_deep.status_code == 400
    assert _problem(too_deep)["code"] == "path_too_deep"

    tree = await _tree(async_client, public_id)
    assert [child["name"] for child in tree["children"]] == ["main.js"]
