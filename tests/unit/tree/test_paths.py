from __future__ import annotations

import pytest

from codesync_api.features.tree.exceptions import InvalidArgumentError, NotFoundError
from codesync_api.features.tree.nodes import new_file, new_folder, new_root
from codesync_api.features.tree.paths import (
    ensure_folder,
    find_child,
    find_parent,
    is_ancestor_path,
    join_path,
    normalize_path,
    require_segments,
    split_path,
    validate_name,
)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("", []),
        (None, []),
        ("/", []),
        ("///", []),
        ("a", ["a"]),
        ("/a/b/", ["a", "b"]),
        ("a//b///c", ["a", "b", "c"]),
        ("src/index.js", ["src", "index.js"]),
    ],
)
def test_split_path_normalizes(raw, expected) -> None:
    assert split_path(raw) == expected


def test_join_path_inverts_split() -> None:
    assert join_path(split_path("//src//lib/util.js")) == "src/lib/util.js"
    assert join_path([]) == ""
    assert normalize_path("/docs//api/") == "docs/api"
    assert normalize_path(None) == ""


def _sample_root():
    root = new_root()
    src = new_folder("src")
    src.children.append(new_file("index.js", "hello"))
    root.children.extend([src, new_file("README.md", "# readme")])
    return root


def test_find_child_matches_any_kind() -> None:
    root = _sample_root()

    assert find_child(root, "src").is_folder
    assert find_child(root, "README.md").is_file
    assert find_child(root, "missing") is None


def test_find_parent_returns_root_for_single_segment() -> None:
    root = _sample_root()

    assert find_parent(root, ["anything"]) is root


def test_find_parent_walks_folders() -> None:
    root = _sample_root()

    parent = find_parent(root, ["src", "index.js"])

    assert parent.name == "src"


def test_find_parent_rejects_missing_or_file_segments() -> None:
    root = _sample_root()

    with pytest.raises(NotFoundError) as missing:
        find_parent(root, ["lib", "x.js"])
    assert missing.value.code == "folder_not_found"

    with pytest.raises(NotFoundError):
        find_parent(root, ["README.md", "x.js"])


def test_ensure_folder_creates_missing_segments() -> None:
    root = _sample_root()

    target = ensure_folder(root, ["src", "lib", "deep"])

    assert target.name == "deep"
    lib = find_child(find_child(root, "src"), "lib")
    assert lib is not None and lib.is_folder
    # Reuses existing folders rather than duplicating them.
    assert [c.name for c in root.children] == ["src", "README.md"]


def test_ensure_folder_rejects_file_segment() -> None:
    root = _sample_root()

    with pytest.raises(InvalidArgumentError) as exc:
        ensure_folder(root, ["README.md", "nested"])

    assert exc.value.code == "invalid_destination"


@pytest.mark.parametrize(
    ("ancestor", "candidate", "expected"),
    [
        (["a"], ["a", "b"], True),
        (["a", "b"], ["a", "b", "c"], True),
        (["a", "b"], ["a", "b"], False),
        (["a", "b"], ["a"], False),
        (["a", "b"], ["a", "bc"], False),
        ([], ["a"], True),
    ],
)
def test_is_ancestor_path(ancestor, candidate, expected) -> None:
    assert is_ancestor_path(ancestor, candidate) is expected


@pytest.mark.parametrize("name", ["", "   ", None, "a/b", ".", ".."])
def test_validate_name_rejects(name) -> None:
    with pytest.raises(InvalidArgumentError):
        validate_name(name)


def test_validate_name_accepts_plain_names() -> None:
    assert validate_name(".env") == ".env"
    assert validate_name("notes 2.txt") == "notes 2.txt"


def test_require_segments_rejects_root() -> None:
    with pytest.raises(InvalidArgumentError) as exc:
        require_segments("//")

    assert exc.value.code == "invalid_path"
