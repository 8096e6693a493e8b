"""Unit tests for LocalIndexStore.

No network required -- uses a temporary directory.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from basecamp_mcp.store import IndexStore
from basecamp_mcp.store.local import LocalIndexStore


async def test_read_missing_returns_none(store: LocalIndexStore) -> None:
    assert await store.read() is None


async def test_write_and_read(store: LocalIndexStore) -> None:
    await store.write('{"projects": []}')
    assert await store.read() == '{"projects": []}'


async def test_write_creates_parent_dirs(tmp_path: Path) -> None:
    store = LocalIndexStore(tmp_path / "a" / "b" / "index.json")
    await store.write("{}")
    assert (tmp_path / "a" / "b" / "index.json").read_text(encoding="utf-8") == "{}"


async def test_write_overwrites(store: LocalIndexStore) -> None:
    await store.write("first")
    await store.write("second")
    assert await store.read() == "second"


async def test_write_leaves_no_temp_files(store: LocalIndexStore, index_path: Path) -> None:
    await store.write("{}")
    await store.write("{}")
    assert [p.name for p in index_path.parent.iterdir()] == [index_path.name]


async def test_failed_write_removes_temp_file(tmp_path: Path) -> None:
    target = tmp_path / "index.json"
    store = LocalIndexStore(target)

    # os.replace cannot overwrite a directory.
    target.mkdir()
    with pytest.raises(OSError):
        await store.write("replacement")
    assert [p.name for p in tmp_path.iterdir()] == ["index.json"]


def test_location(store: LocalIndexStore, index_path: Path) -> None:
    assert store.location == str(index_path)
    assert store.path == index_path
    assert isinstance(store, IndexStore)
