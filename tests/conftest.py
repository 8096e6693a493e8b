"""Shared test fixtures.

No network or Docker required: the project index is driven by an in-memory
``FakeSource`` and the index file lives in ``tmp_path``.
"""

from __future__ import annotations

from collections.abc import AsyncIterator, Iterator
from pathlib import Path
from typing import Any

import httpx
import pytest

from basecamp_mcp.client.base import ApiResponse
from basecamp_mcp.client.basecamp import BasecampClient
from basecamp_mcp.managers.index import IndexManager
from basecamp_mcp.settings import _get_settings_cached
from basecamp_mcp.store.local import LocalIndexStore


def project_payload(project_id: int, name: str, tables: list[tuple[int, str]] | None = None) -> dict[str, Any]:
    """A project as Basecamp returns it, with one kanban dock item per table."""
    dock: list[dict[str, Any]] = [
        {"name": "message_board", "title": "Message Board", "url": f"https://x/buckets/{project_id}/boards/1.json"},
    ]
    dock.extend(
        {
            "name": "kanban_board",
            "title": title,
            "url": f"https://3.basecampapi.com/999/buckets/{project_id}/card_tables/{table_id}.json",
        }
        for table_id, title in tables or []
    )
    return {"id": project_id, "name": name, "status": "active", "dock": dock}


def card_table_payload(table_id: int, columns: list[tuple[int, str]]) -> dict[str, Any]:
    return {"id": table_id, "title": "Card Table", "lists": [{"id": cid, "title": title} for cid, title in columns]}


class FakeSource:
    """In-memory ``ProjectSource``.

    ``projects`` holds the project payloads, ``card_tables`` the card table
    payloads keyed by table id.  Ids listed in ``failing`` answer with HTTP 500.
    """

    def __init__(self) -> None:
        self.projects: list[dict[str, Any]] = []
        self.card_tables: dict[str, dict[str, Any]] = {}
        self.failing: set[str] = set()
        self.fail_listing = False
        self.page_size = 100
        self.calls: list[tuple[str, Any]] = []

    def add_project(
        self, project_id: int, name: str, tables: dict[int, list[tuple[int, str]]] | None = None
    ) -> dict[str, Any]:
        tables = tables or {}
        payload = project_payload(project_id, name, [(tid, f"Board {tid}") for tid in tables])
        self.projects.append(payload)
        for table_id, columns in tables.items():
            self.card_tables[str(table_id)] = card_table_payload(table_id, columns)
        return payload

    async def get_projects(self, status: str | None = None, page: int = 1) -> ApiResponse:
        self.calls.append(("get_projects", page))
        if self.fail_listing:
            return ApiResponse(code=500, data={"error": "boom"})
        start = (page - 1) * self.page_size
        return ApiResponse(code=200, data=self.projects[start : start + self.page_size])

    async def get_project(self, project_id: str) -> ApiResponse:
        self.calls.append(("get_project", project_id))
        if str(project_id) in self.failing:
            return ApiResponse(code=500, data={"error": "boom"})
        for project in self.projects:
            if str(project["id"]) == str(project_id):
                return ApiResponse(code=200, data=project)
        return ApiResponse(code=404, data={"error": "Not found"})

    async def get_card_table(self, project_id: str, card_table_id: str) -> ApiResponse:
        self.calls.append(("get_card_table", card_table_id))
        if str(card_table_id) in self.failing:
            return ApiResponse(code=500, data={"error": "boom"})
        table = self.card_tables.get(str(card_table_id))
        if table is None:
            return ApiResponse(code=404, data={"error": "Not found"})
        return ApiResponse(code=200, data=table)


@pytest.fixture
def source() -> FakeSource:
    return FakeSource()


@pytest.fixture
def index_path(tmp_path: Path) -> Path:
    return tmp_path / "data" / "index-cache.json"


@pytest.fixture
def store(index_path: Path) -> LocalIndexStore:
    return LocalIndexStore(index_path)


@pytest.fixture
def manager(source: FakeSource, store: LocalIndexStore) -> IndexManager:
    return IndexManager(source, store)


@pytest.fixture
def env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Iterator[pytest.MonkeyPatch]:
    """Isolated ``BASECAMP_*`` environment with the settings cache cleared."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("BASECAMP_ACCESS_TOKEN", "test-token")
    monkeypatch.setenv("BASECAMP_ACCOUNT_ID", "999")
    monkeypatch.setenv("BASECAMP_DATA_ROOT", str(tmp_path / "data"))
    monkeypatch.setenv("BASECAMP_LOG_LEVEL", "WARNING")
    _get_settings_cached.cache_clear()
    yield monkeypatch
    _get_settings_cached.cache_clear()


class Recorder:
    """``httpx.MockTransport`` handler: records requests, serves canned responses by (method, path)."""

    def __init__(self) -> None:
        self.routes: dict[tuple[str, str], httpx.Response] = {}
        self.requests: list[httpx.Request] = []

    def route(self, method: str, path: str, status: int = 200, json: Any = None) -> None:
        self.routes[(method, path)] = httpx.Response(status, json=json)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.routes.get((request.method, request.url.path), httpx.Response(200, json={"id": 1}))

    def sent(self, method: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.method == method]


@pytest.fixture
def recorder() -> Recorder:
    return Recorder()


@pytest.fixture
async def client(recorder: Recorder) -> AsyncIterator[BasecampClient]:
    """Client for account 999 whose requests go to ``recorder``."""
    async with BasecampClient("secret", "999", transport=httpx.MockTransport(recorder)) as c:
        yield c
