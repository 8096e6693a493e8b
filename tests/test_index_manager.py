"""Unit tests for IndexManager.

No network required -- uses FakeSource and a temporary index file.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import pytest

from basecamp_mcp.managers.index import IndexManager, IndexRebuildError
from basecamp_mcp.models import BasecampIndex, ItemKind, ProjectStatus
from basecamp_mcp.store.local import LocalIndexStore

if TYPE_CHECKING:
    from conftest import FakeSource


@pytest.fixture
def populated(source: FakeSource) -> FakeSource:
    source.add_project(1, "Alpha Website", {10: [(101, "To do"), (102, "In Progress"), (103, "Done")]})
    source.add_project(2, "Beta Launch", {20: [(201, "Backlog")], 21: [(211, "Review"), (212, "Shipped")]})
    source.add_project(3, "Gamma (no boards)")
    return source


def _without_timestamps(index: BasecampIndex) -> list[dict]:
    return [p.model_dump(mode="json", exclude={"last_updated"}) for p in index.projects]


# ---------------------------------------------------------------------------
# Load / save
# ---------------------------------------------------------------------------


async def test_load_missing_file_starts_empty(manager: IndexManager, index_path: Path) -> None:
    index = await manager.load()

    assert index.projects == []
    assert index.version == "1.0.0"
    # Loading never creates the file.
    assert not index_path.exists()


async def test_load_corrupt_file_starts_empty(manager: IndexManager, index_path: Path) -> None:
    index_path.parent.mkdir(parents=True)
    index_path.write_text("{not json", encoding="utf-8")

    index = await manager.load()
    assert index.projects == []


async def test_load_wrong_shape_starts_empty(manager: IndexManager, index_path: Path) -> None:
    index_path.parent.mkdir(parents=True)
    index_path.write_text('{"projects": [{"id": "1"}]}', encoding="utf-8")

    index = await manager.load()
    assert index.projects == []


async def test_load_is_cached(manager: IndexManager) -> None:
    first = await manager.load()
    assert await manager.load() is first


async def test_save_creates_file(manager: IndexManager, index_path: Path) -> None:
    await manager.save()

    assert index_path.exists()
    assert BasecampIndex.model_validate_json(index_path.read_text(encoding="utf-8")).projects == []


async def test_round_trip(manager: IndexManager, populated: FakeSource, index_path: Path) -> None:
    await manager.rebuild_full()

    reloaded = IndexManager(populated, LocalIndexStore(index_path))
    assert await reloaded.load() == await manager.load()


class _ReadOnlyStore:
    location = "read-only"

    async def read(self) -> str | None:
        return None

    async def write(self, data: str) -> None:
        raise PermissionError("read-only file system")


async def test_save_failure_propagates_and_keeps_memory(populated: FakeSource) -> None:
    manager = IndexManager(populated, _ReadOnlyStore())

    with pytest.raises(OSError, match="read-only"):
        await manager.rebuild_full()

    # The unsaved rebuild is not visible in memory either.
    assert (await manager.load()).projects == []


# ---------------------------------------------------------------------------
# Full rebuild
# ---------------------------------------------------------------------------


async def test_rebuild_full(manager: IndexManager, populated: FakeSource) -> None:
    report = await manager.rebuild_full()

    assert report.summary() == {"projects": 3, "card_tables": 3, "columns": 6, "skipped": 0}
    alpha = await manager.get_project("1")
    assert alpha is not None
    assert alpha.name == "Alpha Website"
    assert alpha.status == ProjectStatus.ACTIVE
    assert [t.title for t in alpha.card_tables] == ["Board 10"]
    assert [(c.id, c.title, c.position) for c in alpha.card_tables[0].columns] == [
        ("101", "To do", 0),
        ("102", "In Progress", 1),
        ("103", "Done", 2),
    ]


async def test_rebuild_replaces_previous_contents(manager: IndexManager, populated: FakeSource) -> None:
    await manager.rebuild_full()
    populated.projects = [p for p in populated.projects if p["id"] != 2]

    await manager.rebuild_full()
    assert await manager.get_project("2") is None
    assert len((await manager.load()).projects) == 2


async def test_rebuild_skips_failing_card_table(manager: IndexManager, populated: FakeSource) -> None:
    populated.failing.add("21")

    report = await manager.rebuild_full()

    beta = await manager.get_project("2")
    assert [t.id for t in beta.card_tables] == ["20"]
    assert len(report.skipped) == 1
    skipped = report.skipped[0]
    assert skipped.kind == ItemKind.CARD_TABLE
    assert skipped.project_id == "2"
    assert skipped.item_id == "21"
    assert "HTTP 500" in skipped.reason


async def test_rebuild_skips_malformed_project(manager: IndexManager, populated: FakeSource) -> None:
    populated.projects.append({"name": "No id"})

    report = await manager.rebuild_full()

    assert report.summary()["projects"] == 3
    assert [o.kind for o in report.skipped] == [ItemKind.PROJECT]


async def test_rebuild_listing_failure_raises(manager: IndexManager, populated: FakeSource) -> None:
    await manager.rebuild_full()
    before = await manager.load()

    populated.fail_listing = True
    with pytest.raises(IndexRebuildError, match="HTTP 500"):
        await manager.rebuild_full()

    assert await manager.load() is before


async def test_rebuild_pages_through_projects(manager: IndexManager, source: FakeSource) -> None:
    for i in range(150):
        source.add_project(1000 + i, f"Project {i}")

    await manager.rebuild_full()

    assert (await manager.stats()).total_projects == 150
    assert [page for name, page in source.calls if name == "get_projects"] == [1, 2]


async def test_rebuild_full_last_page_costs_one_empty_request(manager: IndexManager, source: FakeSource) -> None:
    for i in range(100):
        source.add_project(1000 + i, f"Project {i}")

    await manager.rebuild_full()

    assert (await manager.stats()).total_projects == 100
    assert [page for name, page in source.calls if name == "get_projects"] == [1, 2]


async def test_rebuild_drops_duplicate_columns(manager: IndexManager, source: FakeSource) -> None:
    source.add_project(1, "Alpha", {10: [(101, "To do"), (101, "To do again"), (102, "Done")]})

    await manager.rebuild_full()

    columns = await manager.get_project_columns("1")
    assert [(c.id, c.title, c.position) for c in columns] == [("101", "To do", 0), ("102", "Done", 1)]


# ---------------------------------------------------------------------------
# Single-project refresh
# ---------------------------------------------------------------------------


async def test_refresh_adds_unindexed_project(manager: IndexManager, populated: FakeSource) -> None:
    result = await manager.refresh_project("2")

    assert result.ok
    assert result.entry.id == "2"
    index = await manager.load()
    assert [p.id for p in index.projects] == ["2"]


async def test_refresh_is_idempotent(manager: IndexManager, populated: FakeSource) -> None:
    await manager.refresh_project("1")
    first = _without_timestamps(await manager.load())

    await manager.refresh_project("1")
    assert _without_timestamps(await manager.load()) == first
    assert len((await manager.load()).projects) == 1


async def test_refresh_replaces_in_place(manager: IndexManager, populated: FakeSource) -> None:
    await manager.rebuild_full()
    populated.card_tables["10"]["lists"].append({"id": 104, "title": "Archived"})

    await manager.refresh_project("1")

    index = await manager.load()
    assert [p.id for p in index.projects] == ["1", "2", "3"]
    assert [c.title for c in await manager.get_project_columns("1")][-1] == "Archived"


async def test_refresh_leaves_other_projects_alone(manager: IndexManager, populated: FakeSource) -> None:
    await manager.rebuild_full()
    beta_before = (await manager.get_project("2")).model_dump()

    populated.projects[0]["name"] = "Alpha Renamed"
    await manager.refresh_project("1")

    assert (await manager.get_project("1")).name == "Alpha Renamed"
    assert (await manager.get_project("2")).model_dump() == beta_before


async def test_refresh_keeps_last_full_update(manager: IndexManager, populated: FakeSource) -> None:
    await manager.rebuild_full()
    stamp = (await manager.load()).last_full_update

    await manager.refresh_project("1")
    assert (await manager.load()).last_full_update == stamp


async def test_refresh_failure_leaves_index_untouched(manager: IndexManager, populated: FakeSource) -> None:
    await manager.rebuild_full()
    before = await manager.get_project("1")

    populated.failing.add("10")
    result = await manager.refresh_project("1")

    assert not result.ok
    assert "card table 10" in result.reason
    assert await manager.get_project("1") == before


async def test_refresh_unknown_project(manager: IndexManager, populated: FakeSource, index_path: Path) -> None:
    result = await manager.refresh_project("404")

    assert not result.ok
    assert "HTTP 404" in result.reason
    assert not index_path.exists()


async def test_refresh_persists(manager: IndexManager, populated: FakeSource, index_path: Path) -> None:
    await manager.refresh_project("1")

    stored = BasecampIndex.model_validate_json(index_path.read_text(encoding="utf-8"))
    assert [p.id for p in stored.projects] == ["1"]


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------


async def test_search_is_case_insensitive(manager: IndexManager, populated: FakeSource) -> None:
    await manager.rebuild_full()

    assert [p.id for p in await manager.search("alpha")] == ["1"]
    assert [p.id for p in await manager.search("LAUNCH")] == ["2"]
    assert [p.id for p in await manager.search("a")] == ["1", "2", "3"]
    assert await manager.search("nothing like it") == []


async def test_search_empty_index(manager: IndexManager) -> None:
    assert await manager.search("") == []


async def test_get_project_unknown(manager: IndexManager, populated: FakeSource) -> None:
    await manager.rebuild_full()
    assert await manager.get_project("999") is None


async def test_find_column_first_match(manager: IndexManager, source: FakeSource) -> None:
    source.add_project(
        1,
        "Alpha",
        {
            10: [(101, "Backlog"), (102, "In Progress")],
            20: [(201, "Progress review"), (202, "Done")],
        },
    )
    await manager.rebuild_full()

    # The earlier table wins even though the later title starts with the query.
    column = await manager.find_column("1", "progress")
    assert column.id == "102"
    assert (await manager.find_column("1", "DONE")).id == "202"
    assert await manager.find_column("1", "shipped") is None
    assert await manager.find_column("999", "done") is None


async def test_get_project_columns_order(manager: IndexManager, populated: FakeSource) -> None:
    await manager.rebuild_full()

    columns = await manager.get_project_columns("2")
    assert [c.title for c in columns] == ["Backlog", "Review", "Shipped"]
    assert await manager.get_project_columns("999") == []


async def test_stats(manager: IndexManager, populated: FakeSource, index_path: Path) -> None:
    await manager.rebuild_full()

    stats = await manager.stats()
    assert stats.total_projects == 3
    assert stats.total_card_tables == 3
    assert stats.total_columns == 6
    assert stats.index_path == str(index_path)


# ---------------------------------------------------------------------------
# Malformed remote data
# ---------------------------------------------------------------------------


async def test_rebuild_coerces_non_string_titles(manager: IndexManager, source: FakeSource) -> None:
    source.add_project(1, "Alpha", {10: [(101, "To do")]})
    source.add_project(2, "Beta", {20: [(201, "Backlog")]})
    source.card_tables["20"]["lists"].append({"id": 202, "title": 42})

    report = await manager.rebuild_full()

    assert report.skipped == []
    assert [c.title for c in await manager.get_project_columns("2")] == ["Backlog", "42"]
    assert await manager.get_project("1") is not None


async def test_rebuild_skips_table_with_unusable_lists(manager: IndexManager, source: FakeSource) -> None:
    source.add_project(1, "Alpha", {10: [(101, "To do")]})
    source.add_project(2, "Beta", {20: [(201, "Backlog")], 21: [(211, "Review")]})
    source.card_tables["20"]["lists"] = 5

    report = await manager.rebuild_full()

    assert [(o.kind, o.project_id, o.item_id) for o in report.skipped] == [(ItemKind.CARD_TABLE, "2", "20")]
    assert [c.title for c in await manager.get_project_columns("1")] == ["To do"]
    assert [t.id for t in (await manager.get_project("2")).card_tables] == ["21"]


async def test_rebuild_ignores_non_string_dock_url(manager: IndexManager, source: FakeSource) -> None:
    source.add_project(1, "Alpha", {10: [(101, "To do")]})
    beta = source.add_project(2, "Beta", {20: [(201, "Backlog")]})
    beta["dock"].append({"name": "kanban_board", "title": "Broken", "url": 12345})

    report = await manager.rebuild_full()

    assert report.summary() == {"projects": 2, "card_tables": 2, "columns": 2, "skipped": 0}
    assert [t.id for t in (await manager.get_project("2")).card_tables] == ["20"]


async def test_rebuild_non_string_dock_title(manager: IndexManager, source: FakeSource) -> None:
    beta = source.add_project(2, "Beta", {20: [(201, "Backlog")]})
    beta["dock"][-1]["title"] = 7

    await manager.rebuild_full()

    assert [t.title for t in (await manager.get_project("2")).card_tables] == ["7"]


async def test_card_table_without_lists(manager: IndexManager, source: FakeSource) -> None:
    source.add_project(1, "Alpha", {10: []})
    del source.card_tables["10"]["lists"]

    report = await manager.rebuild_full()

    assert report.skipped == []
    tables = (await manager.get_project("1")).card_tables
    assert [(t.id, t.columns) for t in tables] == [("10", [])]


async def test_rebuild_skips_unusable_column_entries(manager: IndexManager, source: FakeSource) -> None:
    source.add_project(1, "Alpha", {10: [(101, "To do")]})
    source.card_tables["10"]["lists"].extend(["not a column", {"title": "No id"}, {"id": 102, "title": "Done"}])

    await manager.rebuild_full()

    columns = await manager.get_project_columns("1")
    assert [(c.id, c.title, c.position) for c in columns] == [("101", "To do", 0), ("102", "Done", 1)]


# ---------------------------------------------------------------------------
# Additional query and persistence cases
# ---------------------------------------------------------------------------


async def test_find_column_lowest_position_wins_within_table(manager: IndexManager, source: FakeSource) -> None:
    source.add_project(1, "Alpha", {10: [(101, "Backlog"), (102, "Done (QA)"), (103, "Done")]})
    await manager.rebuild_full()

    column = await manager.find_column("1", "done")
    assert (column.id, column.position) == ("102", 1)


async def test_round_trip_empty_index(manager: IndexManager, source: FakeSource, index_path: Path) -> None:
    await manager.save()

    reloaded = IndexManager(source, LocalIndexStore(index_path))
    assert await reloaded.load() == await manager.load()
    assert (await reloaded.load()).projects == []
