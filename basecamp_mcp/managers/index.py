"""Project index manager -- local cache of project -> card table -> column structure.

The ``IndexManager`` owns one in-memory ``BasecampIndex`` per process.  It is
constructed explicitly with a remote ``ProjectSource`` and an ``IndexStore``
and passed to whichever component needs it.

Failure model:

- Reads (``load``, ``search``, ``get_project``, ``find_column``,
  ``get_project_columns``, ``stats``) never raise.  A missing or corrupt
  index file yields a fresh empty index.
- ``save`` propagates ``OSError``: a mutation that could not be persisted
  must be visible to the caller.
- Remote failures are isolated per item.  ``rebuild_full`` records skipped
  projects / card tables in its report instead of aborting;
  ``refresh_project`` returns a failed ``RefreshResult`` and leaves the
  index untouched.

Mutations are serialized within the process.  Two processes sharing one
index file are not coordinated (single-writer assumption).
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Any

from loguru import logger
from pydantic import ValidationError

from basecamp_mcp.client.urls import card_table_id_from_url
from basecamp_mcp.models.enums import ItemKind, ItemStatus, ProjectStatus
from basecamp_mcp.models.index import (
    BasecampIndex,
    CardTable,
    Column,
    IndexStats,
    ItemOutcome,
    ProjectEntry,
    RebuildReport,
    RefreshResult,
)

if TYPE_CHECKING:
    from basecamp_mcp.client.base import ApiResponse, ProjectSource
    from basecamp_mcp.store.base import IndexStore

PROJECTS_PAGE_SIZE = 100
"""Basecamp returns at most this many projects per page."""

KANBAN_DOCK_NAME = "kanban_board"
DEFAULT_CARD_TABLE_TITLE = "Card Table"


class IndexRebuildError(RuntimeError):
    """Raised when the project list cannot be fetched at all."""


class ProjectNotIndexedError(LookupError):
    """Raised by callers that need a project the index does not hold."""

    def __init__(self, project_id: str) -> None:
        super().__init__(f"Project {project_id} is not in the index; run an index update for it first")
        self.project_id = project_id


class FetchError(RuntimeError):
    """A remote read needed for indexing failed."""

    def __init__(self, what: str, response: ApiResponse) -> None:
        super().__init__(f"failed to fetch {what} ({response.describe()})")
        self.response = response


class IndexManager:
    """Builds, refreshes, queries and persists the project index."""

    def __init__(self, source: ProjectSource, store: IndexStore) -> None:
        self._source = source
        self._store = store
        self._index: BasecampIndex | None = None
        self._lock = asyncio.Lock()

    # -- Load / save -----------------------------------------------------------

    async def load(self) -> BasecampIndex:
        """Return the in-memory index, reading the store on first call."""
        if self._index is not None:
            return self._index

        try:
            raw = await self._store.read()
        except (OSError, ValueError) as exc:
            logger.warning("Index: cannot read {} ({}), starting empty", self._store.location, exc)
            raw = None

        index: BasecampIndex | None = None
        if raw is not None:
            try:
                index = BasecampIndex.model_validate_json(raw)
            except ValidationError as exc:
                logger.warning(
                    "Index: discarding unreadable {} ({} errors), starting empty",
                    self._store.location,
                    exc.error_count(),
                )

        self._index = index or BasecampIndex()
        return self._index

    async def save(self) -> None:
        """Overwrite the stored document with the in-memory index."""
        await self._persist(await self.load())

    async def _persist(self, index: BasecampIndex) -> None:
        """Write ``index`` and make it the in-memory index once durable."""
        await self._store.write(index.model_dump_json(indent=2))
        self._index = index

    # -- Mutations -------------------------------------------------------------

    async def rebuild_full(self) -> RebuildReport:
        """Re-derive the whole index from Basecamp (best effort, per item)."""
        async with self._lock:
            projects = await self._list_active_projects()
            logger.info("Index: rebuilding from {} projects", len(projects))

            index = BasecampIndex()
            outcomes: list[ItemOutcome] = []
            seen: set[str] = set()
            for raw in projects:
                project_id = str(raw.get("id", "")) if isinstance(raw, dict) else ""
                try:
                    entry = _entry_from_project(raw)
                    docks = _kanban_docks(raw)
                except (KeyError, TypeError, ValueError) as exc:
                    logger.warning("Index: skipping malformed project {!r}: {}", project_id or raw, exc)
                    outcomes.append(_skipped(ItemKind.PROJECT, project_id, project_id, f"malformed project: {exc}"))
                    continue
                if entry.id in seen:
                    continue
                seen.add(entry.id)

                for table_id, title in docks:
                    try:
                        table = await self._fetch_card_table(entry.id, table_id, title)
                    except (FetchError, TypeError, ValueError) as exc:
                        logger.warning("Index: {} / card table {}: {}", entry.name, table_id, exc)
                        outcomes.append(_skipped(ItemKind.CARD_TABLE, entry.id, table_id, str(exc)))
                        continue
                    entry.card_tables.append(table)
                    outcomes.append(_indexed(ItemKind.CARD_TABLE, entry.id, table_id))

                index.projects.append(entry)
                outcomes.append(_indexed(ItemKind.PROJECT, entry.id, entry.id))
                logger.debug("Index: {} ({} card tables)", entry.name, len(entry.card_tables))

            await self._persist(index)

        report = RebuildReport(index=index, outcomes=outcomes)
        logger.info("Index: rebuilt {}", report.summary())
        return report

    async def refresh_project(self, project_id: str) -> RefreshResult:
        """Re-fetch one project and upsert it.  All-or-nothing for that project."""
        async with self._lock:
            index = await self.load()
            try:
                entry = await self._fetch_project_entry(project_id)
            except (FetchError, KeyError, TypeError, ValueError) as exc:
                logger.warning("Index: failed to refresh project {}: {}", project_id, exc)
                return RefreshResult(project_id=project_id, reason=str(exc))

            projects = list(index.projects)
            for i, existing in enumerate(projects):
                if existing.id == entry.id:
                    projects[i] = entry
                    break
            else:
                projects.append(entry)

            await self._persist(index.model_copy(update={"projects": projects}))

        logger.info("Index: refreshed project {} ({} card tables)", entry.id, len(entry.card_tables))
        return RefreshResult(project_id=project_id, entry=entry)

    # -- Queries ---------------------------------------------------------------

    async def search(self, query: str) -> list[ProjectEntry]:
        """Case-insensitive substring match on project names, storage order."""
        index = await self.load()
        needle = query.lower()
        return [p for p in index.projects if needle in p.name.lower()]

    async def get_project(self, project_id: str) -> ProjectEntry | None:
        index = await self.load()
        project_id = str(project_id)
        for project in index.projects:
            if project.id == project_id:
                return project
        return None

    async def find_column(self, project_id: str, column_name: str) -> Column | None:
        """First column whose title contains ``column_name`` (case-insensitive).

        Tables are scanned in stored order and columns in position order, so
        an earlier table wins over a better match in a later one.
        """
        project = await self.get_project(project_id)
        if project is None:
            return None
        needle = column_name.lower()
        for table in project.card_tables:
            for column in table.columns:
                if needle in column.title.lower():
                    return column
        return None

    async def get_project_columns(self, project_id: str) -> list[Column]:
        project = await self.get_project(project_id)
        return project.columns() if project else []

    async def stats(self) -> IndexStats:
        index = await self.load()
        return IndexStats(
            version=index.version,
            last_full_update=index.last_full_update,
            total_projects=len(index.projects),
            total_card_tables=sum(len(p.card_tables) for p in index.projects),
            total_columns=sum(len(t.columns) for p in index.projects for t in p.card_tables),
            index_path=self._store.location,
        )

    # -- Remote walk -----------------------------------------------------------

    async def _list_active_projects(self) -> list[dict[str, Any]]:
        """Page through active projects.

        Paging stops at an empty page or one shorter than the page size.  A
        final page of exactly ``PROJECTS_PAGE_SIZE`` items costs one extra
        request that comes back empty.
        """
        projects: list[dict[str, Any]] = []
        page = 1
        while True:
            response = await self._source.get_projects(ProjectStatus.ACTIVE.value, page)
            if not response.ok or not isinstance(response.data, list):
                if page == 1:
                    msg = f"cannot list projects ({response.describe()})"
                    raise IndexRebuildError(msg)
                logger.warning("Index: stopped paging at page {} ({})", page, response.describe())
                break
            if not response.data:
                break
            projects.extend(response.data)
            if len(response.data) < PROJECTS_PAGE_SIZE:
                break
            page += 1
        return projects

    async def _fetch_project_entry(self, project_id: str) -> ProjectEntry:
        response = await self._source.get_project(project_id)
        if not response.ok or not isinstance(response.data, dict):
            raise FetchError(f"project {project_id}", response)

        entry = _entry_from_project(response.data)
        for table_id, title in _kanban_docks(response.data):
            entry.card_tables.append(await self._fetch_card_table(entry.id, table_id, title))
        return entry

    async def _fetch_card_table(self, project_id: str, table_id: str, title: str) -> CardTable:
        response = await self._source.get_card_table(project_id, table_id)
        if not response.ok or not isinstance(response.data, dict):
            raise FetchError(f"card table {table_id}", response)

        columns: list[Column] = []
        seen: set[str] = set()
        for raw in response.data.get("lists") or []:
            if not isinstance(raw, dict) or raw.get("id") is None:
                continue
            column_id = str(raw["id"])
            if column_id in seen:
                continue
            seen.add(column_id)
            columns.append(Column(id=column_id, title=str(raw.get("title") or ""), position=len(columns)))
        return CardTable(id=table_id, title=title, columns=columns)


# -- Helpers -------------------------------------------------------------------


def _entry_from_project(raw: dict[str, Any]) -> ProjectEntry:
    """Build an entry without card tables from a project payload."""
    return ProjectEntry(
        id=str(raw["id"]),
        name=str(raw.get("name") or ""),
        status=raw.get("status") or ProjectStatus.ACTIVE,
    )


def _kanban_docks(raw: dict[str, Any]) -> list[tuple[str, str]]:
    """``(card_table_id, title)`` for each kanban board in a project's dock.

    Dock items without a parseable card table URL are ignored, as are
    repeated table ids.
    """
    docks: list[tuple[str, str]] = []
    seen: set[str] = set()
    for item in raw.get("dock") or []:
        if not isinstance(item, dict) or item.get("name") != KANBAN_DOCK_NAME:
            continue
        table_id = card_table_id_from_url(item.get("url"))
        if table_id is None or table_id in seen:
            continue
        seen.add(table_id)
        docks.append((table_id, str(item.get("title") or DEFAULT_CARD_TABLE_TITLE)))
    return docks


def _indexed(kind: ItemKind, project_id: str, item_id: str) -> ItemOutcome:
    return ItemOutcome(kind=kind, project_id=project_id, item_id=item_id, status=ItemStatus.INDEXED)


def _skipped(kind: ItemKind, project_id: str, item_id: str, reason: str) -> ItemOutcome:
    return ItemOutcome(kind=kind, project_id=project_id, item_id=item_id, status=ItemStatus.SKIPPED, reason=reason)
