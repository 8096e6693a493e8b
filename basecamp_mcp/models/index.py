"""Project index data models.

The index is a locally persisted mirror of project -> card table -> column
structure.  These models are both the in-memory representation and the
on-disk document layout::

    {
      "version": "1.0.0",
      "last_full_update": "2026-01-01T00:00:00Z",
      "projects": [
        {"id": "...", "name": "...", "status": "active",
         "card_tables": [{"id": "...", "title": "...",
                          "columns": [{"id": "...", "title": "...", "position": 0}]}],
         "last_updated": "..."}
      ]
    }
"""

from __future__ import annotations

from datetime import UTC, datetime

from pydantic import BaseModel, Field

from basecamp_mcp.models.enums import ItemKind, ItemStatus, ProjectStatus

INDEX_SCHEMA_VERSION = "1.0.0"


def utcnow() -> datetime:
    return datetime.now(UTC)


class Column(BaseModel):
    """A lane within a card table.

    ``position`` is the zero-based rank in the remote column order at the
    time of the last refresh, not a remote attribute.
    """

    id: str
    title: str
    position: int = Field(ge=0)


class CardTable(BaseModel):
    """A kanban board belonging to a project."""

    id: str
    title: str
    columns: list[Column] = Field(default_factory=list)


class ProjectEntry(BaseModel):
    """Cached structure of one project.  Replaced wholesale on refresh."""

    id: str
    name: str
    status: ProjectStatus = ProjectStatus.ACTIVE
    card_tables: list[CardTable] = Field(default_factory=list)
    last_updated: datetime = Field(default_factory=utcnow)

    def columns(self) -> list[Column]:
        """All columns, tables in stored order, columns in position order."""
        return [column for table in self.card_tables for column in table.columns]


class BasecampIndex(BaseModel):
    """The persisted index document."""

    version: str = INDEX_SCHEMA_VERSION
    last_full_update: datetime = Field(default_factory=utcnow)
    projects: list[ProjectEntry] = Field(default_factory=list)


# -- Reports -----------------------------------------------------------------


class IndexStats(BaseModel):
    version: str
    last_full_update: datetime
    total_projects: int
    total_card_tables: int
    total_columns: int
    index_path: str


class ItemOutcome(BaseModel):
    """Result of indexing one project or card table during a rebuild."""

    kind: ItemKind
    project_id: str
    item_id: str
    status: ItemStatus
    reason: str | None = None


class RebuildReport(BaseModel):
    """Outcome of a full rebuild: the new index plus per-item results."""

    index: BasecampIndex
    outcomes: list[ItemOutcome] = Field(default_factory=list)

    @property
    def skipped(self) -> list[ItemOutcome]:
        return [o for o in self.outcomes if o.status == ItemStatus.SKIPPED]

    def summary(self) -> dict[str, int]:
        """Aggregate counts for user-facing reporting."""
        projects = self.index.projects
        return {
            "projects": len(projects),
            "card_tables": sum(len(p.card_tables) for p in projects),
            "columns": sum(len(t.columns) for p in projects for t in p.card_tables),
            "skipped": len(self.skipped),
        }


class RefreshResult(BaseModel):
    """Outcome of refreshing a single project.

    ``entry`` is ``None`` when the refresh failed; the index is unchanged
    for that project in that case.
    """

    project_id: str
    entry: ProjectEntry | None = None
    reason: str | None = None

    @property
    def ok(self) -> bool:
        return self.entry is not None
