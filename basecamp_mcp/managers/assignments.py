"""Assigned-card lookup across projects.

Combines a live project search, the project index (for the column
structure) and per-column card listings to answer "which cards in projects
matching X are assigned to person Y?".
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from loguru import logger
from pydantic import BaseModel, Field

from basecamp_mcp.managers.index import PROJECTS_PAGE_SIZE
from basecamp_mcp.managers.people import find_person

if TYPE_CHECKING:
    from basecamp_mcp.client.basecamp import BasecampClient
    from basecamp_mcp.managers.index import IndexManager

MAX_PROJECT_PAGES = 10


class PersonNotFoundError(LookupError):
    """Raised when no person matches the given name or email."""


class AssignedCard(BaseModel):
    project_id: str
    project_name: str
    card_table: str
    column: str
    card_id: str
    title: str
    url: str | None = None
    due_on: str | None = None
    assignees: list[str] = Field(default_factory=list)


class AssignmentReport(BaseModel):
    person_id: str
    person_name: str
    projects_checked: int = 0
    projects_matched: list[str] = Field(default_factory=list)
    cards: list[AssignedCard] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)


async def search_projects_live(
    client: BasecampClient, query: str, *, max_pages: int = MAX_PROJECT_PAGES
) -> tuple[list[dict[str, Any]], int]:
    """Page through projects (any status) collecting name matches.

    Returns ``(matches, projects_checked)``.
    """
    needle = query.lower()
    matches: list[dict[str, Any]] = []
    checked = 0
    for page in range(1, max_pages + 1):
        response = await client.get_projects(page=page)
        if not response.ok or not isinstance(response.data, list) or not response.data:
            break
        checked += len(response.data)
        matches.extend(p for p in response.data if needle in (p.get("name") or "").lower())
        if len(response.data) < PROJECTS_PAGE_SIZE:
            break
    return matches, checked


async def find_assigned_cards(
    client: BasecampClient,
    index: IndexManager,
    project_query: str,
    person_query: str,
) -> AssignmentReport:
    """Cards assigned to a person in every project whose name matches ``project_query``.

    Matching projects are refreshed in the index first so the column walk
    uses their current structure.
    """
    person = await find_person(client, person_query)
    if person is None:
        msg = f"No person matching '{person_query}'"
        raise PersonNotFoundError(msg)

    report = AssignmentReport(person_id=str(person["id"]), person_name=person.get("name") or "")
    matches, report.projects_checked = await search_projects_live(client, project_query)

    for project in matches:
        result = await index.refresh_project(str(project["id"]))
        if result.entry is None:
            report.warnings.append(f"Project {project['id']}: {result.reason}")
            continue
        entry = result.entry
        report.projects_matched.append(entry.name)

        for table in entry.card_tables:
            for column in table.columns:
                response = await client.get_cards(entry.id, column.id)
                if not response.ok or not isinstance(response.data, list):
                    logger.warning("Assignments: cannot list cards of column {} ({})", column.id, response.describe())
                    report.warnings.append(f"Column {column.title}: {response.describe()}")
                    continue
                for card in response.data:
                    assignees = card.get("assignees") or []
                    if not any(str(a.get("id")) == report.person_id for a in assignees):
                        continue
                    report.cards.append(
                        AssignedCard(
                            project_id=entry.id,
                            project_name=entry.name,
                            card_table=table.title,
                            column=column.title,
                            card_id=str(card["id"]),
                            title=card.get("title") or "",
                            url=card.get("app_url"),
                            due_on=card.get("due_on"),
                            assignees=[a.get("name") or "" for a in assignees],
                        )
                    )

    return report
