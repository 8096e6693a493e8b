"""Project operations: list, get, create, update, trash, find, to-do set."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Any

from basecamp_mcp.managers.base import require_ok

if TYPE_CHECKING:
    from basecamp_mcp.client.basecamp import BasecampClient
    from basecamp_mcp.models.enums import ProjectStatus

_TODOSET_URL_RE = re.compile(r"todosets/(\d+)\.json")


class TodosetNotFoundError(LookupError):
    """Raised when a project has no to-do set in its dock."""


async def list_projects(client: BasecampClient, status: ProjectStatus | None = None) -> Any:
    response = await client.get_projects(status.value if status else None)
    return require_ok(response, "list projects")


async def get_project(client: BasecampClient, project_id: str) -> Any:
    return require_ok(await client.get_project(project_id), f"get project {project_id}")


async def create_project(client: BasecampClient, name: str, description: str = "") -> dict[str, Any]:
    return require_ok(await client.create_project(name, description), "create project")


async def update_project(
    client: BasecampClient,
    project_id: str,
    name: str | None = None,
    description: str | None = None,
) -> dict[str, Any]:
    if not name and not description:
        msg = "Nothing to update: provide a name or a description"
        raise ValueError(msg)
    return require_ok(await client.update_project(project_id, name, description), f"update project {project_id}")


async def trash_project(client: BasecampClient, project_id: str) -> None:
    require_ok(await client.trash_project(project_id), f"trash project {project_id}")


async def find_project(client: BasecampClient, search_term: str) -> list[dict[str, Any]]:
    """Live case-insensitive name search over the first page of projects.

    The index offers the same lookup without a round-trip
    (``IndexManager.search``); this one sees projects created since the last
    rebuild.
    """
    projects = require_ok(await client.get_projects(), "fetch projects")
    if not isinstance(projects, list):
        msg = "Failed to fetch projects: unexpected response shape"
        raise ValueError(msg)
    needle = search_term.lower()
    return [p for p in projects if needle in (p.get("name") or "").lower()]


async def get_todoset(client: BasecampClient, project_id: str) -> Any:
    """Fetch the to-do set referenced by the project's dock."""
    project = await get_project(client, project_id)
    for item in project.get("dock") or []:
        if item.get("name") != "todoset":
            continue
        match = _TODOSET_URL_RE.search(item.get("url") or "")
        if match:
            return require_ok(await client.get_todoset(project_id, match.group(1)), "get to-do set")
    msg = f"Project {project_id} has no to-do set"
    raise TodosetNotFoundError(msg)
