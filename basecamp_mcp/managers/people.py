"""People and activity operations."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from basecamp_mcp.managers.base import require_ok

if TYPE_CHECKING:
    from basecamp_mcp.client.basecamp import BasecampClient

DEFAULT_EVENT_LIMIT = 20


async def list_people(client: BasecampClient, project_id: str | None = None) -> Any:
    if project_id:
        return require_ok(await client.get_project_people(project_id), f"list people in project {project_id}")
    return require_ok(await client.get_people(), "list people")


async def get_person(client: BasecampClient, person_id: str) -> Any:
    return require_ok(await client.get_person(person_id), f"get person {person_id}")


async def find_person(client: BasecampClient, name_or_email: str) -> dict[str, Any] | None:
    """First person whose name or email contains ``name_or_email`` (case-insensitive)."""
    people = await list_people(client)
    needle = name_or_email.lower()
    for person in people if isinstance(people, list) else []:
        if needle in (person.get("name") or "").lower() or needle in (person.get("email_address") or "").lower():
            return person
    return None


async def get_events(
    client: BasecampClient, project_id: str | None = None, limit: int = DEFAULT_EVENT_LIMIT
) -> Any:
    """Recent activity for the account or one project, truncated to ``limit``."""
    if project_id:
        events = require_ok(await client.get_project_events(project_id), f"get events for project {project_id}")
    else:
        events = require_ok(await client.get_events(), "get events")
    return events[:limit] if isinstance(events, list) else events
