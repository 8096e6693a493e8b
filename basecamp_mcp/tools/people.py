"""People and activity tools."""

from typing import Annotated

from mcp.server.fastmcp import Context, FastMCP
from pydantic import Field

from basecamp_mcp.managers import people
from basecamp_mcp.tools._common import READ_ONLY, as_json, bridge, tool_errors


@tool_errors
async def list_people(
    ctx: Context,
    project_id: Annotated[str | None, Field(description="Project ID (optional, lists everyone if omitted)")] = None,
) -> str:
    """List people in the account or in a specific project."""
    return as_json(await people.list_people(bridge(ctx).client, project_id))


@tool_errors
async def get_person(ctx: Context, person_id: Annotated[str, Field(description="Person ID")]) -> str:
    """Get details about a specific person."""
    return as_json(await people.get_person(bridge(ctx).client, person_id))


@tool_errors
async def get_events(
    ctx: Context,
    project_id: Annotated[str | None, Field(description="Project ID (optional, all projects if omitted)")] = None,
    limit: Annotated[int, Field(description="Maximum number of events to return", ge=1)] = people.DEFAULT_EVENT_LIMIT,
) -> str:
    """Get recent activity events."""
    return as_json(await people.get_events(bridge(ctx).client, project_id, limit))


def register(mcp: FastMCP) -> None:
    mcp.add_tool(list_people, name="basecamp_list_people", annotations=READ_ONLY)
    mcp.add_tool(get_person, name="basecamp_get_person", annotations=READ_ONLY)
    mcp.add_tool(get_events, name="basecamp_get_events", annotations=READ_ONLY)
