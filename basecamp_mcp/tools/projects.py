"""Project tools."""

from typing import Annotated

from mcp.server.fastmcp import Context, FastMCP
from pydantic import Field

from basecamp_mcp.managers import projects
from basecamp_mcp.models.enums import ProjectStatus
from basecamp_mcp.tools._common import DESTRUCTIVE, READ_ONLY, WRITE, as_json, bridge, tool_errors

ProjectId = Annotated[str, Field(description="Project ID")]


@tool_errors
async def list_projects(
    ctx: Context,
    status: Annotated[ProjectStatus | None, Field(description="Filter projects by status (default: active)")] = None,
) -> str:
    """List all Basecamp projects."""
    return as_json(await projects.list_projects(bridge(ctx).client, status))


@tool_errors
async def get_project(ctx: Context, project_id: ProjectId) -> str:
    """Get detailed information about a specific project."""
    return as_json(await projects.get_project(bridge(ctx).client, project_id))


@tool_errors
async def create_project(
    ctx: Context,
    name: Annotated[str, Field(description="Project name")],
    description: Annotated[str, Field(description="Project description")] = "",
) -> str:
    """Create a new Basecamp project."""
    project = await projects.create_project(bridge(ctx).client, name, description)
    return f"Project created: {project.get('name')} (ID: {project.get('id')})"


@tool_errors
async def update_project(
    ctx: Context,
    project_id: ProjectId,
    name: str | None = None,
    description: str | None = None,
) -> str:
    """Update a project name or description."""
    await projects.update_project(bridge(ctx).client, project_id, name, description)
    return "Project updated successfully"


@tool_errors
async def trash_project(ctx: Context, project_id: ProjectId) -> str:
    """Move a project to trash."""
    await projects.trash_project(bridge(ctx).client, project_id)
    return "Project moved to trash"


@tool_errors
async def find_project(
    ctx: Context,
    search_term: Annotated[str, Field(description="Project name or partial name to search for")],
) -> str:
    """Find a project by name using fuzzy matching."""
    return as_json(await projects.find_project(bridge(ctx).client, search_term))


@tool_errors
async def get_todoset(ctx: Context, project_id: ProjectId) -> str:
    """Get the To-do Set for a project (contains all todo lists)."""
    return as_json(await projects.get_todoset(bridge(ctx).client, project_id))


def register(mcp: FastMCP) -> None:
    mcp.add_tool(list_projects, name="basecamp_list_projects", annotations=READ_ONLY)
    mcp.add_tool(get_project, name="basecamp_get_project", annotations=READ_ONLY)
    mcp.add_tool(create_project, name="basecamp_create_project", annotations=WRITE)
    mcp.add_tool(update_project, name="basecamp_update_project", annotations=WRITE)
    mcp.add_tool(trash_project, name="basecamp_trash_project", annotations=DESTRUCTIVE)
    mcp.add_tool(find_project, name="basecamp_find_project", annotations=READ_ONLY)
    mcp.add_tool(get_todoset, name="basecamp_get_todoset", annotations=READ_ONLY)
