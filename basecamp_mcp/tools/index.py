"""Project index tools."""

from typing import Annotated

from mcp.server.fastmcp import Context, FastMCP
from mcp.types import ToolAnnotations
from pydantic import Field

from basecamp_mcp.managers.cards import ColumnNotFoundError
from basecamp_mcp.managers.index import IndexRebuildError, ProjectNotIndexedError
from basecamp_mcp.tools._common import LOCAL_READ, as_json, bridge, tool_errors

ProjectId = Annotated[str, Field(description="Project ID")]

INDEX_WRITE = ToolAnnotations(readOnlyHint=False, destructiveHint=False, idempotentHint=True, openWorldHint=True)


@tool_errors
async def index_build(ctx: Context) -> str:
    """Rebuild the project index from all active projects.

    Slow: fetches every active project and each of its card tables.
    """
    try:
        report = await bridge(ctx).index.rebuild_full()
    except IndexRebuildError as exc:
        msg = f"Index rebuild failed: {exc}"
        raise ValueError(msg) from exc
    skipped = [outcome.model_dump(mode="json") for outcome in report.skipped]
    return as_json({"summary": report.summary(), "skipped": skipped})


@tool_errors
async def index_update_project(ctx: Context, project_id: ProjectId) -> str:
    """Refresh a single project in the index."""
    result = await bridge(ctx).index.refresh_project(project_id)
    if not result.ok:
        msg = f"Failed to refresh project {project_id}: {result.reason}"
        raise ValueError(msg)
    return as_json(result.entry)


@tool_errors
async def index_search(
    ctx: Context, query: Annotated[str, Field(description="Case-insensitive substring of the project name")]
) -> str:
    """Search indexed projects by name."""
    return as_json(await bridge(ctx).index.search(query))


@tool_errors
async def index_get_project(ctx: Context, project_id: ProjectId) -> str:
    """Get a project's indexed structure (card tables and columns)."""
    project = await bridge(ctx).index.get_project(project_id)
    if project is None:
        raise ProjectNotIndexedError(project_id)
    return as_json(project)


@tool_errors
async def index_find_column(
    ctx: Context,
    project_id: ProjectId,
    column_name: Annotated[str, Field(description="Case-insensitive substring of the column title")],
) -> str:
    """Find the first indexed column of a project whose title matches."""
    index = bridge(ctx).index
    column = await index.find_column(project_id, column_name)
    if column is None:
        if await index.get_project(project_id) is None:
            raise ProjectNotIndexedError(project_id)
        raise ColumnNotFoundError(project_id, column_name)
    return as_json(column)


@tool_errors
async def index_get_columns(ctx: Context, project_id: ProjectId) -> str:
    """List every indexed column of a project across its card tables."""
    index = bridge(ctx).index
    if await index.get_project(project_id) is None:
        raise ProjectNotIndexedError(project_id)
    return as_json(await index.get_project_columns(project_id))


@tool_errors
async def index_stats(ctx: Context) -> str:
    """Show index statistics."""
    return as_json(await bridge(ctx).index.stats())


def register(mcp: FastMCP) -> None:
    mcp.add_tool(index_build, name="basecamp_index_build", annotations=INDEX_WRITE)
    mcp.add_tool(index_update_project, name="basecamp_index_update_project", annotations=INDEX_WRITE)
    mcp.add_tool(index_search, name="basecamp_index_search", annotations=LOCAL_READ)
    mcp.add_tool(index_get_project, name="basecamp_index_get_project", annotations=LOCAL_READ)
    mcp.add_tool(index_find_column, name="basecamp_index_find_column", annotations=LOCAL_READ)
    mcp.add_tool(index_get_columns, name="basecamp_index_get_columns", annotations=LOCAL_READ)
    mcp.add_tool(index_stats, name="basecamp_index_stats", annotations=LOCAL_READ)
