"""To-do list and to-do tools."""

from typing import Annotated

from mcp.server.fastmcp import Context, FastMCP
from pydantic import Field

from basecamp_mcp.managers import todos
from basecamp_mcp.tools._common import READ_ONLY, WRITE, as_json, bridge, tool_errors

ProjectId = Annotated[str, Field(description="Project ID")]
TodolistId = Annotated[str, Field(description="To-do list ID")]
TodoId = Annotated[str, Field(description="To-do ID")]
AssigneeIds = Annotated[list[int] | None, Field(description="Array of person IDs to assign")]


@tool_errors
async def list_todolists(
    ctx: Context,
    project_id: ProjectId,
    todoset_id: Annotated[str, Field(description="To-do set ID (from basecamp_get_todoset)")],
    status: Annotated[str | None, Field(description="Filter by status: archived or trashed")] = None,
) -> str:
    """List all to-do lists in a to-do set."""
    return as_json(await todos.list_todolists(bridge(ctx).client, project_id, todoset_id, status))


@tool_errors
async def get_todolist(ctx: Context, project_id: ProjectId, todolist_id: TodolistId) -> str:
    """Get a specific to-do list."""
    return as_json(await todos.get_todolist(bridge(ctx).client, project_id, todolist_id))


@tool_errors
async def create_todolist(
    ctx: Context,
    project_id: ProjectId,
    todoset_id: Annotated[str, Field(description="To-do set ID")],
    name: Annotated[str, Field(description="To-do list name")],
    description: Annotated[str | None, Field(description="To-do list description (supports HTML)")] = None,
) -> str:
    """Create a new to-do list."""
    todolist = await todos.create_todolist(bridge(ctx).client, project_id, todoset_id, name, description)
    return f"To-do list created: {todolist.get('name')} (ID: {todolist.get('id')})"


@tool_errors
async def update_todolist(
    ctx: Context,
    project_id: ProjectId,
    todolist_id: TodolistId,
    name: str | None = None,
    description: str | None = None,
) -> str:
    """Update a to-do list name or description."""
    await todos.update_todolist(bridge(ctx).client, project_id, todolist_id, name, description)
    return "To-do list updated successfully"


@tool_errors
async def list_todos(
    ctx: Context,
    project_id: ProjectId,
    todolist_id: TodolistId,
    status: Annotated[str | None, Field(description="Filter by status: archived or trashed")] = None,
    completed: Annotated[bool | None, Field(description="Only completed to-dos when true")] = None,
) -> str:
    """List to-dos in a to-do list."""
    return as_json(await todos.list_todos(bridge(ctx).client, project_id, todolist_id, status, completed))


@tool_errors
async def get_todo(ctx: Context, project_id: ProjectId, todo_id: TodoId) -> str:
    """Get a specific to-do."""
    return as_json(await todos.get_todo(bridge(ctx).client, project_id, todo_id))


@tool_errors
async def create_todo(
    ctx: Context,
    project_id: ProjectId,
    todolist_id: TodolistId,
    content: Annotated[str, Field(description="To-do title")],
    description: Annotated[str | None, Field(description="To-do notes (supports HTML)")] = None,
    assignee_ids: AssigneeIds = None,
    due_on: Annotated[str | None, Field(description="Due date in YYYY-MM-DD format")] = None,
    starts_on: Annotated[str | None, Field(description="Start date in YYYY-MM-DD format")] = None,
    notify: Annotated[bool | None, Field(description="Notify assignees")] = None,
) -> str:
    """Create a new to-do in a to-do list."""
    todo = await todos.create_todo(
        bridge(ctx).client,
        project_id,
        todolist_id,
        content,
        description=description,
        assignee_ids=assignee_ids,
        due_on=due_on,
        starts_on=starts_on,
        notify=notify,
    )
    return f"To-do created: {todo.get('content')} (ID: {todo.get('id')})"


@tool_errors
async def update_todo(
    ctx: Context,
    project_id: ProjectId,
    todo_id: TodoId,
    content: str | None = None,
    description: str | None = None,
    assignee_ids: AssigneeIds = None,
    due_on: str | None = None,
    starts_on: str | None = None,
) -> str:
    """Update an existing to-do."""
    await todos.update_todo(
        bridge(ctx).client,
        project_id,
        todo_id,
        content=content,
        description=description,
        assignee_ids=assignee_ids,
        due_on=due_on,
        starts_on=starts_on,
    )
    return "To-do updated successfully"


@tool_errors
async def complete_todo(ctx: Context, project_id: ProjectId, todo_id: TodoId) -> str:
    """Mark a to-do as completed."""
    await todos.set_todo_completion(bridge(ctx).client, project_id, todo_id, completed=True)
    return "To-do marked as completed"


@tool_errors
async def uncomplete_todo(ctx: Context, project_id: ProjectId, todo_id: TodoId) -> str:
    """Mark a to-do as incomplete."""
    await todos.set_todo_completion(bridge(ctx).client, project_id, todo_id, completed=False)
    return "To-do marked as incomplete"


def register(mcp: FastMCP) -> None:
    mcp.add_tool(list_todolists, name="basecamp_list_todolists", annotations=READ_ONLY)
    mcp.add_tool(get_todolist, name="basecamp_get_todolist", annotations=READ_ONLY)
    mcp.add_tool(create_todolist, name="basecamp_create_todolist", annotations=WRITE)
    mcp.add_tool(update_todolist, name="basecamp_update_todolist", annotations=WRITE)
    mcp.add_tool(list_todos, name="basecamp_list_todos", annotations=READ_ONLY)
    mcp.add_tool(get_todo, name="basecamp_get_todo", annotations=READ_ONLY)
    mcp.add_tool(create_todo, name="basecamp_create_todo", annotations=WRITE)
    mcp.add_tool(update_todo, name="basecamp_update_todo", annotations=WRITE)
    mcp.add_tool(complete_todo, name="basecamp_complete_todo", annotations=WRITE)
    mcp.add_tool(uncomplete_todo, name="basecamp_uncomplete_todo", annotations=WRITE)
