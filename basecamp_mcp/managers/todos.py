"""To-do list and to-do operations."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from basecamp_mcp.managers.base import require_ok

if TYPE_CHECKING:
    from basecamp_mcp.client.basecamp import BasecampClient

# -- To-do lists ---------------------------------------------------------------


async def list_todolists(
    client: BasecampClient, project_id: str, todoset_id: str, status: str | None = None
) -> Any:
    return require_ok(await client.get_todolists(project_id, todoset_id, status), "list to-do lists")


async def get_todolist(client: BasecampClient, project_id: str, todolist_id: str) -> Any:
    return require_ok(await client.get_todolist(project_id, todolist_id), f"get to-do list {todolist_id}")


async def create_todolist(
    client: BasecampClient, project_id: str, todoset_id: str, name: str, description: str | None = None
) -> dict[str, Any]:
    response = await client.create_todolist(project_id, todoset_id, name, description)
    return require_ok(response, "create to-do list")


async def update_todolist(
    client: BasecampClient,
    project_id: str,
    todolist_id: str,
    name: str | None = None,
    description: str | None = None,
) -> dict[str, Any]:
    if not name and not description:
        msg = "Nothing to update: provide a name or a description"
        raise ValueError(msg)
    response = await client.update_todolist(project_id, todolist_id, name, description)
    return require_ok(response, f"update to-do list {todolist_id}")


# -- To-dos --------------------------------------------------------------------


async def list_todos(
    client: BasecampClient,
    project_id: str,
    todolist_id: str,
    status: str | None = None,
    completed: bool | None = None,
) -> Any:
    response = await client.get_todos(project_id, todolist_id, status=status, completed=completed)
    return require_ok(response, f"list to-dos in {todolist_id}")


async def get_todo(client: BasecampClient, project_id: str, todo_id: str) -> Any:
    return require_ok(await client.get_todo(project_id, todo_id), f"get to-do {todo_id}")


def _todo_fields(
    *,
    content: str | None = None,
    description: str | None = None,
    assignee_ids: list[int] | None = None,
    due_on: str | None = None,
    starts_on: str | None = None,
    notify: bool | None = None,
) -> dict[str, Any]:
    fields: dict[str, Any] = {}
    if content:
        fields["content"] = content
    if description:
        fields["description"] = description
    if assignee_ids:
        fields["assignee_ids"] = assignee_ids
    if due_on:
        fields["due_on"] = due_on
    if starts_on:
        fields["starts_on"] = starts_on
    if notify is not None:
        fields["notify"] = notify
    return fields


async def create_todo(
    client: BasecampClient,
    project_id: str,
    todolist_id: str,
    content: str,
    **fields: Any,
) -> dict[str, Any]:
    data = _todo_fields(content=content, **fields)
    return require_ok(await client.create_todo(project_id, todolist_id, data), "create to-do")


async def update_todo(client: BasecampClient, project_id: str, todo_id: str, **fields: Any) -> dict[str, Any]:
    """Partially update a to-do.

    Basecamp replaces the whole to-do on PUT, so the current record is read
    first and the changes are applied on top of its content.
    """
    updates = _todo_fields(**fields)
    if not updates:
        msg = "Nothing to update: provide at least one field"
        raise ValueError(msg)
    current = await get_todo(client, project_id, todo_id)
    body = {"content": current.get("content", "")} if isinstance(current, dict) else {}
    body.update(updates)
    return require_ok(await client.update_todo(project_id, todo_id, body), f"update to-do {todo_id}")


async def set_todo_completion(client: BasecampClient, project_id: str, todo_id: str, *, completed: bool) -> None:
    if completed:
        response = await client.complete_todo(project_id, todo_id)
        action = "complete"
    else:
        response = await client.uncomplete_todo(project_id, todo_id)
        action = "uncomplete"
    require_ok(response, f"{action} to-do {todo_id}")
