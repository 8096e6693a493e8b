"""Card table operations: columns, cards and card steps."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from loguru import logger

from basecamp_mcp.managers.base import require_ok

if TYPE_CHECKING:
    from basecamp_mcp.client.basecamp import BasecampClient
    from basecamp_mcp.managers.index import IndexManager


class ColumnNotFoundError(LookupError):
    """Raised when a column name does not match any indexed column."""

    def __init__(self, project_id: str, column_name: str) -> None:
        super().__init__(f"No column matching '{column_name}' in project {project_id}")
        self.project_id = project_id
        self.column_name = column_name


# -- Columns -------------------------------------------------------------------


async def list_columns(client: BasecampClient, project_id: str, table_id: str) -> list[dict[str, Any]]:
    """Columns of a card table, in board order."""
    table = require_ok(await client.get_card_table(project_id, table_id), f"get card table {table_id}")
    if not isinstance(table, dict):
        return []
    return table.get("lists") or []


async def resolve_column(index: IndexManager, project_id: str, column: str) -> tuple[str, str]:
    """Resolve a column reference to ``(column_id, label)``.

    Numeric references are used as ids directly.  Anything else is treated as a
    (partial) column title and looked up in the index, refreshing the
    project once if it is not indexed yet.
    """
    if column.isdigit():
        return column, column

    found = await index.find_column(project_id, column)
    if found is None and await index.get_project(project_id) is None:
        logger.info("Column lookup: project {} not indexed, refreshing", project_id)
        await index.refresh_project(project_id)
        found = await index.find_column(project_id, column)
    if found is None:
        raise ColumnNotFoundError(project_id, column)
    return found.id, f"{found.title} ({found.id})"


# -- Cards ---------------------------------------------------------------------


async def list_cards(client: BasecampClient, project_id: str, column_id: str) -> Any:
    return require_ok(await client.get_cards(project_id, column_id), f"list cards in column {column_id}")


async def get_card(client: BasecampClient, project_id: str, card_id: str) -> Any:
    return require_ok(await client.get_card(project_id, card_id), f"get card {card_id}")


async def create_card(
    client: BasecampClient,
    project_id: str,
    column_id: str,
    title: str,
    content: str = "",
    due_on: str | None = None,
    assignee_ids: list[int] | None = None,
) -> dict[str, Any]:
    response = await client.create_card(project_id, column_id, title, content, due_on, assignee_ids)
    return require_ok(response, "create card")


async def update_card(
    client: BasecampClient,
    project_id: str,
    card_id: str,
    *,
    title: str | None = None,
    content: str | None = None,
    due_on: str | None = None,
    assignee_ids: list[int] | None = None,
    completed: bool | None = None,
) -> dict[str, Any]:
    updates: dict[str, Any] = {}
    if title:
        updates["title"] = title
    if content:
        updates["content"] = content
    if due_on:
        updates["due_on"] = due_on
    if assignee_ids is not None:
        updates["assignee_ids"] = assignee_ids
    if completed is not None:
        updates["completed"] = completed
    if not updates:
        msg = "Nothing to update: provide at least one field"
        raise ValueError(msg)
    return require_ok(await client.update_card(project_id, card_id, updates), f"update card {card_id}")


async def move_card(
    client: BasecampClient,
    index: IndexManager,
    project_id: str,
    card_id: str,
    to_column: str,
    position: int | None = None,
) -> str:
    """Move a card; ``to_column`` is a column id or a column name. Returns the target label."""
    column_id, label = await resolve_column(index, project_id, to_column)
    require_ok(await client.move_card(project_id, card_id, column_id, position), f"move card {card_id}")
    return label


async def trash_card(client: BasecampClient, project_id: str, card_id: str) -> None:
    require_ok(await client.trash_card(project_id, card_id), f"trash card {card_id}")


# -- Steps ---------------------------------------------------------------------


async def list_steps(client: BasecampClient, project_id: str, card_id: str) -> Any:
    return require_ok(await client.get_steps(project_id, card_id), f"list steps of card {card_id}")


async def add_step(client: BasecampClient, project_id: str, card_id: str, title: str) -> dict[str, Any]:
    return require_ok(await client.create_step(project_id, card_id, title), "add step")


async def set_step_completion(client: BasecampClient, project_id: str, step_id: str, *, completed: bool) -> None:
    action = "complete" if completed else "uncomplete"
    require_ok(await client.update_step_completion(project_id, step_id, completed), f"{action} step {step_id}")
