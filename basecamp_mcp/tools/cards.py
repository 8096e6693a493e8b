"""Card table tools: columns, cards and card steps."""

from typing import Annotated

from mcp.server.fastmcp import Context, FastMCP
from pydantic import Field

from basecamp_mcp.managers import cards
from basecamp_mcp.tools._common import DESTRUCTIVE, READ_ONLY, WRITE, as_json, bridge, tool_errors

ProjectId = Annotated[str, Field(description="Project ID")]
CardId = Annotated[str, Field(description="Card ID")]
StepId = Annotated[str, Field(description="Step ID")]
AssigneeIds = Annotated[list[int] | None, Field(description="Array of person IDs to assign")]


@tool_errors
async def list_columns(
    ctx: Context, project_id: ProjectId, table_id: Annotated[str, Field(description="Card table ID")]
) -> str:
    """List all columns in a card table."""
    return as_json(await cards.list_columns(bridge(ctx).client, project_id, table_id))


@tool_errors
async def list_cards(
    ctx: Context, project_id: ProjectId, column_id: Annotated[str, Field(description="Column ID")]
) -> str:
    """List all cards in a specific column."""
    return as_json(await cards.list_cards(bridge(ctx).client, project_id, column_id))


@tool_errors
async def get_card(ctx: Context, project_id: ProjectId, card_id: CardId) -> str:
    """Get detailed information about a specific card."""
    return as_json(await cards.get_card(bridge(ctx).client, project_id, card_id))


@tool_errors
async def create_card(
    ctx: Context,
    project_id: ProjectId,
    column_id: Annotated[str, Field(description="Column ID where the card will be created")],
    title: Annotated[str, Field(description="Card title")],
    content: Annotated[str, Field(description="Card description/content (supports HTML)")] = "",
    due_on: Annotated[str | None, Field(description="Due date in YYYY-MM-DD format")] = None,
    assignee_ids: AssigneeIds = None,
) -> str:
    """Create a new card in a specific column."""
    card = await cards.create_card(bridge(ctx).client, project_id, column_id, title, content, due_on, assignee_ids)
    return f"Card created: {card.get('title')} (ID: {card.get('id')})"


@tool_errors
async def update_card(
    ctx: Context,
    project_id: ProjectId,
    card_id: CardId,
    title: str | None = None,
    content: str | None = None,
    due_on: str | None = None,
    assignee_ids: AssigneeIds = None,
    completed: bool | None = None,
) -> str:
    """Update an existing card (title, content, assignees, due date, completion)."""
    await cards.update_card(
        bridge(ctx).client,
        project_id,
        card_id,
        title=title,
        content=content,
        due_on=due_on,
        assignee_ids=assignee_ids,
        completed=completed,
    )
    return "Card updated successfully"


@tool_errors
async def move_card(
    ctx: Context,
    project_id: ProjectId,
    card_id: CardId,
    to_column: Annotated[
        str, Field(description="Target column ID, or a column name resolved through the project index")
    ],
    position: Annotated[int | None, Field(description="Position in the target column (1-based, optional)")] = None,
) -> str:
    """Move a card to a different column (status change)."""
    ctx_bridge = bridge(ctx)
    label = await cards.move_card(ctx_bridge.client, ctx_bridge.index, project_id, card_id, to_column, position)
    return f"Card moved to column {label}"


@tool_errors
async def trash_card(ctx: Context, project_id: ProjectId, card_id: CardId) -> str:
    """Move a card to trash."""
    await cards.trash_card(bridge(ctx).client, project_id, card_id)
    return "Card moved to trash"


@tool_errors
async def list_steps(ctx: Context, project_id: ProjectId, card_id: CardId) -> str:
    """List all steps/checklist items on a card."""
    return as_json(await cards.list_steps(bridge(ctx).client, project_id, card_id))


@tool_errors
async def add_step(
    ctx: Context, project_id: ProjectId, card_id: CardId, title: Annotated[str, Field(description="Step description")]
) -> str:
    """Add a new step to a card."""
    await cards.add_step(bridge(ctx).client, project_id, card_id, title)
    return f"Step added: {title}"


@tool_errors
async def complete_step(ctx: Context, project_id: ProjectId, step_id: StepId) -> str:
    """Mark a step as completed."""
    await cards.set_step_completion(bridge(ctx).client, project_id, step_id, completed=True)
    return "Step marked as completed"


@tool_errors
async def uncomplete_step(ctx: Context, project_id: ProjectId, step_id: StepId) -> str:
    """Mark a step as incomplete."""
    await cards.set_step_completion(bridge(ctx).client, project_id, step_id, completed=False)
    return "Step marked as incomplete"


def register(mcp: FastMCP) -> None:
    mcp.add_tool(list_columns, name="basecamp_list_columns", annotations=READ_ONLY)
    mcp.add_tool(list_cards, name="basecamp_list_cards", annotations=READ_ONLY)
    mcp.add_tool(get_card, name="basecamp_get_card", annotations=READ_ONLY)
    mcp.add_tool(create_card, name="basecamp_create_card", annotations=WRITE)
    mcp.add_tool(update_card, name="basecamp_update_card", annotations=WRITE)
    mcp.add_tool(move_card, name="basecamp_move_card", annotations=WRITE)
    mcp.add_tool(trash_card, name="basecamp_trash_card", annotations=DESTRUCTIVE)
    mcp.add_tool(list_steps, name="basecamp_list_steps", annotations=READ_ONLY)
    mcp.add_tool(add_step, name="basecamp_add_step", annotations=WRITE)
    mcp.add_tool(complete_step, name="basecamp_complete_step", annotations=WRITE)
    mcp.add_tool(uncomplete_step, name="basecamp_uncomplete_step", annotations=WRITE)
