from __future__ import annotations

import asyncio
import json
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

import click

from basecamp_mcp.context import BridgeContext, open_bridge
from basecamp_mcp.log import setup_logging
from basecamp_mcp.settings import ConfigurationError, get_settings

T = TypeVar("T")


def _run(action: Callable[[BridgeContext], Awaitable[T]]) -> T:
    """Run ``action`` against a freshly opened bridge."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_file)

    async def _main() -> T:
        async with open_bridge(settings) as bridge:
            return await action(bridge)

    try:
        return asyncio.run(_main())
    except ConfigurationError as exc:
        raise click.ClickException(str(exc)) from exc


def _echo_json(data: Any) -> None:
    click.echo(json.dumps(data, indent=2, ensure_ascii=False, default=str))


@click.group()
def main() -> None:
    """Basecamp MCP bridge - Basecamp 3 as MCP tools, with a local project index."""


@main.command()
def serve() -> None:
    """Run the MCP server on stdio."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_file)

    from basecamp_mcp.server import mcp

    mcp.run()


# ---------------------------------------------------------------------------
# Project index
# ---------------------------------------------------------------------------


@main.group()
def index() -> None:
    """Build and query the local project index."""


@index.command()
def build() -> None:
    """Rebuild the index from every active project."""
    from basecamp_mcp.managers.index import IndexRebuildError

    try:
        report = _run(lambda bridge: bridge.index.rebuild_full())
    except IndexRebuildError as exc:
        raise click.ClickException(f"Index rebuild failed: {exc}") from exc

    summary = report.summary()
    click.echo(
        f"Indexed {summary['projects']} projects, {summary['card_tables']} card tables, "
        f"{summary['columns']} columns."
    )
    for outcome in report.skipped:
        click.echo(f"  skipped {outcome.kind} {outcome.item_id}: {outcome.reason}", err=True)


@index.command()
@click.argument("project_id")
def refresh(project_id: str) -> None:
    """Re-fetch one project and update it in the index."""
    result = _run(lambda bridge: bridge.index.refresh_project(project_id))
    if not result.ok:
        raise click.ClickException(f"Failed to refresh project {project_id}: {result.reason}")
    click.echo(f"Updated {result.entry.name} ({len(result.entry.card_tables)} card tables).")


@index.command()
@click.argument("query")
def search(query: str) -> None:
    """Search indexed projects by name."""
    projects = _run(lambda bridge: bridge.index.search(query))
    if not projects:
        click.echo(f"No indexed project matches '{query}'.")
        return
    for project in projects:
        click.echo(f"{project.id}\t{project.name}")


@index.command()
@click.argument("project_id")
def show(project_id: str) -> None:
    """Show a project's indexed card tables and columns."""
    project = _run(lambda bridge: bridge.index.get_project(project_id))
    if project is None:
        raise click.ClickException(f"Project {project_id} is not indexed.")
    _echo_json(project.model_dump(mode="json"))


@index.command()
@click.argument("project_id")
def columns(project_id: str) -> None:
    """List a project's columns in board order."""
    found = _run(lambda bridge: bridge.index.get_project_columns(project_id))
    for column in found:
        click.echo(f"{column.id}\t{column.title}")


@index.command("find-column")
@click.argument("project_id")
@click.argument("name")
def find_column(project_id: str, name: str) -> None:
    """Find the first column whose title contains NAME."""
    column = _run(lambda bridge: bridge.index.find_column(project_id, name))
    if column is None:
        raise click.ClickException(f"No column matching '{name}' in project {project_id}.")
    click.echo(f"{column.id}\t{column.title}")


@index.command()
def stats() -> None:
    """Show index statistics."""
    _echo_json(_run(lambda bridge: bridge.index.stats()).model_dump(mode="json"))


# ---------------------------------------------------------------------------
# Assignments
# ---------------------------------------------------------------------------


@main.command("get-cards")
@click.argument("project_query")
@click.argument("user_name")
def get_cards(project_query: str, user_name: str) -> None:
    """List cards assigned to USER_NAME in projects matching PROJECT_QUERY."""
    from basecamp_mcp.managers.assignments import PersonNotFoundError, find_assigned_cards

    try:
        report = _run(lambda bridge: find_assigned_cards(bridge.client, bridge.index, project_query, user_name))
    except PersonNotFoundError as exc:
        raise click.ClickException(str(exc)) from exc

    click.echo(f"{report.person_name}: checked {report.projects_checked} projects")
    if not report.projects_matched:
        click.echo(f"No project matches '{project_query}'.")
    for warning in report.warnings:
        click.echo(f"warning: {warning}", err=True)
    for card in report.cards:
        due = f" (due {card.due_on})" if card.due_on else ""
        click.echo(f"[{card.project_name} / {card.column}] {card.title}{due}")
        if card.url:
            click.echo(f"    {card.url}")
    click.echo(f"{len(report.cards)} cards assigned.")


if __name__ == "__main__":
    main()
