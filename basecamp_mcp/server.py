"""FastMCP server exposing Basecamp as MCP tools over stdio."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from loguru import logger
from mcp.server.fastmcp import FastMCP

from basecamp_mcp.context import BridgeContext, open_bridge
from basecamp_mcp.settings import get_settings
from basecamp_mcp.tools import register_tools

SERVER_NAME = "basecamp-automation-suite"

INSTRUCTIONS = """\
Basecamp 3 tools: projects, card tables (columns, cards, steps), to-dos,
comments, people and activity.  basecamp_read and basecamp_comment accept a
Basecamp URL directly.  The basecamp_index_* tools maintain a local cache of
each project's card tables and columns; basecamp_move_card uses it to accept
a column name instead of a column id."""


@asynccontextmanager
async def lifespan(_server: FastMCP) -> AsyncIterator[BridgeContext]:
    settings = get_settings()
    logger.info("Basecamp MCP server starting (index={})", settings.index_path)
    async with open_bridge(settings) as bridge:
        index = await bridge.index.load()
        logger.info("Index: {} projects loaded", len(index.projects))
        yield bridge
    logger.info("Basecamp MCP server stopped")


def create_server() -> FastMCP:
    """Create the server with every tool registered."""
    server = FastMCP(SERVER_NAME, instructions=INSTRUCTIONS, lifespan=lifespan)
    register_tools(server)
    return server


mcp = create_server()
