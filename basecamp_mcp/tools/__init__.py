"""MCP tool modules, one per Basecamp resource."""

from __future__ import annotations

from typing import TYPE_CHECKING

from basecamp_mcp.tools import cards, index, people, projects, recordings, todos

if TYPE_CHECKING:
    from mcp.server.fastmcp import FastMCP

_MODULES = (recordings, projects, cards, todos, people, index)


def register_tools(mcp: FastMCP) -> None:
    """Register every tool on ``mcp``."""
    for module in _MODULES:
        module.register(mcp)
