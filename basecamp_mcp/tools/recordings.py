"""URL-addressed tools: read a card or to-do, comment on it, parse a URL."""

from typing import Annotated

from mcp.server.fastmcp import Context, FastMCP
from pydantic import Field

from basecamp_mcp.managers import recordings
from basecamp_mcp.tools._common import LOCAL_READ, READ_ONLY, WRITE, as_json, bridge, tool_errors

Url = Annotated[str, Field(description="Basecamp URL (card, to-do, column or project)")]


@tool_errors
async def read(
    ctx: Context,
    url: Url,
    include_comments: Annotated[bool, Field(description="Include comments")] = True,
    include_images: Annotated[bool, Field(description="Extract image URLs from comments")] = True,
) -> str:
    """Read a Basecamp card or to-do from its URL, with comments and images."""
    result = await recordings.read_recording(
        bridge(ctx).client, url, include_comments=include_comments, include_images=include_images
    )
    return as_json(result)


@tool_errors
async def comment(
    ctx: Context, url: Url, comment: Annotated[str, Field(description="Comment text (supports HTML)")]
) -> str:
    """Post a comment on a Basecamp card or to-do."""
    posted = await recordings.post_comment(bridge(ctx).client, url, comment)
    return f"Comment posted (ID: {posted.get('id')})"


@tool_errors
async def parse_url(url: Url) -> str:
    """Parse a Basecamp URL into its type and ids."""
    return as_json(recordings.parse_recording_url(url))


def register(mcp: FastMCP) -> None:
    mcp.add_tool(read, name="basecamp_read", annotations=READ_ONLY)
    mcp.add_tool(comment, name="basecamp_comment", annotations=WRITE)
    mcp.add_tool(parse_url, name="basecamp_parse_url", annotations=LOCAL_READ)
