"""URL-addressed operations: read a card or to-do with its comments, post comments."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from basecamp_mcp.client.urls import extract_image_urls, parse_url
from basecamp_mcp.managers.base import InvalidUrlError, require_ok
from basecamp_mcp.models.enums import RecordingType

if TYPE_CHECKING:
    from basecamp_mcp.client.basecamp import BasecampClient
    from basecamp_mcp.models.remote import ParsedUrl


def parse_recording_url(url: str) -> ParsedUrl:
    """Parse a Basecamp URL.  Raises ``InvalidUrlError`` if unrecognised."""
    parsed = parse_url(url)
    if parsed is None:
        raise InvalidUrlError(url)
    return parsed


async def read_recording(
    client: BasecampClient,
    url: str,
    *,
    include_comments: bool = True,
    include_images: bool = True,
) -> dict[str, Any]:
    """Fetch the card or to-do behind ``url``, optionally with comments and image links."""
    parsed = parse_recording_url(url)
    result: dict[str, Any] = {}

    if parsed.type == RecordingType.CARD:
        response = await client.get_card(parsed.project_id, parsed.recording_id)
        result["card"] = require_ok(response, f"get card {parsed.recording_id}")
    elif parsed.type == RecordingType.TODO:
        response = await client.get_todo(parsed.project_id, parsed.recording_id)
        result["todo"] = require_ok(response, f"get to-do {parsed.recording_id}")

    if include_comments and parsed.type in (RecordingType.CARD, RecordingType.TODO):
        response = await client.get_comments(parsed.project_id, parsed.recording_id)
        comments = require_ok(response, "get comments")
        result["comments"] = comments
        if include_images and isinstance(comments, list):
            result["images"] = extract_image_urls(comments)

    return result


async def post_comment(client: BasecampClient, url: str, comment: str) -> dict[str, Any]:
    parsed = parse_recording_url(url)
    if not parsed.recording_id:
        raise InvalidUrlError(url)
    response = await client.create_comment(parsed.project_id, parsed.recording_id, comment)
    return require_ok(response, "post comment")
