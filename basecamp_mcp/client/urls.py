"""Helpers for Basecamp web URLs and rich-text content."""

from __future__ import annotations

import re
from collections.abc import Iterable
from typing import Any

from basecamp_mcp.models.enums import RecordingType
from basecamp_mcp.models.remote import ParsedUrl

# First match wins.
_URL_PATTERNS: list[tuple[RecordingType, re.Pattern[str]]] = [
    (RecordingType.CARD, re.compile(r"basecamp\.com/(\d+)/buckets/(\d+)/card_tables/cards/(\d+)")),
    (RecordingType.TODO, re.compile(r"basecamp\.com/(\d+)/buckets/(\d+)/todos/(\d+)")),
    (RecordingType.PROJECT, re.compile(r"basecamp\.com/(\d+)/projects/(\d+)")),
    (RecordingType.COLUMN, re.compile(r"basecamp\.com/(\d+)/buckets/(\d+)/card_tables/columns/(\d+)")),
]

_ATTACHMENT_RE = re.compile(r"<bc-attachment([^>]*)>", re.IGNORECASE)
_HREF_RE = re.compile(r'href="([^"]+)"')
_CONTENT_TYPE_RE = re.compile(r'content-type="([^"]+)"')

_CARD_TABLE_URL_RE = re.compile(r"card_tables/(\d+)\.json")


def parse_url(url: str) -> ParsedUrl | None:
    """Extract account, project and recording ids from a Basecamp URL."""
    for kind, pattern in _URL_PATTERNS:
        match = pattern.search(url)
        if match:
            groups = match.groups()
            return ParsedUrl(
                type=kind,
                account_id=groups[0],
                project_id=groups[1],
                recording_id=groups[2] if len(groups) > 2 else None,
            )
    return None


def card_table_id_from_url(url: str | None) -> str | None:
    """Return the card table id in a dock URL like ``.../card_tables/123.json``."""
    if not isinstance(url, str):
        return None
    match = _CARD_TABLE_URL_RE.search(url)
    return match.group(1) if match else None


def extract_image_urls(comments: Iterable[dict[str, Any]]) -> list[str]:
    """Collect hrefs of image attachments embedded in comment HTML."""
    images: list[str] = []
    for comment in comments:
        content = comment.get("content") if isinstance(comment, dict) else None
        if not content:
            continue
        for match in _ATTACHMENT_RE.finditer(content):
            attrs = match.group(1)
            href = _HREF_RE.search(attrs)
            content_type = _CONTENT_TYPE_RE.search(attrs)
            if href and content_type and content_type.group(1).startswith("image/"):
                images.append(href.group(1))
    return images
