"""Remote Basecamp API client and URL helpers."""

from basecamp_mcp.client.base import ApiResponse, ProjectSource
from basecamp_mcp.client.basecamp import AccountResolutionError, BasecampClient
from basecamp_mcp.client.urls import card_table_id_from_url, extract_image_urls, parse_url

__all__ = [
    "AccountResolutionError",
    "ApiResponse",
    "BasecampClient",
    "ProjectSource",
    "card_table_id_from_url",
    "extract_image_urls",
    "parse_url",
]
