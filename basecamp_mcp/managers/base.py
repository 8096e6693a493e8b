"""Shared errors and response checks for the managers."""

from __future__ import annotations

from typing import Any

from basecamp_mcp.client.base import ApiResponse


class BasecampAPIError(RuntimeError):
    """Raised when Basecamp answers with a failure for a requested action."""

    def __init__(self, action: str, response: ApiResponse) -> None:
        super().__init__(f"Failed to {action}: {response.describe()}")
        self.action = action
        self.response = response


class InvalidUrlError(ValueError):
    """Raised when a URL does not point at a Basecamp recording."""

    def __init__(self, url: str) -> None:
        super().__init__(f"Invalid Basecamp URL: {url}")
        self.url = url


def require_ok(response: ApiResponse, action: str) -> Any:
    """Return the response payload or raise ``BasecampAPIError``."""
    if not response.ok:
        raise BasecampAPIError(action, response)
    return response.data
