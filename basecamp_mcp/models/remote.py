"""Value objects derived from remote Basecamp data."""

from __future__ import annotations

from pydantic import BaseModel

from basecamp_mcp.models.enums import RecordingType


class ParsedUrl(BaseModel):
    """Identifiers extracted from a Basecamp web URL."""

    type: RecordingType
    account_id: str
    project_id: str
    recording_id: str | None = None
