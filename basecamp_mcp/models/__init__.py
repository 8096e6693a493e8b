"""Data models for the Basecamp bridge."""

from basecamp_mcp.models.enums import ItemKind, ItemStatus, ProjectStatus, RecordingType
from basecamp_mcp.models.index import (
    INDEX_SCHEMA_VERSION,
    BasecampIndex,
    CardTable,
    Column,
    IndexStats,
    ItemOutcome,
    ProjectEntry,
    RebuildReport,
    RefreshResult,
)
from basecamp_mcp.models.remote import ParsedUrl

__all__ = [
    "INDEX_SCHEMA_VERSION",
    # Index
    "BasecampIndex",
    "CardTable",
    "Column",
    "IndexStats",
    # Enums
    "ItemKind",
    "ItemOutcome",
    "ItemStatus",
    # Remote
    "ParsedUrl",
    "ProjectEntry",
    "ProjectStatus",
    "RebuildReport",
    "RecordingType",
    "RefreshResult",
]
