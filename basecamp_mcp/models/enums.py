"""Shared enumerations used across the bridge."""

from __future__ import annotations

from enum import StrEnum


class ProjectStatus(StrEnum):
    """Project lifecycle status as reported by Basecamp."""

    ACTIVE = "active"
    ARCHIVED = "archived"
    TRASHED = "trashed"


class ItemKind(StrEnum):
    """Granularity of an index rebuild outcome."""

    PROJECT = "project"
    CARD_TABLE = "card_table"


class ItemStatus(StrEnum):
    INDEXED = "indexed"
    SKIPPED = "skipped"


class RecordingType(StrEnum):
    """Resource kinds recognised in Basecamp web URLs."""

    CARD = "card"
    TODO = "todo"
    COLUMN = "column"
    PROJECT = "project"
