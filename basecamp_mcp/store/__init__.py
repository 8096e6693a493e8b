"""Index store implementations for project index persistence."""

from basecamp_mcp.store.base import IndexStore
from basecamp_mcp.store.local import LocalIndexStore

__all__ = ["IndexStore", "LocalIndexStore"]
