"""Process-level bridge context.

Created once by the server lifespan (or a CLI command) and handed to every
tool call.  Holds the long-lived collaborators instead of module globals:
the HTTP client and the project index that wraps it.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import TYPE_CHECKING

from loguru import logger

from basecamp_mcp.client.basecamp import BasecampClient
from basecamp_mcp.managers.index import IndexManager
from basecamp_mcp.store.local import LocalIndexStore

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from basecamp_mcp.settings import BasecampSettings


@dataclass
class BridgeContext:
    """Collaborators shared by all tool calls of one process."""

    settings: BasecampSettings
    client: BasecampClient
    index: IndexManager


@asynccontextmanager
async def open_bridge(settings: BasecampSettings) -> AsyncIterator[BridgeContext]:
    """Build the client and index from ``settings``; close the client on exit.

    Raises ``ConfigurationError`` if no access token is configured.
    """
    client = BasecampClient.from_settings(settings)
    store = LocalIndexStore(settings.index_path)
    logger.debug("Index store: {}", store.location)
    try:
        yield BridgeContext(settings=settings, client=client, index=IndexManager(client, store))
    finally:
        await client.aclose()
