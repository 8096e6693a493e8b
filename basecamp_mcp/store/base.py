"""Index store interface for project index persistence.

The store holds a single serialized index document.  Every write is a full
overwrite; there are no partial or append writes.  The interface is async so
file I/O can be pushed off the event loop.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class IndexStore(Protocol):
    """Async protocol for reading and writing the raw index document."""

    @property
    def location(self) -> str:
        """Human-readable identifier of where the document lives."""
        ...

    async def read(self) -> str | None:
        """Return the stored document, or ``None`` if nothing was stored yet."""
        ...

    async def write(self, data: str) -> None:
        """Replace the stored document.  Raises ``OSError`` on failure."""
        ...
