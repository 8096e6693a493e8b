"""Normalized remote response and the capability the project index consumes."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable


@dataclass
class ApiResponse:
    """Normalized result of one HTTP call.

    Remote failures never raise: a non-2xx status is carried in ``code`` and
    a transport failure sets ``error`` with ``code == 0``.
    """

    code: int
    data: Any = field(default_factory=dict)
    headers: dict[str, str] = field(default_factory=dict)
    error: bool = False
    message: str | None = None

    @property
    def ok(self) -> bool:
        return not self.error and 200 <= self.code < 300

    def describe(self) -> str:
        """Short human-readable failure cause."""
        if self.error:
            return f"transport error: {self.message or 'unknown'}"
        detail = self.data.get("error") if isinstance(self.data, dict) else None
        return f"HTTP {self.code}" + (f": {detail}" if detail else "")


@runtime_checkable
class ProjectSource(Protocol):
    """Remote reads needed to build the project index."""

    async def get_projects(self, status: str | None = None, page: int = 1) -> ApiResponse: ...

    async def get_project(self, project_id: str) -> ApiResponse: ...

    async def get_card_table(self, project_id: str, card_table_id: str) -> ApiResponse: ...
