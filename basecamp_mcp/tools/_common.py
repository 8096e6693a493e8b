"""Helpers shared by the tool modules: context access, error translation, text payloads."""

import functools
import json
from collections.abc import Awaitable, Callable
from typing import Any, ParamSpec

from loguru import logger
from mcp.server.fastmcp import Context
from mcp.server.fastmcp.exceptions import ToolError
from mcp.types import ToolAnnotations
from pydantic import BaseModel

from basecamp_mcp.client.basecamp import AccountResolutionError
from basecamp_mcp.context import BridgeContext
from basecamp_mcp.managers.base import BasecampAPIError

P = ParamSpec("P")

READ_ONLY = ToolAnnotations(readOnlyHint=True, destructiveHint=False, idempotentHint=True, openWorldHint=True)
WRITE = ToolAnnotations(readOnlyHint=False, destructiveHint=False, idempotentHint=False, openWorldHint=True)
DESTRUCTIVE = ToolAnnotations(readOnlyHint=False, destructiveHint=True, idempotentHint=True, openWorldHint=True)
LOCAL_READ = ToolAnnotations(readOnlyHint=True, destructiveHint=False, idempotentHint=True, openWorldHint=False)

# Domain errors reported to the client as tool errors.  Anything else is a bug
# and propagates with its traceback logged by the MCP SDK.
EXPECTED_ERRORS: tuple[type[Exception], ...] = (
    BasecampAPIError,
    AccountResolutionError,
    LookupError,
    ValueError,
)


def bridge(ctx: Context) -> BridgeContext:
    """Return the lifespan-owned ``BridgeContext`` of the running server."""
    return ctx.request_context.lifespan_context


def tool_errors(fn: Callable[P, Awaitable[str]]) -> Callable[P, Awaitable[str]]:
    """Translate domain exceptions into ``ToolError`` (an ``isError`` result)."""

    @functools.wraps(fn)
    async def wrapper(*args: P.args, **kwargs: P.kwargs) -> str:
        try:
            return await fn(*args, **kwargs)
        except EXPECTED_ERRORS as exc:
            logger.warning("Tool {} failed: {}", fn.__name__, exc)
            raise ToolError(str(exc)) from exc

    return wrapper


def as_json(data: Any) -> str:
    """Pretty JSON text payload; pydantic models are dumped in JSON mode."""
    if isinstance(data, BaseModel):
        data = data.model_dump(mode="json")
    elif isinstance(data, list):
        data = [d.model_dump(mode="json") if isinstance(d, BaseModel) else d for d in data]
    return json.dumps(data, indent=2, ensure_ascii=False, default=str)
