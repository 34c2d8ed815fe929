"""Helpers shared by the Todoist tool modules."""

import asyncio
import json
import logging
from collections.abc import Awaitable, Callable, Iterable
from dataclasses import asdict, is_dataclass
from datetime import date, datetime
from typing import Annotated, Any, TypeVar

from mcp.server.fastmcp import Context
from mcp.server.fastmcp.exceptions import ToolError
from pydantic import Field

from ..auth import Session
from ..constants import TodoistColor
from ..middleware import session_from_request

logger = logging.getLogger(__name__)

T = TypeVar("T")

ProjectIdFilter = Annotated[
    str | None, Field(description="Project ID for filtering (example: '2207306141')")
]
SectionIdFilter = Annotated[
    str | None, Field(description="Section ID for filtering (example: '7025')")
]
LabelFilter = Annotated[
    str | None, Field(description="Label name for filtering (example: 'important')")
]
ParentIdFilter = Annotated[
    str | None, Field(description="Parent task ID to retrieve subtasks (example: '7025')")
]
TaskIds = Annotated[
    list[str] | None,
    Field(description="Array of task IDs to retrieve specific tasks (example: ['123', '456'])"),
]
QueryFilter = Annotated[
    str | None,
    Field(description="Filter string in Todoist format (example: 'today & @important')"),
]
Limit = Annotated[
    int | None,
    Field(description="Maximum number of results to return (1-200)", ge=1, le=200),
]
Color = Annotated[
    TodoistColor | None, Field(description="Todoist color name (example: 'berry_red')")
]
Favorite = Annotated[bool | None, Field(description="Add to or remove from favorites")]


def session_from_context(ctx: Context) -> Session | None:
    """Return the session the transport authenticated for this tool call.

    stdio requests, and calls made outside an MCP request, have none.
    """
    try:
        request_context = ctx.request_context
    except ValueError:
        return None
    return session_from_request(getattr(request_context, "request", None))


def sdk_kwargs(**kwargs: Any) -> dict[str, Any]:
    """Drop unset arguments; the SDK sends every argument it is given."""
    return {key: value for key, value in kwargs.items() if value is not None}


async def call_api(operation: str, call: Awaitable[T]) -> T:
    """Await a Todoist call, turning any failure into a caller-visible ToolError."""
    try:
        return await call
    except Exception as e:
        logger.error(f"Exception in {operation}: {e}", exc_info=True)
        raise ToolError(str(e) or "Unknown error") from e


async def run_sync(func: Callable[..., T], *args: Any, **kwargs: Any) -> T:
    """Run a blocking SDK call in a worker thread."""
    return await asyncio.to_thread(func, *args, **kwargs)


async def collect_pages(
    list_call: Callable[..., Iterable[list[T]]], limit: int | None = None, **filters: Any
) -> list[T]:
    """Drain an SDK paginator, stopping once ``limit`` items have been read."""

    def fetch() -> list[T]:
        items: list[T] = []
        for page in list_call(**sdk_kwargs(limit=limit, **filters)):
            items.extend(page)
            if limit is not None and len(items) >= limit:
                return items[:limit]
        return items

    return await asyncio.to_thread(fetch)


def _plain(data: Any) -> Any:
    if is_dataclass(data) and not isinstance(data, type):
        return asdict(data)
    if isinstance(data, list):
        return [_plain(item) for item in data]
    return data


def _json_default(value: Any) -> str:
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def to_text(data: Any) -> str:
    """Serialize SDK models, lists of them, or plain values to JSON."""
    return json.dumps(_plain(data), default=_json_default)
