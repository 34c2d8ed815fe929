"""Pytest configuration and fixtures for tests."""

import os
from collections.abc import Callable
from typing import Any
from unittest.mock import MagicMock

import pytest
from todoist_api_python.api import TodoistAPI

# Keep a developer's .env from leaking tokens into CLI tests
for _name in ("TODOIST_API_TOKEN", "MCP_ACCESS_TOKEN", "MCP_PORT", "MCP_HOST"):
    os.environ.pop(_name, None)

PAGINATED_METHODS = (
    "get_tasks",
    "filter_tasks",
    "get_projects",
    "get_sections",
    "get_labels",
    "get_comments",
)


@pytest.fixture
def mock_api() -> MagicMock:
    """A TodoistAPI stand-in; list methods yield no pages, the rest return None."""
    api = MagicMock(spec=TodoistAPI)
    for name in dir(TodoistAPI):
        if name.startswith("_") or not callable(getattr(TodoistAPI, name)):
            continue
        getattr(api, name).return_value = [] if name in PAGINATED_METHODS else None
    return api


@pytest.fixture
def make_scope() -> Callable[..., dict[str, Any]]:
    """Factory for minimal ASGI HTTP scopes."""

    def make(
        path: str = "/mcp", headers: list[tuple[bytes, bytes]] | None = None
    ) -> dict[str, Any]:
        return {
            "type": "http",
            "method": "POST",
            "path": path,
            "headers": headers or [],
            "query_string": b"",
        }

    return make
