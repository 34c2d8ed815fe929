"""MCP tools for the Todoist resources."""

from mcp.server.fastmcp import FastMCP

from ..api_resolver import ApiResolver
from .comments import setup_comment_tools
from .labels import setup_label_tools
from .projects import setup_project_tools
from .sections import setup_section_tools
from .tasks import setup_task_tools


def register_tools(app: FastMCP, resolve_api: ApiResolver) -> None:
    setup_task_tools(app, resolve_api)
    setup_project_tools(app, resolve_api)
    setup_label_tools(app, resolve_api)
    setup_section_tools(app, resolve_api)
    setup_comment_tools(app, resolve_api)


__all__ = ["register_tools"]
