"""Todoist MCP Server Package.

MCP server exposing the Todoist API over stdio, SSE and streamable HTTP.
"""

from todoist_mcp.api_resolver import (
    ApiResolver,
    create_direct_resolver,
    create_session_resolver,
    todoist_api_resolver,
)
from todoist_mcp.auth import Session, create_auth_resolver
from todoist_mcp.config import DirectTransport, GatedTransport, TransportMode, select_transport
from todoist_mcp.exceptions import (
    InvalidAccessSecret,
    InvalidConfiguration,
    MissingCredential,
    TodoistMCPError,
    Unauthorized,
)

__all__ = [
    "ApiResolver",
    "DirectTransport",
    "GatedTransport",
    "InvalidAccessSecret",
    "InvalidConfiguration",
    "MissingCredential",
    "Session",
    "TodoistMCPError",
    "TransportMode",
    "Unauthorized",
    "create_auth_resolver",
    "create_direct_resolver",
    "create_session_resolver",
    "select_transport",
    "todoist_api_resolver",
]

__version__ = "0.1.0"
