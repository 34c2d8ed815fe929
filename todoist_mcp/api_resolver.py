"""Resolve the Todoist client a tool call should use."""

from collections.abc import Callable

from mcp.server.fastmcp.exceptions import ToolError
from todoist_api_python.api import TodoistAPI

from .auth import Session

ApiResolver = Callable[[Session | None], TodoistAPI]


def todoist_api_resolver(session: Session | None) -> TodoistAPI:
    """Build a client for the session's token.

    A new client is returned on every call; nothing is cached and no request
    is made until a client method is called.

    Raises:
        ToolError: If there is no session or it carries no token
    """
    if session is None or not session.api_token:
        raise ToolError("No todoist api token provided")
    return TodoistAPI(session.api_token)


def create_direct_resolver(api_token: str | None) -> ApiResolver:
    """Resolver for stdio mode, where the token comes from startup config.

    Any per-request session is ignored.
    """
    session = Session(api_token=api_token) if api_token else None

    def resolve(_session: Session | None) -> TodoistAPI:
        return todoist_api_resolver(session)

    return resolve


def create_session_resolver() -> ApiResolver:
    """Resolver for the networked modes: use the caller's own session."""

    def resolve(session: Session | None) -> TodoistAPI:
        return todoist_api_resolver(session)

    return resolve
