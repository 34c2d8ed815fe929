"""ASGI middleware for the networked transports."""

import logging
from collections.abc import Callable
from typing import Any

from starlette.responses import JSONResponse

from .auth import AuthResolver, Session, headers_from_scope
from .constants import MCP_TOKEN_HEADER, PUBLIC_PATHS
from .exceptions import Unauthorized

logger = logging.getLogger(__name__)

# Key under scope["state"]; Starlette exposes it as request.state.todoist_session
SESSION_STATE_KEY = "todoist_session"

_MASKED_HEADERS = {"authorization", MCP_TOKEN_HEADER.lower()}


class AuthMiddleware:
    """Authenticate every HTTP request before it reaches the MCP app.

    On success the resulting :class:`~todoist_mcp.auth.Session` is stored in
    the request state for the tool handlers. On failure a 401 is sent and the
    wrapped app is never called.
    """

    def __init__(
        self,
        app: Any,
        authenticate: AuthResolver,
        public_paths: frozenset[str] = PUBLIC_PATHS,
    ) -> None:
        self.app = app
        self.authenticate = authenticate
        self.public_paths = public_paths

    async def __call__(self, scope: dict[str, Any], receive: Any, send: Any) -> Any:
        if scope["type"] != "http" or scope.get("path") in self.public_paths:
            await self.app(scope, receive, send)
            return

        try:
            session = self.authenticate(headers_from_scope(scope.get("headers", [])))
        except Unauthorized as e:
            method = scope.get("method", "UNKNOWN")
            logger.warning(f"Rejected {method} {scope.get('path', '/')}: {e.status_text}")
            response = JSONResponse(
                {"error": "unauthorized", "message": e.status_text},
                status_code=e.status_code,
                headers={"WWW-Authenticate": "Bearer"},
            )
            await response(scope, receive, send)
            return

        scope = dict(scope)
        scope["state"] = {**scope.get("state", {}), SESSION_STATE_KEY: session}
        await self.app(scope, receive, send)


def session_from_request(request: Any) -> Session | None:
    """Read the session :class:`AuthMiddleware` attached to a Starlette request."""
    if request is None:
        return None
    return getattr(request.state, SESSION_STATE_KEY, None)


def create_logging_middleware(app: Any) -> Callable[[dict[str, Any], Any, Any], Any]:
    """Create ASGI middleware that logs each request and its response status.

    Secret-bearing headers are masked. Uses the raw ASGI interface so
    streaming responses are not buffered.
    """

    async def middleware(scope: dict[str, Any], receive: Any, send: Any) -> Any:
        if scope["type"] != "http":
            await app(scope, receive, send)
            return

        method = scope.get("method", "UNKNOWN")
        path = scope.get("path", "/")
        logger.debug(f"=== Incoming Request: {method} {path} ===")
        logger.debug(f"Client: {scope.get('client')}")
        for name, values in headers_from_scope(scope.get("headers", [])).items():
            shown = "***" if name in _MASKED_HEADERS else ", ".join(values)
            logger.debug(f"  {name}: {shown}")

        async def send_wrapper(message: dict[str, Any]) -> Any:
            if message["type"] == "http.response.start":
                status = message.get("status")
                log = logger.warning if status and status >= 400 else logger.info
                log(f"=== Response: {status} for {method} {path} ===")
            await send(message)

        await app(scope, receive, send_wrapper)

    return middleware
