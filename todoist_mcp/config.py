"""Startup configuration and transport selection."""

import logging
from dataclasses import dataclass, field
from enum import Enum

from .constants import DEFAULT_HOST, DEFAULT_PORT, HTTP_STREAM_ENDPOINT, SSE_ENDPOINT
from .exceptions import InvalidConfiguration, MissingCredential

logger = logging.getLogger(__name__)


class TransportMode(str, Enum):
    """How MCP clients reach the server."""

    STDIO = "stdio"
    SSE = "sse"
    HTTP_STREAM = "httpStream"


@dataclass(frozen=True, kw_only=True)
class DirectTransport:
    """stdio: one Todoist token, supplied at startup, serves every call."""

    api_token: str | None = field(default=None, repr=False)

    @property
    def mode(self) -> TransportMode:
        return TransportMode.STDIO


@dataclass(frozen=True, kw_only=True)
class GatedTransport:
    """sse / httpStream: every request authenticates with its own token."""

    mode: TransportMode
    port: int = DEFAULT_PORT
    host: str = DEFAULT_HOST
    access_secret: str | None = field(default=None, repr=False)

    @property
    def endpoint(self) -> str:
        return SSE_ENDPOINT if self.mode is TransportMode.SSE else HTTP_STREAM_ENDPOINT


def parse_mode(mode: str | TransportMode) -> TransportMode:
    try:
        return TransportMode(mode)
    except ValueError:
        raise InvalidConfiguration(f"Invalid mode: {mode!r}") from None


def select_transport(
    mode: str | TransportMode,
    *,
    port: int = DEFAULT_PORT,
    host: str = DEFAULT_HOST,
    api_token: str | None = None,
    access_secret: str | None = None,
) -> DirectTransport | GatedTransport:
    """Pick the transport configuration once, at startup.

    Raises:
        InvalidConfiguration: If ``mode`` is not a known transport
        MissingCredential: If stdio mode was requested without a Todoist token
    """
    transport_mode = parse_mode(mode)

    if transport_mode is TransportMode.STDIO:
        if not api_token:
            raise MissingCredential("Token required for stdio mode")
        if access_secret:
            logger.warning("MCP access token is not supported for stdio mode")
        return DirectTransport(api_token=api_token)

    if api_token:
        logger.warning(
            "sse, httpStream modes use Todoist API token from Authorization: Bearer TOKEN header"
        )
    return GatedTransport(
        mode=transport_mode,
        port=port,
        host=host,
        access_secret=access_secret or None,
    )
