"""Per-request authentication for the networked transports.

A request passes two checks before any tool can reach Todoist:

1. The access gate. When the operator configured an MCP access token, the
   request must present the same value in the access header.
2. The credential extractor. The caller's own Todoist API token is read
   from the credential header (``Authorization: Bearer <token>`` by default)
   and wrapped in a :class:`Session`.
"""

import hmac
import logging
import re
from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass, field

from .constants import CREDENTIAL_HEADER, MCP_TOKEN_HEADER
from .exceptions import InvalidAccessSecret, MissingCredential

logger = logging.getLogger(__name__)

HeaderValue = str | Sequence[str]
Headers = Mapping[str, HeaderValue]
AuthResolver = Callable[[Headers], "Session"]

_BEARER_PREFIX = re.compile(r"^\s*bearer(?:\s+|$)", re.IGNORECASE)


@dataclass(frozen=True)
class Session:
    """Authenticated context for one connection or request."""

    api_token: str = field(repr=False)

    def __post_init__(self) -> None:
        if not isinstance(self.api_token, str) or not self.api_token:
            raise ValueError("Session requires a non-empty api_token")


def get_header(headers: Headers, name: str) -> str | None:
    """Look up a header case-insensitively.

    Transports that keep repeated headers hand them over as a sequence; the
    first value wins.
    """
    wanted = name.lower()
    for key, value in headers.items():
        if key.lower() != wanted:
            continue
        if isinstance(value, str):
            return value
        return value[0] if value else None
    return None


def headers_from_scope(raw_headers: Iterable[tuple[bytes, bytes]]) -> dict[str, list[str]]:
    """Group raw ASGI header pairs by lowercased name, keeping arrival order."""
    headers: dict[str, list[str]] = {}
    for key, value in raw_headers:
        name = key.decode("latin-1").lower()
        headers.setdefault(name, []).append(value.decode("latin-1"))
    return headers


def extract_bearer_token(value: str | None) -> str | None:
    """Strip an optional ``Bearer`` scheme and return what is left, if anything."""
    if value is None:
        return None
    token = _BEARER_PREFIX.sub("", value, count=1).strip()
    return token or None


def check_access_secret(headers: Headers, access_secret: str | None, header: str) -> None:
    """Raise :class:`InvalidAccessSecret` unless the request carries the secret.

    A missing ``access_secret`` disables the gate.
    """
    if not access_secret:
        return
    presented = get_header(headers, header)
    if presented is None or not hmac.compare_digest(
        presented.encode("utf-8"), access_secret.encode("utf-8")
    ):
        raise InvalidAccessSecret()


def extract_session(headers: Headers, header: str = CREDENTIAL_HEADER) -> Session:
    api_token = extract_bearer_token(get_header(headers, header))
    if not api_token:
        raise MissingCredential()
    return Session(api_token=api_token)


def create_auth_resolver(
    access_secret: str | None = None,
    *,
    access_header: str = MCP_TOKEN_HEADER,
    credential_header: str = CREDENTIAL_HEADER,
) -> AuthResolver:
    """Build the authenticate hook used by the networked transports.

    Args:
        access_secret: Shared MCP access token; ``None`` disables the gate
        access_header: Header carrying the MCP access token
        credential_header: Header carrying the caller's Todoist API token

    Returns:
        Callable that turns a header mapping into a :class:`Session` or raises
        :class:`~todoist_mcp.exceptions.Unauthorized`
    """
    if access_secret:
        logger.info(f"Access gate enabled on header {access_header}")
    else:
        logger.info("No MCP access token configured, access gate disabled")

    def authenticate(headers: Headers) -> Session:
        check_access_secret(headers, access_secret, access_header)
        return extract_session(headers, credential_header)

    return authenticate
