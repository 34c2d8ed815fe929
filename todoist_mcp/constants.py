from typing import Literal

DEFAULT_PORT = 3000
DEFAULT_HOST = "0.0.0.0"  # noqa: S104
DEFAULT_MODE = "stdio"

SSE_ENDPOINT = "/sse"
SSE_MESSAGE_ENDPOINT = "/messages/"
HTTP_STREAM_ENDPOINT = "/mcp"

MCP_TOKEN_HEADER = "X-Mcp-Token"
CREDENTIAL_HEADER = "Authorization"

# Paths reachable without passing the access gate
PUBLIC_PATHS = frozenset({"/health"})

TodoistColor = Literal[
    "berry_red",
    "red",
    "orange",
    "yellow",
    "olive_green",
    "lime_green",
    "green",
    "mint_green",
    "teal",
    "sky_blue",
    "light_blue",
    "blue",
    "grape",
    "violet",
    "lavender",
    "magenta",
    "salmon",
    "charcoal",
    "grey",
    "taupe",
]

ViewStyle = Literal["list", "board"]
