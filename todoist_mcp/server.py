import logging
from typing import Any

import click
import uvicorn
from dotenv import load_dotenv
from mcp.server.fastmcp.server import FastMCP
from starlette.requests import Request
from starlette.responses import JSONResponse

from .api_resolver import ApiResolver, create_direct_resolver, create_session_resolver
from .auth import create_auth_resolver
from .config import DirectTransport, GatedTransport, TransportMode, select_transport
from .constants import (
    DEFAULT_HOST,
    DEFAULT_MODE,
    DEFAULT_PORT,
    HTTP_STREAM_ENDPOINT,
    SSE_ENDPOINT,
    SSE_MESSAGE_ENDPOINT,
)
from .exceptions import InvalidConfiguration, MissingCredential
from .middleware import AuthMiddleware, create_logging_middleware
from .tools import register_tools

logger = logging.getLogger(__name__)

load_dotenv()

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def create_server(
    resolve_api: ApiResolver,
    host: str = DEFAULT_HOST,
    port: int = DEFAULT_PORT,
) -> FastMCP:
    """
    Create the Todoist MCP server with every tool registered.

    Args:
        resolve_api: Maps the calling session to a Todoist client
        host: Interface the HTTP transports bind to
        port: Port the HTTP transports listen on
    """
    app = FastMCP(
        name="todoist",
        instructions="Manage Todoist projects, sections, tasks, labels and comments",
        host=host,
        port=port,
        sse_path=SSE_ENDPOINT,
        message_path=SSE_MESSAGE_ENDPOINT,
        streamable_http_path=HTTP_STREAM_ENDPOINT,
    )

    @app.custom_route("/health", methods=["GET"])
    async def health_check(request: Request) -> JSONResponse:
        """Liveness check; reachable without credentials."""
        return JSONResponse({"status": "ok"})

    register_tools(app, resolve_api)
    return app


def create_http_app(config: GatedTransport, debug: bool = False) -> Any:
    """Build the ASGI app for a networked transport, gated by :class:`AuthMiddleware`."""
    mcp_server = create_server(create_session_resolver(), host=config.host, port=config.port)

    if config.mode is TransportMode.SSE:
        starlette_app = mcp_server.sse_app()
    else:
        starlette_app = mcp_server.streamable_http_app()

    app: Any = AuthMiddleware(starlette_app, create_auth_resolver(config.access_secret))
    if debug:
        app = create_logging_middleware(app)
    return app


def start_server(config: DirectTransport | GatedTransport, debug: bool = False) -> None:
    if isinstance(config, DirectTransport):
        mcp_server = create_server(create_direct_resolver(config.api_token))
        logger.info("Todoist MCP server running on stdio")
        mcp_server.run(transport="stdio")
        return

    app = create_http_app(config, debug)

    logger.info("=" * 60)
    logger.info(f"Todoist MCP server ({config.mode.value}) on http://{config.host}:{config.port}")
    logger.info(f"Endpoint: {config.endpoint}")
    logger.info(f"Access gate: {'enabled' if config.access_secret else 'disabled'}")
    logger.info("=" * 60)

    uvicorn.run(
        app,
        host=config.host,
        port=config.port,
        log_level="debug" if debug else "info",
        access_log=debug,
    )
    logger.info("Server stopped")


def configure_logging(debug: bool) -> None:
    """Send all logs to stderr with timestamps; stdout belongs to the stdio transport."""
    level = logging.DEBUG if debug else logging.INFO
    logging.basicConfig(level=level, format=LOG_FORMAT)

    # Also configure uvicorn loggers to use the same format
    for logger_name in ["uvicorn", "uvicorn.error", "uvicorn.access"]:
        uv_logger = logging.getLogger(logger_name)
        uv_logger.handlers = []
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        uv_logger.addHandler(handler)


@click.command()
@click.option(
    "-m",
    "--mode",
    type=click.Choice([mode.value for mode in TransportMode]),
    default=DEFAULT_MODE,
    show_default=True,
    help="Transport mode",
)
@click.option(
    "-t",
    "--todoist-token",
    envvar="TODOIST_API_TOKEN",
    help="stdio: Todoist API token",
)
@click.option(
    "-a",
    "--mcp-access-token",
    envvar="MCP_ACCESS_TOKEN",
    help="sse, httpStream: Token for MCP server access validation",
)
@click.option(
    "-p",
    "--port",
    type=int,
    default=DEFAULT_PORT,
    envvar="MCP_PORT",
    show_default=True,
    help="sse, httpStream: server port",
)
@click.option(
    "--host",
    default=DEFAULT_HOST,
    envvar="MCP_HOST",
    show_default=True,
    help="sse, httpStream: interface to bind",
)
@click.option("--debug", is_flag=True, help="Verbose logging, including request details")
def main(
    mode: str,
    todoist_token: str | None,
    mcp_access_token: str | None,
    port: int,
    host: str,
    debug: bool = False,
) -> None:
    """Run the Todoist MCP server."""
    configure_logging(debug)

    try:
        config = select_transport(
            mode,
            port=port,
            host=host,
            api_token=todoist_token,
            access_secret=mcp_access_token,
        )
    except (InvalidConfiguration, MissingCredential) as e:
        logger.error(f"Configuration error: {e}")
        raise SystemExit(1) from e

    try:
        start_server(config, debug)
    except Exception as e:
        logger.error(f"Server error: {e}")
        logger.exception("Exception details:")
        raise SystemExit(1) from e


if __name__ == "__main__":
    main()
