"""Exception hierarchy for the Todoist MCP server."""


class TodoistMCPError(Exception):
    """Base class for all errors raised by this package."""


class Unauthorized(TodoistMCPError):
    """Request rejected during authentication.

    Carries an HTTP-style status so the transport layer can answer the
    caller without reaching the tool handlers.
    """

    status_code = 401
    default_status_text = "Unauthorized"

    def __init__(self, status_text: str | None = None) -> None:
        self.status_text = status_text or self.default_status_text
        super().__init__(self.status_text)


class InvalidAccessSecret(Unauthorized):
    default_status_text = "Unauthorized - Invalid MCP token"


class MissingCredential(Unauthorized):
    default_status_text = "Unauthorized - Missing Todoist API token"


class InvalidConfiguration(TodoistMCPError):
    """Startup configuration that the server cannot run with."""

