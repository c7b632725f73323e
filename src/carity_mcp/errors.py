"""
Error types for the Carity MCP Server

Only tool-call faults (unknown tool, invalid arguments) reach the MCP client
as JSON-RPC errors. Upstream failures are reported inside a normal
CallToolResult with isError set.
"""

from typing import Optional

from mcp.shared.exceptions import McpError
from mcp.types import ErrorData, INVALID_PARAMS, METHOD_NOT_FOUND


class ConfigurationError(ValueError):
    """Raised at startup when required configuration is missing or invalid"""


class ToolCallFault(McpError):
    """A malformed tool call, reported to the caller as a protocol error"""

    code: int = 0

    def __init__(self, message: str):
        super().__init__(ErrorData(code=self.code, message=message))
        self.message = message


class UnknownToolError(ToolCallFault):
    code = METHOD_NOT_FOUND

    def __init__(self, name: str):
        super().__init__(f"Unknown tool: {name}")
        self.name = name


class InvalidParamsError(ToolCallFault):
    code = INVALID_PARAMS


class UpstreamError(Exception):
    """Failed request to the Carity API.

    ``status_code`` is the HTTP status when the API answered, or None when no
    response was received (timeout, connection failure).
    """

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code

    @property
    def status(self) -> str:
        return str(self.status_code) if self.status_code is not None else "N/A"
