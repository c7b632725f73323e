"""
Tool Dispatcher for the Carity MCP Server

Runs one tool call end to end: resolve, validate, forward to the Carity API
and wrap the outcome in a CallToolResult. Unknown tools and invalid
arguments raise; every upstream failure is returned as an error result.
"""

import json
import logging
from typing import Any, Dict, List, Optional

from mcp.types import CallToolResult, TextContent, Tool

from .config import CarityApiClient
from .errors import InvalidParamsError, UnknownToolError, UpstreamError
from .registry import ToolRegistry

logger = logging.getLogger(__name__)


def _text_result(text: str, is_error: bool = False) -> CallToolResult:
    return CallToolResult(content=[TextContent(type="text", text=text)], isError=is_error)


class ToolDispatcher:
    """Dispatches MCP tool calls to the Carity API"""

    def __init__(self, registry: ToolRegistry, client: CarityApiClient):
        self.registry = registry
        self.client = client

    def list_tools(self) -> List[Tool]:
        """List all available MCP tools"""
        return self.registry.list_tools()

    async def call_tool(
        self,
        name: str,
        arguments: Optional[Dict[str, Any]] = None,
        trace_id: Optional[str] = None,
    ) -> CallToolResult:
        """Execute a tool call.

        Raises UnknownToolError or InvalidParamsError for malformed calls.
        """
        prefix = f"[TRACE:{trace_id}] " if trace_id else ""
        arguments = {} if arguments is None else arguments

        definition = self.registry.get(name)
        if definition is None:
            logger.warning(f"{prefix}Rejected call to unknown tool: {name}")
            raise UnknownToolError(name)

        if not definition.validate(arguments):
            logger.warning(f"{prefix}Rejected invalid arguments for {name}: {arguments}")
            raise InvalidParamsError(definition.invalid_params_message)

        logger.info(f"{prefix}Executing tool: {name} with arguments: {arguments}")
        payload = definition.build_payload(arguments)

        try:
            data = await self.client.post(definition.endpoint, payload)
        except UpstreamError as e:
            logger.warning(f"{prefix}Carity API error for {name}: {e.message} (Status: {e.status})")
            return _text_result(
                f"Error {definition.action} from Carity API: {e.message} (Status: {e.status})",
                is_error=True,
            )
        except Exception as e:
            logger.exception(f"{prefix}Unexpected error executing tool {name}")
            return _text_result(f"Unexpected error: {str(e) or type(e).__name__}", is_error=True)

        return _text_result(json.dumps(data, indent=2, ensure_ascii=False))
