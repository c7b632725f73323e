"""
Tool definition record used by the registry
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict

from mcp.types import Tool


@dataclass(frozen=True)
class ToolDefinition:
    """One MCP tool: its advertised schema together with how it is executed.

    ``validate`` must accept exactly what ``input_schema`` describes;
    ``build_payload`` is only called on validated arguments.
    """

    name: str
    description: str
    input_schema: Dict[str, Any]
    endpoint: str
    validate: Callable[[Any], bool]
    build_payload: Callable[[Dict[str, Any]], Dict[str, Any]]
    invalid_params_message: str
    action: str

    def as_tool(self) -> Tool:
        return Tool(name=self.name, description=self.description, inputSchema=self.input_schema)
