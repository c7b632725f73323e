"""
Knowledge Model Handlers for MCP Server
Handles chunk retrieval from Carity knowledge models
"""

from typing import Any, Dict

from ..models.tools import ToolDefinition
from .validators import as_positive_integer, is_non_empty_string, is_positive_integer

# Two deployments of the API expose the chunk retrieval under different paths
RETRIEVE_CHUNKS_ENDPOINTS = {
    "retrieve_chunks": "/mcp/v1/knowledge_models/retrieve_chunks",
    "mcp_retrieve_chunks": "/mcp/v1/knowledge_models/mcp_retrieve_chunks",
}

RETRIEVE_CHUNKS_SCHEMA = {
    "type": "object",
    "properties": {
        "query": {
            "type": "string",
            "description": "The search query to retrieve relevant chunks",
            "minLength": 1,
        },
        "id": {
            "type": "number",
            "description": "The ID of the knowledge model to query",
            "minimum": 1,
        },
    },
    "required": ["query", "id"],
}


def is_valid_retrieve_chunks_args(arguments: Any) -> bool:
    """Check retrieve_chunks arguments"""
    return (
        isinstance(arguments, dict)
        and is_non_empty_string(arguments.get("query"))
        and is_positive_integer(arguments.get("id"))
    )


def build_retrieve_chunks_payload(arguments: Dict[str, Any]) -> Dict[str, Any]:
    """Build the retrieve_chunks request body"""
    return {"id": as_positive_integer(arguments["id"]), "query": arguments["query"]}


def retrieve_chunks_tool(variant: str = "retrieve_chunks") -> ToolDefinition:
    """Build the retrieve_chunks definition for the given endpoint variant"""
    return ToolDefinition(
        name="retrieve_chunks",
        description="Retrieve relevant chunks from Carity API based on a search query",
        input_schema=RETRIEVE_CHUNKS_SCHEMA,
        endpoint=RETRIEVE_CHUNKS_ENDPOINTS[variant],
        validate=is_valid_retrieve_chunks_args,
        build_payload=build_retrieve_chunks_payload,
        invalid_params_message=(
            "Invalid arguments: query must be a non-empty string and id must be a positive number"
        ),
        action="retrieving chunks",
    )
