"""
Vehicle Handlers for MCP Server
Handles year/make/model/trim lookups of vehicle configuration data
"""

from typing import Any, Dict

from ..models.tools import ToolDefinition
from .validators import as_positive_integer, is_non_empty_string, is_optional_string, is_positive_integer


def is_valid_ymmt_cjson_args(arguments: Any) -> bool:
    """Check ymmt_cjson arguments"""
    return (
        isinstance(arguments, dict)
        and is_positive_integer(arguments.get("year"))
        and is_non_empty_string(arguments.get("make"))
        and is_non_empty_string(arguments.get("model"))
        and is_optional_string(arguments, "trim_variant")
    )


def build_ymmt_cjson_payload(arguments: Dict[str, Any]) -> Dict[str, Any]:
    """Build the ymmt_cjson request body"""
    payload = {
        "year": as_positive_integer(arguments["year"]),
        "make": arguments["make"],
        "model": arguments["model"],
    }
    # An absent trim_variant is left out entirely; an explicit null is sent
    if "trim_variant" in arguments:
        payload["trim_variant"] = arguments["trim_variant"]
    return payload


YMMT_CJSON = ToolDefinition(
    name="ymmt_cjson",
    description=(
        "This tool is used to retrieve information about a specific vehicle, such as standard "
        "equipment, options, specifications and other information specific to a vehicle"
    ),
    input_schema={
        "type": "object",
        "properties": {
            "year": {
                "type": "number",
                "description": "The year the vehicle was manufactured",
            },
            "make": {
                "type": "string",
                "description": "The manufacturer of the vehicle",
            },
            "model": {
                "type": "string",
                "description": "The model of the vehicle",
            },
            "trim_variant": {
                "type": ["string", "null"],
                "description": "The trim variant of the vehicle (optional)",
            },
        },
        "required": ["year", "make", "model", "trim_variant"],
        "additionalProperties": False,
    },
    endpoint="/mcp/v1/ymmt_cjsons/ymmt_cjson",
    validate=is_valid_ymmt_cjson_args,
    build_payload=build_ymmt_cjson_payload,
    invalid_params_message=(
        "Invalid arguments: year must be a positive integer, make and model must be non-empty "
        "strings, and trim_variant must be a string or null"
    ),
    action="retrieving vehicle information",
)
