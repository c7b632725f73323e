"""
Commerce Handlers for MCP Server
Handles retail order and product inventory lookups
"""

from typing import Any, Dict

from ..models.tools import ToolDefinition
from .validators import as_positive_integer, is_non_empty_string, is_positive_integer


def is_valid_order_details_args(arguments: Any) -> bool:
    """Check get_single_order_details arguments"""
    return isinstance(arguments, dict) and is_non_empty_string(arguments.get("order_number"))


def build_order_details_payload(arguments: Dict[str, Any]) -> Dict[str, Any]:
    """Build the get_single_order_details request body"""
    return {"params": {"order_number": arguments["order_number"]}}


def is_valid_inventory_details_args(arguments: Any) -> bool:
    """Check get_single_product_inventory_details arguments"""
    return isinstance(arguments, dict) and is_positive_integer(arguments.get("sku_id"))


def build_inventory_details_payload(arguments: Dict[str, Any]) -> Dict[str, Any]:
    """Build the get_single_product_inventory_details request body"""
    return {"params": {"sku_id": as_positive_integer(arguments["sku_id"])}}


SINGLE_ORDER_DETAILS = ToolDefinition(
    name="get_single_order_details",
    description="Retrieve detailed information for a single retail order",
    input_schema={
        "type": "object",
        "properties": {
            "order_number": {
                "type": "string",
                "description": "Alphanumeric order number (can contain special characters)",
                "minLength": 1,
            },
        },
        "required": ["order_number"],
    },
    endpoint="/mcp/v1/open_ai_tools/single_order_details",
    validate=is_valid_order_details_args,
    build_payload=build_order_details_payload,
    invalid_params_message="Invalid arguments: order_number must be a non-empty string",
    action="retrieving order details",
)

SINGLE_PRODUCT_INVENTORY_DETAILS = ToolDefinition(
    name="get_single_product_inventory_details",
    description="Retrieve inventory details for a single product",
    input_schema={
        "type": "object",
        "properties": {
            "sku_id": {
                "type": "number",
                "description": "Numeric SKU identifier for the product",
                "pattern": "^[0-9]+$",
                "minLength": 1,
            },
        },
        "required": ["sku_id"],
    },
    endpoint="/mcp/v1/open_ai_tools/single_product_inventory_details",
    validate=is_valid_inventory_details_args,
    build_payload=build_inventory_details_payload,
    invalid_params_message="Invalid arguments: sku_id must be a positive integer",
    action="retrieving inventory details",
)
