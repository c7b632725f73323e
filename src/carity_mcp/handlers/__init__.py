"""
MCP Server Handlers Package
Contains the tool definitions organized by functionality
"""

from .knowledge_handlers import *
from .commerce_handlers import *
from .vehicle_handlers import *

__all__ = [
    "RETRIEVE_CHUNKS_ENDPOINTS",
    "retrieve_chunks_tool",
    "SINGLE_ORDER_DETAILS",
    "SINGLE_PRODUCT_INVENTORY_DETAILS",
    "YMMT_CJSON",
]
