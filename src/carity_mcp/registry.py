"""
Tool Registry for the Carity MCP Server
Holds the immutable catalogue of tools served by this process
"""

import logging
from typing import Dict, Iterable, List, Optional, Tuple

from mcp.types import Tool

from .errors import ConfigurationError
from .handlers import (
    RETRIEVE_CHUNKS_ENDPOINTS, retrieve_chunks_tool,
    SINGLE_ORDER_DETAILS, SINGLE_PRODUCT_INVENTORY_DETAILS, YMMT_CJSON
)
from .models import ToolDefinition

logger = logging.getLogger(__name__)

TOOL_NAMES = (
    "retrieve_chunks",
    "get_single_order_details",
    "get_single_product_inventory_details",
    "ymmt_cjson",
)


def all_tools(retrieve_chunks_variant: str = "retrieve_chunks") -> List[ToolDefinition]:
    """Every tool this server knows about, in advertised order"""
    if retrieve_chunks_variant not in RETRIEVE_CHUNKS_ENDPOINTS:
        raise ConfigurationError(
            f"Unknown retrieve_chunks variant {retrieve_chunks_variant!r}; "
            f"expected one of {sorted(RETRIEVE_CHUNKS_ENDPOINTS)}"
        )
    return [
        retrieve_chunks_tool(retrieve_chunks_variant),
        SINGLE_ORDER_DETAILS,
        SINGLE_PRODUCT_INVENTORY_DETAILS,
        YMMT_CJSON,
    ]


class ToolRegistry:
    """Read-only lookup of tool definitions by name"""

    def __init__(self, definitions: Iterable[ToolDefinition]):
        self._definitions: Dict[str, ToolDefinition] = {}
        for definition in definitions:
            if definition.name in self._definitions:
                raise ConfigurationError(f"Duplicate tool name: {definition.name}")
            self._definitions[definition.name] = definition
        # Descriptions never change after startup, so build them once
        self._tools: Tuple[Tool, ...] = tuple(d.as_tool() for d in self._definitions.values())

    @classmethod
    def build(
        cls,
        enabled_tools: Optional[Iterable[str]] = None,
        retrieve_chunks_variant: str = "retrieve_chunks",
    ) -> "ToolRegistry":
        """Build the registry for the configured tool subset and endpoint variant"""
        definitions = all_tools(retrieve_chunks_variant)
        if enabled_tools is not None:
            enabled = list(enabled_tools)
            unknown = sorted(set(enabled) - set(TOOL_NAMES))
            if unknown:
                raise ConfigurationError(f"Unknown tools in CARITY_ENABLED_TOOLS: {', '.join(unknown)}")
            definitions = [d for d in definitions if d.name in enabled]

        registry = cls(definitions)
        logger.info(f"Registered tools: {', '.join(registry.names())}")
        return registry

    def get(self, name: str) -> Optional[ToolDefinition]:
        return self._definitions.get(name)

    def names(self) -> List[str]:
        return list(self._definitions)

    def list_tools(self) -> List[Tool]:
        return list(self._tools)

    def __contains__(self, name: str) -> bool:
        return name in self._definitions

    def __len__(self) -> int:
        return len(self._definitions)
