"""
MCP Server Models Package
Contains request/response models and the tool definition record
"""

from .requests import *
from .responses import *
from .tools import *

__all__ = [
    "ToolCallRequest",
    "ToolCallResponse",
    "ToolListResponse",
    "FaultDetail",
    "ToolDefinition",
]
