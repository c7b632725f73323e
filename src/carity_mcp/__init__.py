"""
Carity MCP Server
Exposes the Carity API as MCP tools
"""

__version__ = "1.0.0"
