"""
MCP Server module for CodeIndex.

This module provides the Model Context Protocol server implementation
for structural symbol search, outlines and maps.

Exports:
    - mcp: FastMCP server instance
    - main: Entry point for running the MCP server
    - get_state: Get MCP session state
    - reset_state: Reset MCP session state (for testing)
    - MCPSessionState: Session state dataclass
"""

from codeindex_mcp.mcp.server import mcp, main
from codeindex_mcp.mcp.state import get_state, reset_state, MCPSessionState

__all__ = [
    "mcp",
    "main",
    "get_state",
    "reset_state",
    "MCPSessionState",
]
