"""MCP interface for dnc."""

from dnc.interfaces.mcp.server import build_handler, create_server, run
from dnc.interfaces.mcp.tools import TOOLS, DncToolHandler, ToolResponse

__all__ = ["TOOLS", "DncToolHandler", "ToolResponse", "build_handler", "create_server", "run"]
