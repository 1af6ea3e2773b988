"""MCP server exposing the task tree tools over stdio.

Usage in an MCP client config:

    {
      "mcpServers": {
        "dnc": {
          "command": "dnc",
          "args": ["mcp"],
          "env": {"DNC_DATA_DIR": "/path/to/project/.dnc"}
        }
      }
    }

Logs go to stderr; stdout belongs to the protocol.
"""

import logging

from mcp.server import Server
from mcp.server.stdio import stdio_server
from mcp.types import TextContent

from dnc import __version__
from dnc.application import BatchUpdateCoordinator, HistoryRecorder, TaskTreeService
from dnc.config import Settings, load_settings
from dnc.infrastructure.storage import TaskTreeRepository
from dnc.interfaces.mcp.tools import TOOLS, DncToolHandler

logger = logging.getLogger(__name__)


class ToolError(Exception):
    """Raised from the call handler so the SDK flags the result as an error."""


def build_handler(settings: Settings, history: HistoryRecorder | None = None) -> DncToolHandler:
    """Wire the services used by the MCP tools."""
    repository = TaskTreeRepository(settings.data_dir)
    repository.ensure_ready()
    history = history or HistoryRecorder()
    return DncToolHandler(
        TaskTreeService(repository, history),
        BatchUpdateCoordinator(repository, history),
        history,
    )


def create_server(handler: DncToolHandler) -> Server:
    """Create the MCP server with tool listing and dispatch registered."""
    server = Server("dnc", version=__version__)

    @server.list_tools()
    async def list_tools():
        """List available tools."""
        return TOOLS

    @server.call_tool()
    async def call_tool(name: str, arguments: dict):
        """Handle tool calls."""
        response = handler.call(name, arguments)
        if response.is_error:
            raise ToolError(response.text)
        return [TextContent(type="text", text=response.text)]

    return server


async def run(settings: Settings | None = None) -> None:
    """Run the MCP server on stdio until the client disconnects."""
    settings = settings or load_settings()
    server = create_server(build_handler(settings))
    logger.info(f"dnc MCP server starting (data dir: {settings.data_dir})")

    async with stdio_server() as (read_stream, write_stream):
        await server.run(read_stream, write_stream, server.create_initialization_options())
