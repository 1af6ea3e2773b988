"""Server commands: HTTP API and MCP stdio server."""

import asyncio
from typing import Optional

import typer
import uvicorn

from dnc.interfaces.cli.common import DataDirOption, get_settings, print_info

app = typer.Typer(help="Server commands")


@app.command("serve")
def serve(
    host: Optional[str] = typer.Option(None, "--host", help="Bind address (or DNC_HOST)"),
    port: Optional[int] = typer.Option(None, "--port", "-p", help="Port (or DNC_PORT)"),
    data_dir: DataDirOption = None,
) -> None:
    """Run the HTTP API."""
    from dnc.interfaces.api import create_app

    settings = get_settings(data_dir)
    updates = {}
    if host:
        updates["host"] = host
    if port:
        updates["port"] = port
    settings = settings.model_copy(update=updates)

    print_info(f"Serving {settings.data_dir} on http://{settings.host}:{settings.port}")
    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


@app.command("mcp")
def mcp(data_dir: DataDirOption = None) -> None:
    """Run the MCP server on stdio."""
    from dnc.interfaces.mcp import run

    asyncio.run(run(get_settings(data_dir)))
