"""CLI interface for dnc using Typer.

Usage:
    dnc init <task-id> -g GOAL -a ACCEPTANCE   # Create a root task
    dnc append <root> <parent> <child> ...     # Add a subtask
    dnc update <root> <task> --status done     # Update a task
    dnc show <root>                            # Print a tree
    dnc serve                                  # Run the HTTP API
    dnc mcp                                    # Run the MCP stdio server

The CLI is structured as:
- app: Main Typer application
- commands/: Command groups (`dnc task ...`, `dnc server ...`), also
  registered as top-level shortcuts
- common.py: Shared utilities for CLI commands
- main.py: Entry point that runs the app
"""

from typing import Optional

import typer

from dnc import __version__
from dnc.interfaces.cli.commands import server, task

app = typer.Typer(
    name="dnc",
    help="Divide-and-conquer task trees for AI agents",
    add_completion=False,
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"dnc version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-v",
        help="Show version and exit",
        callback=version_callback,
        is_eager=True,
    ),
) -> None:
    """dnc - break large goals into trees of small, verifiable tasks."""
    pass


# =============================================================================
# Register Command Groups
# =============================================================================

app.add_typer(task.app, name="task")
app.add_typer(server.app, name="server")


# =============================================================================
# Top-Level Shortcuts for Common Commands
# =============================================================================

app.command("init")(task.init)
app.command("append")(task.append)
app.command("update")(task.update)
app.command("remove")(task.remove)
app.command("show")(task.show)
app.command("list")(task.list_roots)
app.command("batch")(task.batch)

app.command("serve")(server.serve)
app.command("mcp")(server.mcp)
