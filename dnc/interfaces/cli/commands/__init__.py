"""CLI command groups."""

from dnc.interfaces.cli.commands import server, task

__all__ = ["server", "task"]
