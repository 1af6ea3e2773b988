"""Shared utilities for dnc CLI commands.

- Settings resolution and service construction
- Formatted output helpers (error, success, info, warning)
- Tree rendering for the terminal
"""

from pathlib import Path
from typing import Annotated, Optional

import typer

from dnc.application import BatchUpdateCoordinator, TaskTreeService
from dnc.config import Settings, load_settings
from dnc.domain.shared import DncError, Result, is_err
from dnc.domain.task import Task, TaskStatus
from dnc.infrastructure.storage import TaskTreeRepository
from dnc.logging_setup import configure_logging

# Reusable data directory option
# Usage: def my_command(data_dir: DataDirOption = None) -> None:
DataDirOption = Annotated[
    Optional[Path],
    typer.Option(
        "--data-dir",
        "-d",
        help="Directory holding task trees (or set DNC_DATA_DIR)",
    ),
]

_STATUS_MARKS = {
    TaskStatus.DONE: "[x]",
    TaskStatus.INIT: "[ ]",
}


def get_settings(data_dir: Path | None = None) -> Settings:
    """Load settings, applying a --data-dir override, and set up logging."""
    settings = load_settings()
    if data_dir is not None:
        settings = settings.model_copy(update={"data_dir": data_dir})
    configure_logging(settings.log_level)
    return settings


def get_repository(data_dir: Path | None = None) -> TaskTreeRepository:
    """Repository for the resolved data directory."""
    return TaskTreeRepository(get_settings(data_dir).data_dir)


def get_service(data_dir: Path | None = None) -> TaskTreeService:
    """Task tree service for the resolved data directory."""
    return TaskTreeService(get_repository(data_dir))


def get_coordinator(data_dir: Path | None = None) -> BatchUpdateCoordinator:
    """Batch coordinator for the resolved data directory."""
    return BatchUpdateCoordinator(get_repository(data_dir))


def exit_on_err(result: Result) -> object:
    """Return the Ok value, or print the error and exit with code 1."""
    if is_err(result):
        error = result.error
        print_error(str(error) if isinstance(error, DncError) else repr(error))
        raise typer.Exit(1)
    return result.value


def print_error(msg: str) -> None:
    """Print a formatted error message.

    Args:
        msg: Error message to display
    """
    typer.echo(typer.style(f"Error: {msg}", fg=typer.colors.RED), err=True)


def print_success(msg: str) -> None:
    """Print a formatted success message."""
    typer.echo(typer.style(msg, fg=typer.colors.GREEN))


def print_info(msg: str) -> None:
    """Print a formatted info message."""
    typer.echo(typer.style(msg, fg=typer.colors.BLUE))


def print_warning(msg: str) -> None:
    """Print a formatted warning message."""
    typer.echo(typer.style(f"Warning: {msg}", fg=typer.colors.YELLOW), err=True)


def format_tree(task: Task, indent: int = 0) -> list[str]:
    """Render a tree as indented lines, one node per line.

    Example:
        - proj-x [ ] Ship the release
          - step-1 [x] Write the changelog
    """
    mark = _STATUS_MARKS.get(task.status, f"[{task.status.value}]")
    lines = [f"{'  ' * indent}- {task.id} {mark} {task.goal}"]
    if task.additional_instructions:
        lines.append(f"{'  ' * (indent + 1)}> {task.additional_instructions}")
    for child in task.tasks:
        lines.extend(format_tree(child, indent + 1))
    return lines
