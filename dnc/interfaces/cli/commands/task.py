"""Task tree CLI commands.

Create trees, append subtasks, update and remove nodes, and inspect
trees from the terminal. Every command works on the data directory given
by --data-dir, DNC_DATA_DIR, or ./.dnc.
"""

import json
from pathlib import Path
from typing import Optional

import typer

from dnc.application import parse_batch
from dnc.domain.task import TaskChanges, parse_status
from dnc.interfaces.cli.common import (
    DataDirOption,
    exit_on_err,
    format_tree,
    get_coordinator,
    get_service,
    print_error,
    print_info,
    print_success,
    print_warning,
)

app = typer.Typer(help="Task tree commands")


@app.command("init")
def init(
    task_id: str = typer.Argument(..., help="Root task ID (kebab-case)"),
    goal: str = typer.Option(..., "--goal", "-g", help="What the task should achieve"),
    acceptance: str = typer.Option(..., "--acceptance", "-a", help="When it counts as done"),
    data_dir: DataDirOption = None,
) -> None:
    """Create a new root task."""
    task = exit_on_err(get_service(data_dir).init_root(task_id, goal, acceptance))
    print_success(f"Created root task '{task.id}' [{task.status.value}]")


@app.command("append")
def append(
    root_id: str = typer.Argument(..., help="Root task ID"),
    parent_id: str = typer.Argument(..., help="Parent task ID (may be the root)"),
    child_id: str = typer.Argument(..., help="New subtask ID"),
    goal: str = typer.Option(..., "--goal", "-g", help="What the subtask should achieve"),
    acceptance: str = typer.Option(..., "--acceptance", "-a", help="When it counts as done"),
    data_dir: DataDirOption = None,
) -> None:
    """Append a subtask under a parent."""
    child = exit_on_err(
        get_service(data_dir).append_child(root_id, parent_id, child_id, goal, acceptance)
    )
    print_success(f"Appended '{child.id}' under '{parent_id}'")


@app.command("update")
def update(
    root_id: str = typer.Argument(..., help="Root task ID"),
    task_id: str = typer.Argument(..., help="Task to update"),
    goal: Optional[str] = typer.Option(None, "--goal", "-g", help="New goal"),
    status: Optional[str] = typer.Option(None, "--status", "-s", help="New status"),
    acceptance: Optional[str] = typer.Option(None, "--acceptance", "-a", help="New acceptance"),
    instructions: Optional[str] = typer.Option(
        None, "--instructions", "-i", help="Additional instructions"
    ),
    data_dir: DataDirOption = None,
) -> None:
    """Update fields of a single task."""
    parsed_status = None
    if status is not None:
        parsed_status = exit_on_err(parse_status(status))

    changes = TaskChanges(
        goal=goal,
        status=parsed_status,
        acceptance=acceptance,
        additional_instructions=instructions,
    )
    outcome = exit_on_err(get_service(data_dir).update_task(root_id, task_id, changes))
    if outcome.advice and outcome.advice.warning:
        print_warning(outcome.advice.warning)
    print_success(f"Updated '{task_id}'")
    for line in changes.describe():
        typer.echo(f"  {line}")


@app.command("remove")
def remove(
    root_id: str = typer.Argument(..., help="Root task ID"),
    task_id: str = typer.Argument(..., help="Task to remove; the root removes the whole tree"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
    data_dir: DataDirOption = None,
) -> None:
    """Remove a task (and its subtasks)."""
    if not yes:
        what = f"the whole tree '{root_id}'" if task_id == root_id else f"'{task_id}'"
        typer.confirm(f"Remove {what}?", abort=True)

    exit_on_err(get_service(data_dir).remove_task(root_id, task_id))
    print_success(f"Removed '{task_id}'")


@app.command("show")
def show(
    root_id: str = typer.Argument(..., help="Root task ID"),
    as_json: bool = typer.Option(False, "--json", help="Print the raw document"),
    data_dir: DataDirOption = None,
) -> None:
    """Show a task tree."""
    service = get_service(data_dir)
    tree = exit_on_err(service.get_tree(root_id))

    if as_json:
        typer.echo(json.dumps(tree.to_document(), indent=2, ensure_ascii=False))
        return

    for line in format_tree(tree):
        typer.echo(line)

    summary = exit_on_err(service.summarize(root_id))
    counts = ", ".join(f"{name}: {count}" for name, count in summary.counts.items() if count)
    print_info(f"\n{summary.total} task(s), {summary.progress_percent}% done ({counts})")


@app.command("list")
def list_roots(data_dir: DataDirOption = None) -> None:
    """List root tasks."""
    root_ids = exit_on_err(get_service(data_dir).list_root_ids())
    if not root_ids:
        print_info("No root tasks found. Create one with: dnc init <task-id> -g ... -a ...")
        return
    for root_id in root_ids:
        typer.echo(root_id)


@app.command("batch")
def batch(
    file: Path = typer.Argument(..., exists=True, dir_okay=False, help="JSON file with updates"),
    data_dir: DataDirOption = None,
) -> None:
    """Apply a batch of updates from a JSON file.

    The file holds either a list of updates or {"updates": [...]}, each
    update being {"taskId", "rootTaskId", "status"?, "additionalInstructions"?}.
    """
    try:
        payload = json.loads(file.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        print_error(f"Invalid JSON in {file}: {e}")
        raise typer.Exit(1)

    if isinstance(payload, dict):
        payload = payload.get("updates")

    requests = exit_on_err(parse_batch(payload))
    response = exit_on_err(get_coordinator(data_dir).apply(requests))

    failed = 0
    for item in response.results:
        if item.success:
            print_success(f"{item.task_id}: ok")
        else:
            failed += 1
            print_error(f"{item.task_id}: {item.error}")
    if failed:
        raise typer.Exit(2)
