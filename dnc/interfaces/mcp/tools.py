"""MCP tool definitions and handlers.

``TOOLS`` is the list advertised to clients. ``DncToolHandler`` does the
argument checking and text formatting around the application services
and is free of any MCP transport code, so it can be exercised directly.
"""

import json
import logging
from dataclasses import dataclass
from typing import Any

from mcp.types import Tool

from dnc.application import (
    BatchUpdateCoordinator,
    HistoryRecorder,
    TaskTreeService,
    parse_batch,
)
from dnc.domain.shared import Err, is_err
from dnc.domain.task import ASSIGNABLE_STATUSES, TaskChanges, parse_status

logger = logging.getLogger(__name__)

_STATUS_VALUES = [status.value for status in ASSIGNABLE_STATUSES]
_ID_HINT = "kebab-case, lowercase letters/digits/hyphens, at most 10 words"


TOOLS: list[Tool] = [
    Tool(
        name="dnc_init_task",
        description="Create a root task for a divide-and-conquer workflow. The root starts with status 'init' and no subtasks.",
        inputSchema={
            "type": "object",
            "properties": {
                "task_id": {"type": "string", "description": f"Root task ID ({_ID_HINT})"},
                "goal": {"type": "string", "description": "What the task should achieve"},
                "acceptance": {"type": "string", "description": "When the task counts as done"},
            },
            "required": ["task_id", "goal", "acceptance"],
        },
    ),
    Tool(
        name="dnc_append_divided_task",
        description="Append a subtask under a parent task inside a root task tree.",
        inputSchema={
            "type": "object",
            "properties": {
                "root_task_id": {"type": "string", "description": "Root task ID"},
                "parent_task_id": {"type": "string", "description": "Parent task ID (may be the root)"},
                "child_task_id": {"type": "string", "description": f"New subtask ID ({_ID_HINT})"},
                "goal": {"type": "string", "description": "What the subtask should achieve"},
                "acceptance": {"type": "string", "description": "When the subtask counts as done"},
            },
            "required": ["root_task_id", "parent_task_id", "child_task_id", "goal", "acceptance"],
        },
    ),
    Tool(
        name="dnc_update_task",
        description="Update goal, status, acceptance or additional instructions of one task. Omitted fields are left unchanged.",
        inputSchema={
            "type": "object",
            "properties": {
                "root_task_id": {"type": "string", "description": "Root task ID"},
                "task_id": {"type": "string", "description": "Task to update (may be the root)"},
                "goal": {"type": "string", "description": "New goal"},
                "status": {"type": "string", "enum": _STATUS_VALUES, "description": "New status"},
                "acceptance": {"type": "string", "description": "New acceptance criteria"},
                "additional_instructions": {"type": "string", "description": "Free-text instructions"},
            },
            "required": ["root_task_id", "task_id"],
        },
    ),
    Tool(
        name="dnc_delete_task",
        description="Delete a task. Deleting the root task removes the whole tree; otherwise the subtask and its children are removed.",
        inputSchema={
            "type": "object",
            "properties": {
                "root_task_id": {"type": "string", "description": "Root task ID"},
                "task_id": {"type": "string", "description": "Task to delete"},
            },
            "required": ["root_task_id", "task_id"],
        },
    ),
    Tool(
        name="dnc_get_task_relations",
        description="Show the full tree structure of a root task as JSON.",
        inputSchema={
            "type": "object",
            "properties": {
                "root_task_id": {"type": "string", "description": "Root task ID"},
            },
            "required": ["root_task_id"],
        },
    ),
    Tool(
        name="dnc_list_root_tasks",
        description="List all root tasks.",
        inputSchema={"type": "object", "properties": {}},
    ),
    Tool(
        name="dnc_batch_update_tasks",
        description="Update status and/or additional instructions of many tasks in one call. Each root tree is loaded and saved once.",
        inputSchema={
            "type": "object",
            "properties": {
                "updates": {
                    "type": "array",
                    "items": {
                        "type": "object",
                        "properties": {
                            "taskId": {"type": "string"},
                            "rootTaskId": {"type": "string"},
                            "status": {"type": "string", "enum": _STATUS_VALUES},
                            "additionalInstructions": {"type": "string"},
                        },
                        "required": ["taskId", "rootTaskId"],
                    },
                },
            },
            "required": ["updates"],
        },
    ),
]


@dataclass
class ToolResponse:
    """Text returned to the MCP client."""

    text: str
    is_error: bool = False


def _error(message: str) -> ToolResponse:
    return ToolResponse(text=f"Error: {message}", is_error=True)


def _missing(arguments: dict[str, Any], *names: str) -> str | None:
    for name in names:
        value = arguments.get(name)
        if not isinstance(value, str) or not value.strip():
            return f"{name} is required."
    return None


class DncToolHandler:
    """Dispatch MCP tool calls to the application services."""

    def __init__(
        self,
        service: TaskTreeService,
        coordinator: BatchUpdateCoordinator,
        history: HistoryRecorder | None = None,
    ) -> None:
        self.service = service
        self.coordinator = coordinator
        self.history = history
        self._handlers = {
            "dnc_init_task": self.init_task,
            "dnc_append_divided_task": self.append_divided_task,
            "dnc_update_task": self.update_task,
            "dnc_delete_task": self.delete_task,
            "dnc_get_task_relations": self.get_task_relations,
            "dnc_list_root_tasks": self.list_root_tasks,
            "dnc_batch_update_tasks": self.batch_update_tasks,
        }

    def call(self, name: str, arguments: dict[str, Any] | None) -> ToolResponse:
        """Run one tool and record it in the history."""
        handler = self._handlers.get(name)
        if handler is None:
            return _error(f"Unknown tool: {name}")

        arguments = arguments or {}
        response = handler(arguments)
        if response.is_error:
            logger.warning(f"{name} failed: {response.text}")
        if self.history is not None:
            self.history.record(name, arguments, {"text": response.text, "isError": response.is_error})
        return response

    def init_task(self, arguments: dict[str, Any]) -> ToolResponse:
        problem = _missing(arguments, "task_id", "goal", "acceptance")
        if problem:
            return _error(problem)

        result = self.service.init_root(
            arguments["task_id"], arguments["goal"], arguments["acceptance"]
        )
        if isinstance(result, Err):
            return _error(str(result.error))

        task = result.value
        return ToolResponse(
            text=(
                "Root task created.\n\n"
                f"Task ID: {task.id}\n"
                f"Goal: {task.goal}\n"
                f"Acceptance: {task.acceptance}\n"
                f"Status: {task.status.value}"
            )
        )

    def append_divided_task(self, arguments: dict[str, Any]) -> ToolResponse:
        problem = _missing(
            arguments, "root_task_id", "parent_task_id", "child_task_id", "goal", "acceptance"
        )
        if problem:
            return _error(problem)

        result = self.service.append_child(
            arguments["root_task_id"],
            arguments["parent_task_id"],
            arguments["child_task_id"],
            arguments["goal"],
            arguments["acceptance"],
        )
        if isinstance(result, Err):
            return _error(str(result.error))

        child = result.value
        return ToolResponse(
            text=(
                "Subtask appended.\n\n"
                f"Task ID: {child.id}\n"
                f"Parent: {arguments['parent_task_id']}\n"
                f"Root: {arguments['root_task_id']}\n"
                f"Goal: {child.goal}\n"
                f"Acceptance: {child.acceptance}"
            )
        )

    def update_task(self, arguments: dict[str, Any]) -> ToolResponse:
        problem = _missing(arguments, "root_task_id", "task_id")
        if problem:
            return _error(problem)

        status = None
        if arguments.get("status") is not None:
            parsed = parse_status(arguments["status"])
            if isinstance(parsed, Err):
                return _error(str(parsed.error))
            status = parsed.value

        changes = TaskChanges(
            goal=arguments.get("goal"),
            status=status,
            acceptance=arguments.get("acceptance"),
            additional_instructions=arguments.get("additional_instructions"),
        )
        result = self.service.update_task(arguments["root_task_id"], arguments["task_id"], changes)
        if isinstance(result, Err):
            return _error(str(result.error))

        outcome = result.value
        lines = [f"Task \"{outcome.task.id}\" updated.", ""] + changes.describe()
        if outcome.advice and outcome.advice.warning:
            lines += ["", f"Warning: {outcome.advice.warning}"]
        return ToolResponse(text="\n".join(lines))

    def delete_task(self, arguments: dict[str, Any]) -> ToolResponse:
        problem = _missing(arguments, "root_task_id", "task_id")
        if problem:
            return _error(problem)

        root_id, task_id = arguments["root_task_id"], arguments["task_id"]
        result = self.service.remove_task(root_id, task_id)
        if isinstance(result, Err):
            return _error(str(result.error))

        if task_id == root_id:
            return ToolResponse(text=f"Root task \"{root_id}\" and its whole tree were deleted.")
        return ToolResponse(text=f"Task \"{task_id}\" was deleted from \"{root_id}\".")

    def get_task_relations(self, arguments: dict[str, Any]) -> ToolResponse:
        problem = _missing(arguments, "root_task_id")
        if problem:
            return _error(problem)

        result = self.service.get_tree(arguments["root_task_id"])
        if isinstance(result, Err):
            return _error(str(result.error))

        task = result.value
        formatted = json.dumps(task.to_document(), indent=2, ensure_ascii=False)
        return ToolResponse(
            text=(
                f"Task tree:\n\n```json\n{formatted}\n```\n\n"
                f"Task ID: {task.id}\n"
                f"Goal: {task.goal}\n"
                f"Acceptance: {task.acceptance}\n"
                f"Status: {task.status.value}\n"
                f"Subtasks: {len(task.tasks)}"
            )
        )

    def list_root_tasks(self, arguments: dict[str, Any]) -> ToolResponse:
        result = self.service.list_root_ids()
        if isinstance(result, Err):
            return _error(f"Failed to list root tasks: {result.error}")

        root_ids = result.value
        if not root_ids:
            return ToolResponse(text="No root tasks found. Create one with dnc_init_task.")

        lines = [f"Root tasks ({len(root_ids)}):", ""]
        for root_id in root_ids:
            tree = self.service.get_tree(root_id)
            if is_err(tree):
                lines.append(f"- {root_id} (unreadable: {tree.error})")
            else:
                lines.append(f"- {root_id} [{tree.value.status.value}] {tree.value.goal}")
        return ToolResponse(text="\n".join(lines))

    def batch_update_tasks(self, arguments: dict[str, Any]) -> ToolResponse:
        parsed = parse_batch(arguments.get("updates"))
        if isinstance(parsed, Err):
            return _error(str(parsed.error))

        result = self.coordinator.apply(parsed.value)
        if isinstance(result, Err):
            return _error(str(result.error))

        response = result.value
        succeeded = sum(1 for item in response.results if item.success)
        lines = [f"Batch update: {succeeded}/{len(response.results)} succeeded.", ""]
        for item in response.results:
            if item.success:
                lines.append(f"- {item.task_id}: ok")
            else:
                lines.append(f"- {item.task_id}: failed ({item.error})")
        return ToolResponse(text="\n".join(lines))
