"""Task tree application service.

Boundary operations consumed by the HTTP API, the MCP tools and the CLI.
Each operation validates its identifiers first, then loads, mutates and
saves one aggregate, then tells the notifier. Every operation returns a
Result; nothing here raises for expected failures.
"""

import logging

from pydantic import BaseModel

from dnc.application.history import NullNotifier, TaskTreeNotifier
from dnc.domain.shared import (
    ConflictError,
    DncError,
    Err,
    NotFoundError,
    Ok,
    Result,
    ValidationError,
    flat_map,
    map_result,
)
from dnc.domain.task import (
    RootTaskCreated,
    RootTaskDeleted,
    Task,
    TaskAppended,
    TaskChanges,
    TaskRemoved,
    TaskStatus,
    TaskUpdated,
    TransitionAdvice,
    append_child,
    check_task_id,
    check_transition,
    count_by_status,
    find_task,
    parse_status,
    remove_task,
    update_fields,
)
from dnc.infrastructure.storage import TaskTreeRepository

logger = logging.getLogger(__name__)


class TreeSummary(BaseModel):
    """Status counts for one tree, root included."""

    root_id: str
    goal: str
    total: int
    counts: dict[str, int]

    @property
    def progress_percent(self) -> float:
        """Share of nodes that are done."""
        if self.total == 0:
            return 0.0
        return round(self.counts.get(TaskStatus.DONE.value, 0) / self.total * 100, 1)


class TaskUpdateOutcome(BaseModel):
    """Result of a single node update.

    ``advice`` is set when a status change was requested; it never
    blocks the update.
    """

    task: Task
    advice: TransitionAdvice | None = None


def _require_text(value: str | None, field: str) -> Result[str, ValidationError]:
    if value is None or not value.strip():
        return Err(ValidationError(f"{field} is required and cannot be empty", field=field))
    return Ok(value)


def _summarize_tree(tree: Task) -> TreeSummary:
    counts = {status.value: count for status, count in count_by_status(tree).items()}
    return TreeSummary(root_id=tree.id, goal=tree.goal, total=sum(counts.values()), counts=counts)


def _first_error(*results: Result) -> DncError | None:
    for result in results:
        if isinstance(result, Err):
            return result.error
    return None


class TaskTreeService:
    """Create, inspect and mutate task trees.

    Args:
        repository: Where trees are stored.
        notifier: Told about every saved change. Defaults to a no-op.
    """

    def __init__(
        self,
        repository: TaskTreeRepository,
        notifier: TaskTreeNotifier | None = None,
    ) -> None:
        self.repository = repository
        self.notifier = notifier or NullNotifier()

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def get_tree(self, root_id: str) -> Result[Task, DncError]:
        """Load a whole tree by root id."""
        return flat_map(check_task_id(root_id, "root_task_id"), self.repository.load)

    def list_root_ids(self) -> Result[list[str], DncError]:
        """All root ids, sorted."""
        return self.repository.list_ids()

    def summarize(self, root_id: str) -> Result[TreeSummary, DncError]:
        """Count the nodes of a tree by status."""
        return map_result(self.get_tree(root_id), _summarize_tree)

    # -------------------------------------------------------------------------
    # Commands
    # -------------------------------------------------------------------------

    def init_root(self, root_id: str, goal: str, acceptance: str) -> Result[Task, DncError]:
        """Create a new root aggregate with status ``init`` and no children.

        Returns:
            Ok(Task), Err(ValidationError) for bad input, or
            Err(ConflictError) if the root already exists.
        """
        error = _first_error(
            check_task_id(root_id, "task_id"),
            _require_text(goal, "goal"),
            _require_text(acceptance, "acceptance"),
        )
        if error:
            return Err(error)

        if self.repository.exists(root_id):
            return Err(ConflictError(f"root task already exists: {root_id}", field=root_id))

        task = Task(id=root_id, goal=goal, acceptance=acceptance, status=TaskStatus.INIT)
        saved = self.repository.save(root_id, task)
        if isinstance(saved, Err):
            return saved

        logger.info(f"Created root task '{root_id}'")
        self.notifier.notify(RootTaskCreated(root_id=root_id, goal=goal))
        return Ok(task)

    def append_child(
        self,
        root_id: str,
        parent_id: str,
        child_id: str,
        goal: str,
        acceptance: str,
    ) -> Result[Task, DncError]:
        """Append a new ``init`` child under ``parent_id``.

        The child id must not already appear anywhere under the parent
        (the parent included).

        Returns:
            Ok(Task) with the new child, or an Err naming what is wrong.
        """
        error = _first_error(
            check_task_id(root_id, "root_task_id"),
            check_task_id(parent_id, "parent_task_id"),
            check_task_id(child_id, "child_task_id"),
            _require_text(goal, "goal"),
            _require_text(acceptance, "acceptance"),
        )
        if error:
            return Err(error)

        loaded = self.repository.load(root_id)
        if isinstance(loaded, Err):
            return loaded
        tree = loaded.value

        parent = find_task(tree, parent_id)
        if parent is None:
            return Err(NotFoundError(f"parent task not found: {parent_id}", field=parent_id))
        if find_task(parent, child_id) is not None:
            return Err(
                ConflictError(
                    f"task '{child_id}' already exists under '{parent_id}'", field=child_id
                )
            )

        child = Task(id=child_id, goal=goal, acceptance=acceptance, status=TaskStatus.INIT)
        append_child(parent, child)

        saved = self.repository.save(root_id, tree)
        if isinstance(saved, Err):
            return saved

        logger.info(f"Appended '{child_id}' under '{parent_id}' in '{root_id}'")
        self.notifier.notify(TaskAppended(root_id=root_id, parent_id=parent_id, task_id=child_id))
        return Ok(child)

    def update_task(
        self,
        root_id: str,
        target_id: str,
        changes: TaskChanges,
    ) -> Result[TaskUpdateOutcome, DncError]:
        """Overwrite the provided fields of one node.

        Off-table status transitions are allowed but reported in the
        outcome's ``advice`` and logged as a warning.
        """
        error = _first_error(
            check_task_id(root_id, "root_task_id"),
            check_task_id(target_id, "task_id"),
        )
        if error:
            return Err(error)
        if changes.is_empty():
            return Err(
                ValidationError(
                    "provide at least one of goal, status, acceptance, additionalInstructions",
                    field="changes",
                )
            )
        if changes.goal is not None and not changes.goal.strip():
            return Err(ValidationError("goal cannot be empty", field="goal"))
        if changes.status is not None:
            status = parse_status(changes.status)
            if isinstance(status, Err):
                return status

        loaded = self.repository.load(root_id)
        if isinstance(loaded, Err):
            return loaded
        tree = loaded.value

        node = find_task(tree, target_id)
        if node is None:
            return Err(NotFoundError(f"target not found: {target_id}", field=target_id))

        advice = None
        if changes.status is not None:
            advice = check_transition(node.status, changes.status)
            if not advice.recommended:
                logger.warning(f"{target_id} in {root_id}: {advice.warning}")

        update_fields(tree, target_id, changes)
        saved = self.repository.save(root_id, tree)
        if isinstance(saved, Err):
            return saved

        fields = sorted(changes.model_dump(exclude_none=True, by_alias=True))
        logger.info(f"Updated '{target_id}' in '{root_id}': {', '.join(fields)}")
        self.notifier.notify(TaskUpdated(root_id=root_id, task_id=target_id, fields=fields))
        return Ok(TaskUpdateOutcome(task=node, advice=advice))

    def remove_task(self, root_id: str, target_id: str) -> Result[None, DncError]:
        """Remove a node.

        When ``target_id`` is the root id the whole aggregate is deleted;
        otherwise the first matching descendant and its subtree go.
        """
        error = _first_error(
            check_task_id(root_id, "root_task_id"),
            check_task_id(target_id, "task_id"),
        )
        if error:
            return Err(error)

        if target_id == root_id:
            if not self.repository.exists(root_id):
                return Err(NotFoundError(f"root not found: {root_id}", field=root_id))
            deleted = self.repository.delete(root_id)
            if isinstance(deleted, Err):
                return deleted
            self.notifier.notify(RootTaskDeleted(root_id=root_id))
            return Ok(None)

        loaded = self.repository.load(root_id)
        if isinstance(loaded, Err):
            return loaded
        tree = loaded.value

        if not remove_task(tree, target_id):
            return Err(NotFoundError(f"target not found: {target_id}", field=target_id))

        saved = self.repository.save(root_id, tree)
        if isinstance(saved, Err):
            return saved

        logger.info(f"Removed '{target_id}' from '{root_id}'")
        self.notifier.notify(TaskRemoved(root_id=root_id, task_id=target_id))
        return Ok(None)
