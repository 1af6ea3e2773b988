"""Batch update coordinator.

Applies many ``(taskId, rootTaskId, changes)`` requests in one call. The
requests are grouped by root and every root is loaded once, mutated in
memory for all of its requests, and saved once. Grouping is what keeps
two requests in the same batch from each reading the tree, changing it
and writing it back over the other's change.

Two kinds of failure are kept apart:

- A structurally invalid batch (empty, a bad id, a bad status, a request
  with nothing to change) is rejected as a whole with ``Err`` and nothing
  is touched.
- Node-level problems (unknown root, unknown target, an I/O failure for
  one root) become per-request results; the batch itself still succeeds.
"""

import logging
from collections.abc import Iterable, Sequence
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from dnc.application.history import NullNotifier, TaskTreeNotifier
from dnc.domain.shared import Err, NotFoundError, Ok, Result, ValidationError
from dnc.domain.task import BatchApplied, TaskChanges, check_task_id, parse_status, update_fields
from dnc.infrastructure.storage import TaskTreeRepository

logger = logging.getLogger(__name__)


class TaskUpdateRequest(BaseModel):
    """One requested change in a batch.

    ``status`` is kept as the raw string so that validation can reject
    unknown and legacy values with a batch-level message.
    """

    model_config = ConfigDict(populate_by_name=True)

    task_id: str = Field(alias="taskId")
    root_task_id: str = Field(alias="rootTaskId")
    status: str | None = None
    additional_instructions: str | None = Field(default=None, alias="additionalInstructions")


class TaskUpdateResult(BaseModel):
    """Outcome for one request, reported in input order."""

    model_config = ConfigDict(populate_by_name=True)

    task_id: str = Field(alias="taskId")
    success: bool
    error: str | None = None


class BatchUpdateResponse(BaseModel):
    """Aggregate outcome.

    ``success`` is True whenever the batch was structurally valid;
    inspect ``results`` for node-level failures.
    """

    success: bool = True
    results: list[TaskUpdateResult] = Field(default_factory=list)

    def to_document(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class PlannedUpdate(BaseModel):
    """A validated request with its position in the batch."""

    index: int
    task_id: str
    root_task_id: str
    changes: TaskChanges


def parse_batch(items: Any) -> Result[list[TaskUpdateRequest], ValidationError]:
    """Turn raw JSON-like input into requests.

    Args:
        items: Expected to be a list of mappings with camelCase keys.

    Returns:
        Ok(list[TaskUpdateRequest]) or Err(ValidationError) naming the
        first malformed entry.
    """
    if not isinstance(items, list):
        return Err(ValidationError("Updates must be an array", field="updates"))

    requests = []
    for index, item in enumerate(items):
        try:
            requests.append(TaskUpdateRequest.model_validate(item))
        except PydanticValidationError as e:
            missing = ", ".join(
                ".".join(str(part) for part in error["loc"]) for error in e.errors()
            )
            return Err(
                ValidationError(
                    f"updates[{index}]: invalid or missing field(s): {missing}",
                    field=f"updates[{index}]",
                )
            )
    return Ok(requests)


def validate_batch(
    requests: Sequence[TaskUpdateRequest],
) -> Result[list[PlannedUpdate], ValidationError]:
    """Check every request before anything is loaded.

    Returns:
        Ok(list[PlannedUpdate]) in input order, or Err(ValidationError)
        for the first invalid request.
    """
    if not requests:
        return Err(ValidationError("Updates array cannot be empty", field="updates"))

    planned = []
    for index, request in enumerate(requests):
        prefix = f"updates[{index}]"

        for value, field in ((request.task_id, "taskId"), (request.root_task_id, "rootTaskId")):
            checked = check_task_id(value, field)
            if isinstance(checked, Err):
                return Err(ValidationError(f"{prefix}: {checked.error}", field=f"{prefix}.{field}"))

        if request.status is None and request.additional_instructions is None:
            return Err(
                ValidationError(
                    f"{prefix}: provide status or additionalInstructions",
                    field=prefix,
                )
            )

        status = None
        if request.status is not None:
            parsed = parse_status(request.status)
            if isinstance(parsed, Err):
                return Err(ValidationError(f"{prefix}: {parsed.error}", field=f"{prefix}.status"))
            status = parsed.value

        planned.append(
            PlannedUpdate(
                index=index,
                task_id=request.task_id,
                root_task_id=request.root_task_id,
                changes=TaskChanges(
                    status=status,
                    additional_instructions=request.additional_instructions,
                ),
            )
        )
    return Ok(planned)


def group_by_root(planned: Iterable[PlannedUpdate]) -> dict[str, list[PlannedUpdate]]:
    """Group requests by root id.

    Groups are ordered by first appearance and keep the relative order of
    their requests.
    """
    groups: dict[str, list[PlannedUpdate]] = {}
    for update in planned:
        groups.setdefault(update.root_task_id, []).append(update)
    return groups


class BatchUpdateCoordinator:
    """Apply a batch of node updates with one load and one save per root.

    Args:
        repository: Where trees are stored.
        notifier: Told once per saved root. Defaults to a no-op.
    """

    def __init__(
        self,
        repository: TaskTreeRepository,
        notifier: TaskTreeNotifier | None = None,
    ) -> None:
        self.repository = repository
        self.notifier = notifier or NullNotifier()

    def apply(
        self,
        requests: Sequence[TaskUpdateRequest],
    ) -> Result[BatchUpdateResponse, ValidationError]:
        """Validate and apply a batch.

        Returns:
            Ok(BatchUpdateResponse) with one result per request in input
            order, or Err(ValidationError) if the batch was rejected.
        """
        validated = validate_batch(requests)
        if isinstance(validated, Err):
            logger.warning(f"Rejected batch update: {validated.error}")
            return validated

        planned = validated.value
        results: list[TaskUpdateResult | None] = [None] * len(planned)

        for root_id, group in group_by_root(planned).items():
            for index, result in self._apply_group(root_id, group).items():
                results[index] = result

        response = BatchUpdateResponse(success=True, results=[r for r in results if r is not None])
        succeeded = sum(1 for r in response.results if r.success)
        logger.info(f"Batch update applied: {succeeded}/{len(response.results)} succeeded")
        return Ok(response)

    def _apply_group(
        self,
        root_id: str,
        group: list[PlannedUpdate],
    ) -> dict[int, TaskUpdateResult]:
        """Load, mutate and save one root. Returns results keyed by index."""
        outcomes: dict[int, TaskUpdateResult] = {}

        loaded = self.repository.load(root_id)
        if isinstance(loaded, Err):
            if isinstance(loaded.error, NotFoundError):
                message = f"root not found: {root_id}"
            else:
                message = str(loaded.error)
            logger.warning(f"Batch group '{root_id}' failed to load: {message}")
            for update in group:
                outcomes[update.index] = TaskUpdateResult(
                    task_id=update.task_id, success=False, error=message
                )
            return outcomes

        tree = loaded.value
        applied: list[PlannedUpdate] = []
        for update in group:
            if update_fields(tree, update.task_id, update.changes):
                applied.append(update)
                outcomes[update.index] = TaskUpdateResult(task_id=update.task_id, success=True)
            else:
                outcomes[update.index] = TaskUpdateResult(
                    task_id=update.task_id,
                    success=False,
                    error=f"target not found: {update.task_id}",
                )

        if not applied:
            return outcomes

        saved = self.repository.save(root_id, tree)
        if isinstance(saved, Err):
            message = str(saved.error)
            logger.warning(f"Batch group '{root_id}' failed to save: {message}")
            for update in applied:
                outcomes[update.index] = TaskUpdateResult(
                    task_id=update.task_id, success=False, error=message
                )
            return outcomes

        self.notifier.notify(
            BatchApplied(root_id=root_id, task_ids=[update.task_id for update in applied])
        )
        return outcomes
