"""Task domain models.

A task tree is a single recursive model: every node, root included, is a
``Task`` that owns its children. Pydantic handles the JSON shape so the
same model is used for storage, the HTTP API and MCP output.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator

from dnc.domain.shared import Err, Ok, Result, ValidationError


class TaskStatus(str, Enum):
    """Lifecycle status of a task node.

    ``PENDING`` is the legacy name for ``INIT``. It is still accepted when
    reading stored trees (and migrated on load) but never as client input.
    """

    INIT = "init"
    ACCEPT = "accept"
    IN_PROGRESS = "in-progress"
    DONE = "done"
    DELETE = "delete"
    HOLD = "hold"
    SPLIT = "split"
    PENDING = "pending"


# Statuses a client may set
ASSIGNABLE_STATUSES: tuple[TaskStatus, ...] = tuple(
    status for status in TaskStatus if status is not TaskStatus.PENDING
)


def parse_status(value: str | TaskStatus) -> Result[TaskStatus, ValidationError]:
    """Parse a client supplied status, rejecting the legacy value.

    Args:
        value: Raw status string (or an already parsed status).

    Returns:
        Ok(TaskStatus) for one of the seven current values, otherwise
        Err(ValidationError) listing the accepted values.
    """
    allowed = ", ".join(status.value for status in ASSIGNABLE_STATUSES)
    try:
        status = TaskStatus(value)
    except ValueError:
        return Err(ValidationError(f"Invalid status '{value}'. Use one of: {allowed}", field="status"))
    if status is TaskStatus.PENDING:
        return Err(
            ValidationError(
                f"Invalid status '{status.value}' (legacy value, use 'init'). Use one of: {allowed}",
                field="status",
            )
        )
    return Ok(status)


class Task(BaseModel):
    """A node in a divide-and-conquer task tree.

    The root of a tree is an ordinary Task whose ``id`` also names its
    storage unit. Children are kept in display order.
    """

    model_config = ConfigDict(populate_by_name=True, validate_assignment=True)

    id: str
    goal: str
    acceptance: str = ""
    status: TaskStatus = TaskStatus.INIT
    additional_instructions: str | None = Field(default=None, alias="additionalInstructions")
    tasks: list["Task"] = Field(default_factory=list)

    @field_validator("tasks", mode="before")
    @classmethod
    def _tasks_never_null(cls, value: object) -> object:
        return [] if value is None else value

    def is_leaf(self) -> bool:
        """Check if this node has no children."""
        return len(self.tasks) == 0

    def to_document(self) -> dict:
        """Serialize to the stored/wire shape (camelCase, unset fields omitted)."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class TaskChanges(BaseModel):
    """A partial update for a single node.

    ``None`` means "not provided" and leaves the field alone; an empty
    string is a real overwrite.
    """

    model_config = ConfigDict(populate_by_name=True)

    goal: str | None = None
    status: TaskStatus | None = None
    acceptance: str | None = None
    additional_instructions: str | None = Field(default=None, alias="additionalInstructions")

    def is_empty(self) -> bool:
        """True when no field is provided."""
        return (
            self.goal is None
            and self.status is None
            and self.acceptance is None
            and self.additional_instructions is None
        )

    def describe(self) -> list[str]:
        """Human readable lines for the provided fields."""
        lines = []
        if self.goal is not None:
            lines.append(f"Goal: {self.goal}")
        if self.status is not None:
            lines.append(f"Status: {self.status.value}")
        if self.acceptance is not None:
            lines.append(f"Acceptance: {self.acceptance}")
        if self.additional_instructions is not None:
            lines.append(f"Additional instructions: {self.additional_instructions}")
        return lines
