"""Task tree domain events.

Events are immutable records of a change that has already been saved.
The application layer hands them to whatever notifier it was built with
(the history recorder by default). Pure data, no I/O.
"""

from datetime import UTC, datetime
from uuid import uuid4

from pydantic import BaseModel, Field


class DomainEvent(BaseModel):
    """Base class for all task tree events.

    Each event has a unique ID, a timestamp, and the root aggregate it
    belongs to.
    """

    event_id: str = Field(default_factory=lambda: str(uuid4()))
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))
    root_id: str

    model_config = {"frozen": True}

    @property
    def name(self) -> str:
        """Event type name, e.g. ``TaskUpdated``."""
        return type(self).__name__


class RootTaskCreated(DomainEvent):
    """A new root aggregate was initialised."""

    goal: str


class TaskAppended(DomainEvent):
    """A child was appended under ``parent_id``."""

    parent_id: str
    task_id: str


class TaskUpdated(DomainEvent):
    """Fields of a single node were overwritten."""

    task_id: str
    fields: list[str]


class TaskRemoved(DomainEvent):
    """A descendant node (and its subtree) was removed."""

    task_id: str


class RootTaskDeleted(DomainEvent):
    """A whole root aggregate was deleted."""


class BatchApplied(DomainEvent):
    """A batch group was saved for one root.

    ``task_ids`` lists the requests that succeeded, in request order.
    """

    task_ids: list[str]
