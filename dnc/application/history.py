"""Change notification and in-memory history.

Services are handed a notifier when they are built and call it after
every successful save. ``HistoryRecorder`` is the default notifier: it
keeps a bounded in-memory log of events and tool calls, served by
``GET /api/history``.
"""

import logging
from datetime import UTC, datetime
from typing import Any, Protocol
from uuid import uuid4

from pydantic import BaseModel, Field

from dnc.domain.task import DomainEvent

logger = logging.getLogger(__name__)


class TaskTreeNotifier(Protocol):
    """Anything that wants to hear about saved changes."""

    def notify(self, event: DomainEvent) -> None: ...


class NullNotifier:
    """Notifier that drops every event."""

    def notify(self, event: DomainEvent) -> None:
        return None


class HistoryEntry(BaseModel):
    """One recorded change or tool call."""

    id: str = Field(default_factory=lambda: str(uuid4()))
    tool_name: str
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))
    root_id: str | None = None
    request: Any = None
    response: Any = None


class HistoryRecorder:
    """In-memory history of task tree changes.

    Domain events arrive through ``notify`` and are stored under the
    event's type name; interface code can also record raw tool calls
    with ``record``.
    """

    def __init__(self, max_entries: int = 1000) -> None:
        self._entries: list[HistoryEntry] = []
        self._max_entries = max_entries

    def notify(self, event: DomainEvent) -> None:
        """Record a domain event."""
        self._append(
            HistoryEntry(
                tool_name=event.name,
                timestamp=event.timestamp,
                root_id=event.root_id,
                request=event.model_dump(mode="json", exclude={"event_id", "timestamp"}),
            )
        )

    def record(self, tool_name: str, request: Any, response: Any) -> HistoryEntry:
        """Record a tool invocation and its response."""
        entry = HistoryEntry(tool_name=tool_name, request=request, response=response)
        self._append(entry)
        return entry

    def get_history(self, tool_name: str | None = None) -> list[HistoryEntry]:
        """Copies of recorded entries, oldest first, optionally filtered."""
        entries = self._entries
        if tool_name:
            entries = [entry for entry in entries if entry.tool_name == tool_name]
        return [entry.model_copy() for entry in entries]

    def clear(self) -> None:
        """Forget every entry."""
        self._entries = []

    def _append(self, entry: HistoryEntry) -> None:
        self._entries.append(entry)
        if len(self._entries) > self._max_entries:
            del self._entries[: len(self._entries) - self._max_entries]
        logger.debug(f"History added: [{entry.tool_name}] at {entry.timestamp.isoformat()}")
