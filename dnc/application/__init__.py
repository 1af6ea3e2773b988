"""Application service layer.

Services combine the pure domain functions with the repository and the
notifier. They are the only place where a tree is loaded, changed and
saved.

Services:
    task_service - Boundary operations (init, append, update, remove, get)
    batch_service - Grouped multi-node updates, one load/save per root
    history - Notifier protocol and in-memory history recorder

Example usage:
    >>> from dnc.application import TaskTreeService, HistoryRecorder
    >>> from dnc.infrastructure.storage import TaskTreeRepository
    >>>
    >>> service = TaskTreeService(TaskTreeRepository(Path(".dnc")), HistoryRecorder())
    >>> result = service.init_root("proj-x", "Ship it", "All tests pass")
"""

from dnc.application.batch_service import (
    BatchUpdateCoordinator,
    BatchUpdateResponse,
    PlannedUpdate,
    TaskUpdateRequest,
    TaskUpdateResult,
    group_by_root,
    parse_batch,
    validate_batch,
)
from dnc.application.history import (
    HistoryEntry,
    HistoryRecorder,
    NullNotifier,
    TaskTreeNotifier,
)
from dnc.application.task_service import (
    TaskTreeService,
    TaskUpdateOutcome,
    TreeSummary,
)

__all__ = [
    # Task service
    "TaskTreeService",
    "TaskUpdateOutcome",
    "TreeSummary",
    # Batch service
    "BatchUpdateCoordinator",
    "BatchUpdateResponse",
    "TaskUpdateRequest",
    "TaskUpdateResult",
    "PlannedUpdate",
    "parse_batch",
    "validate_batch",
    "group_by_root",
    # History
    "TaskTreeNotifier",
    "NullNotifier",
    "HistoryRecorder",
    "HistoryEntry",
]
