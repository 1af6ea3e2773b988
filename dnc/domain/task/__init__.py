"""Task domain - the divide-and-conquer task tree.

Everything exported here is pure (no I/O, no side effects beyond
mutating a tree you pass in).

Key Types:
    Task - Recursive tree node; a root Task is the persistence unit
    TaskStatus - Lifecycle status enumeration
    TaskChanges - Partial field update for one node
    IdValidation / IdRejection - Identifier check outcome

Traversal Functions:
    walk - Pre-order (node, parent) iterator
    find_task - First node with an id
    update_fields - Overwrite provided fields on a node
    append_child - Add a child at the end
    remove_task - Splice a descendant out
    migrate_pending - Legacy status migration

Policies:
    validate_task_id - Identifier grammar
    check_transition - Advisory status transition table

Domain Events:
    RootTaskCreated, TaskAppended, TaskUpdated, TaskRemoved,
    RootTaskDeleted, BatchApplied
"""

from .events import (
    BatchApplied,
    DomainEvent,
    RootTaskCreated,
    RootTaskDeleted,
    TaskAppended,
    TaskRemoved,
    TaskUpdated,
)
from .identifiers import (
    MAX_ID_LENGTH,
    MAX_ID_WORDS,
    IdRejection,
    IdValidation,
    check_task_id,
    validate_task_id,
)
from .models import ASSIGNABLE_STATUSES, Task, TaskChanges, TaskStatus, parse_status
from .transitions import (
    RECOMMENDED_TRANSITIONS,
    TransitionAdvice,
    check_transition,
    recommended_next,
)
from .traversal import (
    append_child,
    collect_ids,
    count_by_status,
    find_path,
    find_task,
    fold_tree,
    migrate_pending,
    remove_task,
    update_fields,
    walk,
)

__all__ = [
    # Models
    "Task",
    "TaskStatus",
    "TaskChanges",
    "ASSIGNABLE_STATUSES",
    "parse_status",
    # Identifiers
    "MAX_ID_LENGTH",
    "MAX_ID_WORDS",
    "IdRejection",
    "IdValidation",
    "validate_task_id",
    "check_task_id",
    # Transitions
    "RECOMMENDED_TRANSITIONS",
    "TransitionAdvice",
    "check_transition",
    "recommended_next",
    # Traversal
    "walk",
    "fold_tree",
    "find_task",
    "find_path",
    "append_child",
    "update_fields",
    "remove_task",
    "migrate_pending",
    "count_by_status",
    "collect_ids",
    # Events
    "DomainEvent",
    "RootTaskCreated",
    "TaskAppended",
    "TaskUpdated",
    "TaskRemoved",
    "RootTaskDeleted",
    "BatchApplied",
]
