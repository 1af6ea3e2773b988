"""Tree algorithms over an in-memory task tree.

All functions in this module are free of I/O. The mutating ones
(``append_child``, ``update_fields``, ``remove_task``, ``migrate_pending``)
change the tree passed in; the rest only read it.

Every lookup is a pre-order depth-first search (node first, then its
children in order) and the first match wins, so a tree that somehow holds
duplicate ids always resolves to the same node.
"""

from collections.abc import Callable, Iterator
from typing import TypeVar

from .models import Task, TaskChanges, TaskStatus

T = TypeVar("T")


# =============================================================================
# Fundamental Operations
# =============================================================================


def walk(tree: Task) -> Iterator[tuple[Task, Task | None]]:
    """Yield ``(node, parent)`` pairs in pre-order, root first.

    The root is yielded with ``parent=None``.
    """

    def visit(node: Task, parent: Task | None) -> Iterator[tuple[Task, Task | None]]:
        yield node, parent
        for child in node.tasks:
            yield from visit(child, node)

    return visit(tree, None)


def fold_tree(tree: Task, initial: T, f: Callable[[T, Task], T]) -> T:
    """Fold over every node, root included, in pre-order.

    Args:
        tree: The tree to fold over
        initial: Starting accumulator value
        f: Function (accumulator, node) -> new_accumulator

    Returns:
        Final accumulated value
    """
    acc = initial
    for node, _parent in walk(tree):
        acc = f(acc, node)
    return acc


def find_task(tree: Task, target_id: str) -> Task | None:
    """Find the first node with ``target_id`` (the root counts).

    Returns:
        The matching node, or None
    """
    for node, _parent in walk(tree):
        if node.id == target_id:
            return node
    return None


def find_path(tree: Task, target_id: str) -> list[str] | None:
    """Return the id chain from the root down to ``target_id``.

    Returns:
        List of ids starting with the root id, or None if absent
    """

    def search(node: Task, path: list[str]) -> list[str] | None:
        current = path + [node.id]
        if node.id == target_id:
            return current
        for child in node.tasks:
            found = search(child, current)
            if found:
                return found
        return None

    return search(tree, [])


# =============================================================================
# Mutations
# =============================================================================


def append_child(parent: Task, child: Task) -> None:
    """Append ``child`` as the last child of ``parent``.

    Checking that ``child.id`` is not already used is the caller's job.
    """
    parent.tasks.append(child)


def update_fields(tree: Task, target_id: str, changes: TaskChanges) -> bool:
    """Overwrite the provided fields of the first node with ``target_id``.

    Fields that are None in ``changes`` are left untouched.

    Returns:
        True if a node matched
    """
    node = find_task(tree, target_id)
    if node is None:
        return False

    if changes.goal is not None:
        node.goal = changes.goal
    if changes.status is not None:
        node.status = changes.status
    if changes.acceptance is not None:
        node.acceptance = changes.acceptance
    if changes.additional_instructions is not None:
        node.additional_instructions = changes.additional_instructions
    return True


def remove_task(tree: Task, target_id: str) -> bool:
    """Splice the first descendant with ``target_id`` out of its parent.

    The root itself is never removed: ``remove_task(tree, tree.id)``
    always returns False and leaves the tree alone.

    Returns:
        True if a node was removed
    """
    if target_id == tree.id:
        return False
    for node, parent in walk(tree):
        if parent is not None and node.id == target_id:
            for index, sibling in enumerate(parent.tasks):
                if sibling is node:
                    del parent.tasks[index]
                    return True
    return False


def migrate_pending(tree: Task) -> int:
    """Rewrite legacy ``pending`` statuses to ``init`` throughout the tree.

    Returns:
        Number of nodes changed
    """
    changed = 0
    for node, _parent in walk(tree):
        if node.status == TaskStatus.PENDING:
            node.status = TaskStatus.INIT
            changed += 1
    return changed


# =============================================================================
# Summaries
# =============================================================================


def count_by_status(tree: Task) -> dict[TaskStatus, int]:
    """Count every node (root included) by status.

    Returns:
        Dict with an entry for each assignable status
    """
    counts: dict[TaskStatus, int] = {
        status: 0 for status in TaskStatus if status is not TaskStatus.PENDING
    }

    def count(acc: dict[TaskStatus, int], node: Task) -> dict[TaskStatus, int]:
        key = TaskStatus.INIT if node.status == TaskStatus.PENDING else node.status
        acc[key] += 1
        return acc

    return fold_tree(tree, counts, count)


def collect_ids(tree: Task) -> list[str]:
    """All node ids in pre-order."""
    return fold_tree(tree, [], lambda acc, node: acc + [node.id])
