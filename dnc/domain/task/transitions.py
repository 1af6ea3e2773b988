"""Recommended status transitions.

The table is advisory: updates are never rejected because of it. Callers
that want to surface a hint (the single-node update path does) call
``check_transition`` explicitly.
"""

from pydantic import BaseModel

from .models import TaskStatus

RECOMMENDED_TRANSITIONS: dict[TaskStatus, frozenset[TaskStatus]] = {
    TaskStatus.INIT: frozenset(
        {TaskStatus.ACCEPT, TaskStatus.DELETE, TaskStatus.HOLD, TaskStatus.SPLIT}
    ),
    TaskStatus.ACCEPT: frozenset({TaskStatus.IN_PROGRESS, TaskStatus.HOLD}),
    TaskStatus.IN_PROGRESS: frozenset({TaskStatus.DONE, TaskStatus.HOLD}),
    TaskStatus.HOLD: frozenset({TaskStatus.INIT, TaskStatus.ACCEPT}),
    TaskStatus.SPLIT: frozenset({TaskStatus.INIT}),
    TaskStatus.DONE: frozenset(),
    TaskStatus.DELETE: frozenset(),
    TaskStatus.PENDING: frozenset(),
}


class TransitionAdvice(BaseModel):
    """Whether a status change follows the recommended flow."""

    recommended: bool
    warning: str | None = None


def recommended_next(status: TaskStatus) -> list[TaskStatus]:
    """Recommended targets from ``status``, in enum order."""
    allowed = RECOMMENDED_TRANSITIONS.get(status, frozenset())
    return [candidate for candidate in TaskStatus if candidate in allowed]


def check_transition(current: TaskStatus, target: TaskStatus) -> TransitionAdvice:
    """Compare a status change against the recommended table.

    Setting a status to its current value is always fine.

    Args:
        current: Status the node has now.
        target: Status about to be written.

    Returns:
        TransitionAdvice with a warning when the move is off the table.
    """
    if current == target or target in RECOMMENDED_TRANSITIONS.get(current, frozenset()):
        return TransitionAdvice(recommended=True)

    options = ", ".join(status.value for status in recommended_next(current)) or "none"
    return TransitionAdvice(
        recommended=False,
        warning=(
            f"Unrecommended status transition: {current.value} -> {target.value}. "
            f"Recommended: {options}"
        ),
    )
