"""Task status transitions.

Every status change goes through :func:`ensure_transition`. Edges that are
not listed here are rejected, including any move out of ``completed``.
"""

from __future__ import annotations

from ..core.enums import TaskStatus
from ..core.exceptions import InvalidTransitionError

S = TaskStatus

TRANSITIONS: dict[TaskStatus, frozenset[TaskStatus]] = {
    S.ON_HOLD: frozenset(),
    S.PENDING: frozenset({S.PENDING_HR, S.IN_PROGRESS, S.COMPLETED}),
    S.PENDING_HR: frozenset({S.ASSIGNED_TO_WORKER}),
    S.ASSIGNED_TO_WORKER: frozenset({S.IN_PROGRESS, S.PENDING_HR, S.COMPLETED}),
    S.IN_PROGRESS: frozenset({S.IN_REVIEW, S.REVIEW_BY_HR, S.PENDING_HR, S.COMPLETED}),
    S.IN_REVIEW: frozenset({S.IN_PROGRESS, S.REVIEW_BY_HR, S.COMPLETED}),
    S.REVIEW_BY_HR: frozenset({S.IN_PROGRESS, S.COMPLETED}),
    S.OVERDUE: frozenset({S.IN_PROGRESS, S.COMPLETED}),
    S.COMPLETED: frozenset(),
}

# Only chain activation may release a held step.
SYSTEM_TRANSITIONS: dict[TaskStatus, frozenset[TaskStatus]] = {
    S.ON_HOLD: frozenset({S.PENDING}),
}


def can_transition(current: TaskStatus, target: TaskStatus, *, system: bool = False) -> bool:
    if target in TRANSITIONS.get(current, frozenset()):
        return True
    return system and target in SYSTEM_TRANSITIONS.get(current, frozenset())


def ensure_transition(current: TaskStatus, target: TaskStatus, *, system: bool = False) -> None:
    if not can_transition(current, target, system=system):
        raise InvalidTransitionError(f"Cannot move a task from '{current.value}' to '{target.value}'")


def allowed_targets(current: TaskStatus) -> frozenset[TaskStatus]:
    return TRANSITIONS.get(current, frozenset())
