from __future__ import annotations

from typing import Iterable

from ..core.constants import DEFAULT_SUBTASK_GATE_ROLES
from ..core.enums import Role
from ..core.exceptions import ValidationError
from .model import Task


class CompletionPolicy:
    """Blocks completion by gated roles while a task has open sub-tasks."""

    def __init__(self, gated_roles: Iterable[Role | str] = DEFAULT_SUBTASK_GATE_ROLES):
        self._gated = frozenset(Role(r) for r in gated_roles)

    @property
    def gated_roles(self) -> frozenset[Role]:
        return self._gated

    def ensure_can_complete(self, role: Role, task: Task) -> None:
        if role in self._gated and task.has_open_sub_tasks:
            raise ValidationError("Complete all sub-tasks before finishing this task")
