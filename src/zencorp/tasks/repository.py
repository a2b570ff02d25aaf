from __future__ import annotations

from typing import Iterable, Optional, Protocol, Sequence

from ..core.enums import TaskStatus
from .model import Task


class TaskRepository(Protocol):
    def get_by_id(self, task_id: str) -> Optional[Task]:
        raise NotImplementedError

    def list_all(self, *, since: Optional[int] = None) -> Sequence[Task]:
        """All tasks, newest first; ``since`` keeps rows updated after that epoch-ms."""
        raise NotImplementedError

    def list_for_assignee(self, to_id: str) -> Sequence[Task]:
        raise NotImplementedError

    def list_by_status(self, statuses: Iterable[TaskStatus]) -> Sequence[Task]:
        raise NotImplementedError

    def create_many(self, tasks: Sequence[Task]) -> None:
        """Insert every task or none of them."""
        raise NotImplementedError

    def update_many(self, changes: Sequence[tuple[Task, int]]) -> bool:
        """Write ``(task, expected_version)`` pairs atomically.

        Returns False, writing nothing, when any row's stored version no
        longer matches.
        """
        raise NotImplementedError

    def delete(self, task_id: str) -> bool:
        raise NotImplementedError
