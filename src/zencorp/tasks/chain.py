from __future__ import annotations

import logging
from functools import partial
from typing import Callable, Optional, Sequence

from ..common.datetime_utils import now_local, to_epoch_ms
from ..common.ids import sequential_ids
from ..common.validators import require_non_empty
from ..core.enums import TaskStatus
from ..core.exceptions import ValidationError
from ..employees.service import EmployeeService
from .model import ChainStep, FileAttachment, Task
from .repository import TaskRepository

logger = logging.getLogger(__name__)


def _now_ms() -> int:
    return to_epoch_ms(now_local())


class ChainBuilder:
    """Turns an ordered list of steps into linked Task records.

    Step 1 starts in ``pending_hr``; every later step waits in ``on_hold``
    until its predecessor completes.
    """

    def __init__(
        self,
        tasks: TaskRepository,
        roster: EmployeeService,
        *,
        id_factory: Callable[[int], list[str]] = partial(sequential_ids, "task"),
        clock: Callable[[], int] = _now_ms,
    ):
        self._tasks = tasks
        self._roster = roster
        self._id_factory = id_factory
        self._clock = clock

    def build(
        self,
        *,
        sender_id: str,
        sender_name: str,
        title: str,
        description: str,
        steps: Sequence[ChainStep],
        attachment: Optional[FileAttachment] = None,
        hr_reviewer_id: Optional[str] = None,
    ) -> list[Task]:
        title = require_non_empty(title, "Title")
        if not steps:
            raise ValidationError("At least one step is required")

        workers = []
        for index, step in enumerate(steps, start=1):
            if not step.worker_id:
                raise ValidationError(f"Select a worker for step {index}")
            worker = self._roster.get_active(step.worker_id)
            if step.department_id and not self._roster.belongs_to(worker, step.department_id):
                raise ValidationError(f"Worker for step {index} is not in the selected department")
            workers.append(worker)

        count = len(steps)
        ids = self._id_factory(count)
        created_at = self._clock()
        is_chain = count > 1

        tasks: list[Task] = []
        for i, worker in enumerate(workers):
            tasks.append(
                Task(
                    task_id=ids[i],
                    title=f"{title} (Step {i + 1})" if is_chain else title,
                    description=(description or "").strip(),
                    from_id=sender_id,
                    from_name=sender_name,
                    to_id=worker.employee_id,
                    to_name=worker.full_name,
                    status=TaskStatus.PENDING_HR if i == 0 else TaskStatus.ON_HOLD,
                    created_at=created_at,
                    updated_at=created_at,
                    attachment=attachment if i == 0 else None,
                    hr_reviewer_id=hr_reviewer_id,
                    is_chain_task=is_chain,
                    chain_step=i + 1 if is_chain else None,
                    parent_task_id=ids[0] if is_chain and i > 0 else None,
                    next_chain_task_id=ids[i + 1] if is_chain and i < count - 1 else None,
                )
            )
        return tasks

    def create(self, **kwargs) -> list[Task]:
        """Build and persist the chain in one transaction."""
        tasks = self.build(**kwargs)
        self._tasks.create_many(tasks)
        logger.info(
            "Created task chain %s with %d step(s) for %s",
            tasks[0].task_id,
            len(tasks),
            ", ".join(t.to_id for t in tasks),
        )
        return tasks


def group_workflows(tasks: Sequence[Task]) -> list[list[Task]]:
    """Chain tasks grouped into ordered chains, oldest chain first.

    Each chain is walked from its first step along ``next_chain_task_id``.
    Broken links end the walk; tasks orphaned that way are appended by step.
    """
    by_id = {t.task_id: t for t in tasks if t.is_chain_member}
    heads = [t for t in by_id.values() if not t.parent_task_id]
    heads.sort(key=lambda t: t.created_at)

    grouped: list[list[Task]] = []
    seen: set[str] = set()
    for head in heads:
        chain: list[Task] = []
        current: Optional[Task] = head
        while current and current.task_id not in seen:
            seen.add(current.task_id)
            chain.append(current)
            current = by_id.get(current.next_chain_task_id or "")
        stragglers = [
            t for t in by_id.values() if t.parent_task_id == head.task_id and t.task_id not in seen
        ]
        for t in sorted(stragglers, key=lambda t: t.chain_step or 0):
            seen.add(t.task_id)
            chain.append(t)
        grouped.append(chain)
    return grouped
