from __future__ import annotations

import logging
from dataclasses import replace
from typing import Callable, Optional, Sequence

from ..common.datetime_utils import now_local, to_epoch_ms
from ..common.ids import new_id
from ..common.validators import require_non_empty
from ..core.constants import REPORT_SEPARATOR
from ..core.enums import REVIEWER_ROLES, SENDER_ROLES, Role, TaskStatus
from ..core.exceptions import AuthorizationError, ConcurrencyError, NotFoundError, ValidationError
from .chain import ChainBuilder, group_workflows
from .model import ChainStep, FileAttachment, SubTask, Task
from .policy import CompletionPolicy
from .repository import TaskRepository
from .state_machine import ensure_transition

logger = logging.getLogger(__name__)

# Roles that may only act on tasks assigned to them.
_ASSIGNEE_BOUND_ROLES = frozenset({Role.EMPLOYEE, Role.UNIT_LEAD})

# Held steps never reach a worker board; HR-queued ones only once they have been forwarded.
_HIDDEN_FROM_ASSIGNEE = frozenset({TaskStatus.ON_HOLD})

_DELEGATORS = frozenset({Role.DIRECTOR, Role.HR_HEAD})
_EDITORS = frozenset({Role.DIRECTOR, Role.MANAGER})

_REVIEW_TARGETS = {"manager": TaskStatus.IN_REVIEW, "hr": TaskStatus.REVIEW_BY_HR}


def _now_ms() -> int:
    return to_epoch_ms(now_local())


def _on_assignee_board(task: Task) -> bool:
    if task.status in _HIDDEN_FROM_ASSIGNEE:
        return False
    return task.status != TaskStatus.PENDING_HR or task.forwarded


class TaskWorkflowService:
    """Task lifecycle: chain creation, status moves and chain activation.

    Every write is a compare-and-set on ``Task.version``. Completion and the
    successor's activation go to the store as one batch.
    """

    def __init__(
        self,
        tasks: TaskRepository,
        chain_builder: ChainBuilder,
        *,
        policy: Optional[CompletionPolicy] = None,
        clock: Callable[[], int] = _now_ms,
    ):
        self._tasks = tasks
        self._chains = chain_builder
        self._policy = policy or CompletionPolicy()
        self._clock = clock

    # ---- queries ----

    def get_task(self, task_id: str) -> Task:
        task = self._tasks.get_by_id(task_id)
        if not task:
            raise NotFoundError("Task not found")
        return task

    def list_tasks(self, *, since: Optional[int] = None) -> Sequence[Task]:
        return self._tasks.list_all(since=since)

    def list_for_assignee(self, *, user_id: str) -> Sequence[Task]:
        return [t for t in self._tasks.list_for_assignee(user_id) if _on_assignee_board(t)]

    def list_for_hr(self) -> dict[str, Sequence[Task]]:
        return {
            "toDelegate": self._tasks.list_by_status([TaskStatus.PENDING_HR]),
            "toReview": self._tasks.list_by_status([TaskStatus.REVIEW_BY_HR]),
        }

    def list_workflows(self) -> list[list[Task]]:
        return group_workflows(self._tasks.list_all())

    # ---- creation / editing ----

    def create_chain(
        self,
        *,
        current_role: Role,
        sender_id: str,
        sender_name: str,
        title: str,
        description: str,
        steps: Sequence[ChainStep],
        attachment: Optional[FileAttachment] = None,
        hr_reviewer_id: Optional[str] = None,
    ) -> list[Task]:
        if current_role not in SENDER_ROLES:
            raise AuthorizationError("Only directors, managers and unit leads can assign tasks")
        return self._chains.create(
            sender_id=sender_id,
            sender_name=sender_name,
            title=title,
            description=description,
            steps=steps,
            attachment=attachment,
            hr_reviewer_id=hr_reviewer_id,
        )

    def edit_task(
        self,
        *,
        current_role: Role,
        task_id: str,
        title: Optional[str] = None,
        description: Optional[str] = None,
        attachment: Optional[FileAttachment] = None,
        expected_version: Optional[int] = None,
    ) -> Task:
        if current_role not in _EDITORS:
            raise AuthorizationError("Only directors and managers can edit tasks")

        task = self._load(task_id, expected_version)
        changes = {}
        if title is not None:
            changes["title"] = require_non_empty(title, "Title")
        if description is not None:
            changes["description"] = description.strip()
        if attachment is not None:
            changes["attachment"] = attachment
        if not changes:
            return task
        return self._write(replace(task, **changes))

    def delete_task(self, *, current_role: Role, task_id: str) -> None:
        if current_role != Role.DIRECTOR:
            raise AuthorizationError("Only the director can delete tasks")
        if not self._tasks.delete(task_id):
            raise NotFoundError("Task not found")
        logger.info("Deleted task %s", task_id)

    # ---- transitions ----

    def forward_to_worker(self, *, current_role: Role, task_id: str, expected_version: Optional[int] = None) -> Task:
        if current_role not in _DELEGATORS:
            raise AuthorizationError("Only HR can forward tasks to workers")
        task = self._load(task_id, expected_version)
        return self._transition(replace(task, forwarded=True), TaskStatus.ASSIGNED_TO_WORKER)

    def start_progress(
        self, *, current_role: Role, user_id: str, task_id: str, expected_version: Optional[int] = None
    ) -> Task:
        task = self._load_as_assignee(current_role, user_id, task_id, expected_version)
        return self._transition(task, TaskStatus.IN_PROGRESS)

    def submit_for_review(
        self,
        *,
        current_role: Role,
        user_id: str,
        task_id: str,
        reviewer: str = "hr",
        expected_version: Optional[int] = None,
    ) -> Task:
        target = _REVIEW_TARGETS.get((reviewer or "").strip().lower())
        if target is None:
            raise ValidationError("Reviewer must be 'manager' or 'hr'")
        task = self._load_as_assignee(current_role, user_id, task_id, expected_version)
        return self._transition(task, target)

    def return_to_hr(
        self, *, current_role: Role, user_id: str, task_id: str, expected_version: Optional[int] = None
    ) -> Task:
        task = self._load_as_assignee(current_role, user_id, task_id, expected_version)
        return self._transition(task, TaskStatus.PENDING_HR)

    def move(
        self,
        *,
        current_role: Role,
        user_id: str,
        task_id: str,
        target: TaskStatus | str,
        expected_version: Optional[int] = None,
    ) -> Task:
        """Board drop: route a drag target to the matching operation."""
        try:
            target = TaskStatus(target)
        except ValueError:
            raise ValidationError(f"Unknown status '{target}'")

        kwargs = dict(current_role=current_role, task_id=task_id, expected_version=expected_version)
        if target == TaskStatus.ASSIGNED_TO_WORKER:
            return self.forward_to_worker(**kwargs)
        if target == TaskStatus.COMPLETED:
            return self.complete(user_id=user_id, **kwargs)

        task = self._load_as_assignee(current_role, user_id, task_id, expected_version)
        return self._transition(task, target)

    def complete(
        self,
        *,
        current_role: Role,
        user_id: str,
        task_id: str,
        result_attachment: Optional[FileAttachment] = None,
        report: str = "",
        expected_version: Optional[int] = None,
    ) -> Task:
        task = self._load_as_assignee(current_role, user_id, task_id, expected_version)
        self._policy.ensure_can_complete(current_role, task)

        description = task.description
        report = (report or "").strip()
        if report:
            description = f"{description}{REPORT_SEPARATOR}{report}"
        return self._finish(
            task,
            description=description,
            result_attachment=result_attachment or task.result_attachment,
        )

    def approve(self, *, current_role: Role, task_id: str, expected_version: Optional[int] = None) -> Task:
        if current_role not in REVIEWER_ROLES:
            raise AuthorizationError("Only reviewers can approve tasks")
        task = self._load(task_id, expected_version)
        if task.status not in (TaskStatus.IN_REVIEW, TaskStatus.REVIEW_BY_HR):
            raise ValidationError("Only tasks under review can be approved")
        return self._finish(task)

    def reject(self, *, current_role: Role, task_id: str, expected_version: Optional[int] = None) -> Task:
        if current_role not in REVIEWER_ROLES:
            raise AuthorizationError("Only reviewers can reject tasks")
        task = self._load(task_id, expected_version)
        if task.status not in (TaskStatus.IN_REVIEW, TaskStatus.REVIEW_BY_HR):
            raise ValidationError("Only tasks under review can be sent back")
        return self._transition(task, TaskStatus.IN_PROGRESS)

    # ---- sub-tasks ----

    def add_sub_task(
        self, *, current_role: Role, user_id: str, task_id: str, title: str, expected_version: Optional[int] = None
    ) -> Task:
        title = require_non_empty(title, "Sub-task title")
        task = self._load_as_assignee(current_role, user_id, task_id, expected_version)
        if task.status == TaskStatus.COMPLETED:
            raise ValidationError("Completed tasks cannot be changed")
        sub_task = SubTask(sub_task_id=new_id("sub"), title=title)
        return self._write(replace(task, sub_tasks=task.sub_tasks + (sub_task,)))

    def toggle_sub_task(
        self,
        *,
        current_role: Role,
        user_id: str,
        task_id: str,
        sub_task_id: str,
        completed: Optional[bool] = None,
        expected_version: Optional[int] = None,
    ) -> Task:
        task = self._load_as_assignee(current_role, user_id, task_id, expected_version)
        if task.status == TaskStatus.COMPLETED:
            raise ValidationError("Completed tasks cannot be changed")

        updated = []
        found = False
        for s in task.sub_tasks:
            if s.sub_task_id == sub_task_id:
                found = True
                s = replace(s, completed=(not s.completed) if completed is None else bool(completed))
            updated.append(s)
        if not found:
            raise NotFoundError("Sub-task not found")
        return self._write(replace(task, sub_tasks=tuple(updated)))

    # ---- internals ----

    def _load(self, task_id: str, expected_version: Optional[int]) -> Task:
        task = self.get_task(task_id)
        if expected_version is not None and int(expected_version) != task.version:
            raise ConcurrencyError("Task was changed by someone else; refresh and try again")
        return task

    def _load_as_assignee(
        self, current_role: Role, user_id: str, task_id: str, expected_version: Optional[int]
    ) -> Task:
        task = self._load(task_id, expected_version)
        if current_role in _ASSIGNEE_BOUND_ROLES and task.to_id != user_id:
            raise AuthorizationError("This task is not assigned to you")
        return task

    def _transition(self, task: Task, target: TaskStatus) -> Task:
        ensure_transition(task.status, target)
        updated = self._write(replace(task, status=target))
        logger.info("Task %s: %s -> %s", task.task_id, task.status.value, target.value)
        return updated

    def _finish(self, task: Task, **changes) -> Task:
        ensure_transition(task.status, TaskStatus.COMPLETED)
        now = self._clock()
        done = replace(task, status=TaskStatus.COMPLETED, updated_at=now, version=task.version + 1, **changes)
        batch = [(done, task.version)]

        successor = self._tasks.get_by_id(task.next_chain_task_id) if task.next_chain_task_id else None
        if task.next_chain_task_id and successor is None:
            logger.warning("Task %s links to missing successor %s", task.task_id, task.next_chain_task_id)
        if successor is not None:
            if successor.status == TaskStatus.ON_HOLD:
                ensure_transition(successor.status, TaskStatus.PENDING, system=True)
                activated = replace(successor, status=TaskStatus.PENDING, updated_at=now, version=successor.version + 1)
                batch.append((activated, successor.version))
            else:
                logger.warning(
                    "Successor %s of task %s is %s, not on hold; left unchanged",
                    successor.task_id,
                    task.task_id,
                    successor.status.value,
                )
                successor = None

        if not self._tasks.update_many(batch):
            raise ConcurrencyError("Task was changed by someone else; refresh and try again")

        logger.info("Task %s: %s -> completed", task.task_id, task.status.value)
        if successor is not None:
            logger.info("Activated chain step %s (on_hold -> pending)", successor.task_id)
        return done

    def _write(self, task: Task) -> Task:
        updated = replace(task, updated_at=self._clock(), version=task.version + 1)
        if not self._tasks.update_many([(updated, task.version)]):
            raise ConcurrencyError("Task was changed by someone else; refresh and try again")
        return updated
