from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from ..core.enums import TaskStatus
from ..core.exceptions import ValidationError


@dataclass(frozen=True)
class FileAttachment:
    """An inline file: name, MIME type, byte size and base64/data-URL payload."""

    name: str
    type: str
    size: int
    data: str

    @classmethod
    def from_dict(cls, data: Optional[dict[str, Any]]) -> Optional["FileAttachment"]:
        if data is None or data == {}:
            return None
        if not isinstance(data, dict):
            raise ValidationError("Attachment must be an object")
        try:
            size = int(data.get("size") or 0)
        except (TypeError, ValueError):
            raise ValidationError("Attachment size must be an integer")
        return cls(
            name=str(data.get("name") or "attachment"),
            type=str(data.get("type") or "application/octet-stream"),
            size=size,
            data=str(data.get("data") or ""),
        )

    def as_dict(self) -> dict:
        return {"name": self.name, "type": self.type, "size": self.size, "data": self.data}


@dataclass(frozen=True)
class SubTask:
    sub_task_id: str
    title: str
    completed: bool = False

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SubTask":
        return cls(
            sub_task_id=str(data["id"]),
            title=str(data.get("title") or ""),
            completed=bool(data.get("completed", False)),
        )

    def as_dict(self) -> dict:
        return {"id": self.sub_task_id, "title": self.title, "completed": self.completed}


@dataclass(frozen=True)
class ChainStep:
    """One requested stage of a chain: an optional department filter and a worker."""

    worker_id: Optional[str]
    department_id: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ChainStep":
        if not isinstance(data, dict):
            raise ValidationError("Each step must be an object with a workerId")
        return cls(
            worker_id=(data.get("workerId") or data.get("worker_id") or None),
            department_id=(data.get("departmentId") or data.get("department_id") or None),
        )


@dataclass(frozen=True)
class Task:
    task_id: str
    title: str
    description: str
    from_id: str
    from_name: str
    to_id: str
    to_name: str
    status: TaskStatus
    created_at: int
    updated_at: Optional[int] = None
    attachment: Optional[FileAttachment] = None
    result_attachment: Optional[FileAttachment] = None
    hr_reviewer_id: Optional[str] = None
    is_chain_task: bool = False
    chain_step: Optional[int] = None
    parent_task_id: Optional[str] = None
    next_chain_task_id: Optional[str] = None
    forwarded: bool = False
    sub_tasks: tuple[SubTask, ...] = field(default_factory=tuple)
    version: int = 1

    @property
    def is_chain_member(self) -> bool:
        return self.is_chain_task or bool(self.parent_task_id) or bool(self.next_chain_task_id)

    @property
    def has_open_sub_tasks(self) -> bool:
        return any(not s.completed for s in self.sub_tasks)

    def as_dict(self) -> dict:
        return {
            "id": self.task_id,
            "title": self.title,
            "description": self.description,
            "fromId": self.from_id,
            "fromName": self.from_name,
            "toId": self.to_id,
            "toName": self.to_name,
            "status": self.status.value,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
            "attachment": self.attachment.as_dict() if self.attachment else None,
            "resultAttachment": self.result_attachment.as_dict() if self.result_attachment else None,
            "hrReviewerId": self.hr_reviewer_id,
            "isChainTask": self.is_chain_task,
            "chainStep": self.chain_step,
            "parentTaskId": self.parent_task_id,
            "nextChainTaskId": self.next_chain_task_id,
            "forwarded": self.forwarded,
            "subTasks": [s.as_dict() for s in self.sub_tasks],
            "version": self.version,
        }
