from __future__ import annotations

import logging
from typing import Iterable, Optional, Sequence

from ..core.enums import TaskStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, dump_json, fetchall, fetchone, load_json, placeholders
from .model import FileAttachment, SubTask, Task
from .repository import TaskRepository

logger = logging.getLogger(__name__)

_COLUMNS = """
    id, title, description, from_id, from_name, to_id, to_name, status,
    created_at, updated_at, attachment, result_attachment, hr_reviewer_id,
    is_chain_task, chain_step, parent_task_id, next_chain_task_id, sub_tasks, forwarded, version
"""


class _StaleVersion(Exception):
    pass


def _to_task(r: dict) -> Task:
    return Task(
        task_id=r["id"],
        title=r["title"],
        description=r.get("description") or "",
        from_id=r["from_id"],
        from_name=r.get("from_name") or "",
        to_id=r["to_id"],
        to_name=r.get("to_name") or "",
        status=TaskStatus(r["status"]),
        created_at=int(r["created_at"]),
        updated_at=int(r["updated_at"]) if r.get("updated_at") is not None else None,
        attachment=FileAttachment.from_dict(load_json(r.get("attachment"))),
        result_attachment=FileAttachment.from_dict(load_json(r.get("result_attachment"))),
        hr_reviewer_id=r.get("hr_reviewer_id"),
        is_chain_task=bool(r.get("is_chain_task")),
        chain_step=r.get("chain_step"),
        parent_task_id=r.get("parent_task_id"),
        next_chain_task_id=r.get("next_chain_task_id"),
        sub_tasks=tuple(SubTask.from_dict(s) for s in load_json(r.get("sub_tasks"), [])),
        forwarded=bool(r.get("forwarded")),
        version=int(r.get("version") or 1),
    )


def _attachment_json(value: Optional[FileAttachment]) -> Optional[str]:
    return dump_json(value.as_dict()) if value else None


class MySQLTaskRepository(TaskRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, task_id: str) -> Optional[Task]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM tasks WHERE id=%s", (task_id,))
            r = fetchone(cur)
            return _to_task(r) if r else None

    def list_all(self, *, since: Optional[int] = None) -> Sequence[Task]:
        sql = f"SELECT {_COLUMNS} FROM tasks"
        params: tuple = ()
        if since is not None:
            sql += " WHERE COALESCE(updated_at, created_at) >= %s"
            params = (int(since),)
        sql += " ORDER BY created_at DESC, id"
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, params)
            return [_to_task(r) for r in fetchall(cur)]

    def list_for_assignee(self, to_id: str) -> Sequence[Task]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM tasks WHERE to_id=%s ORDER BY created_at DESC, id",
                (to_id,),
            )
            return [_to_task(r) for r in fetchall(cur)]

    def list_by_status(self, statuses: Iterable[TaskStatus]) -> Sequence[Task]:
        values = [s.value for s in statuses]
        if not values:
            return []
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM tasks WHERE status IN ({placeholders(len(values))}) "
                "ORDER BY created_at DESC, id",
                tuple(values),
            )
            return [_to_task(r) for r in fetchall(cur)]

    def create_many(self, tasks: Sequence[Task]) -> None:
        rows = [
            (
                t.task_id,
                t.title,
                t.description,
                t.from_id,
                t.from_name,
                t.to_id,
                t.to_name,
                t.status.value,
                t.created_at,
                t.updated_at,
                _attachment_json(t.attachment),
                _attachment_json(t.result_attachment),
                t.hr_reviewer_id,
                1 if t.is_chain_task else 0,
                t.chain_step,
                t.parent_task_id,
                t.next_chain_task_id,
                dump_json([s.as_dict() for s in t.sub_tasks]),
                1 if t.forwarded else 0,
                t.version,
            )
            for t in tasks
        ]
        with db_cursor(self._conn_factory) as (_, cur):
            cur.executemany(
                f"INSERT INTO tasks({_COLUMNS}) VALUES({placeholders(20)})",
                rows,
            )

    def update_many(self, changes: Sequence[tuple[Task, int]]) -> bool:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                for task, expected_version in changes:
                    cur.execute(
                        """
                        UPDATE tasks
                        SET title=%s, description=%s, to_id=%s, to_name=%s, status=%s,
                            updated_at=%s, attachment=%s, result_attachment=%s,
                            hr_reviewer_id=%s, sub_tasks=%s, forwarded=%s, version=%s
                        WHERE id=%s AND version=%s
                        """,
                        (
                            task.title,
                            task.description,
                            task.to_id,
                            task.to_name,
                            task.status.value,
                            task.updated_at,
                            _attachment_json(task.attachment),
                            _attachment_json(task.result_attachment),
                            task.hr_reviewer_id,
                            dump_json([s.as_dict() for s in task.sub_tasks]),
                            1 if task.forwarded else 0,
                            task.version,
                            task.task_id,
                            int(expected_version),
                        ),
                    )
                    if cur.rowcount == 0:
                        raise _StaleVersion(task.task_id)
        except _StaleVersion as e:
            logger.warning("Stale write rejected for task %s", e)
            return False
        return True

    def delete(self, task_id: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM tasks WHERE id=%s", (task_id,))
            return cur.rowcount > 0
