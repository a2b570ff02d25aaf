"""In-memory repositories used across the test suite."""

from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime
from typing import Any, Iterable, Mapping, Optional, Sequence

from zencorp.attendance.face_verifier import FaceMatch
from zencorp.attendance.model import AttendanceRecord
from zencorp.catalogs.model import Catalog
from zencorp.core.enums import EmployeeStatus, TaskStatus
from zencorp.employees.model import Employee
from zencorp.messaging.model import Message
from zencorp.suggestions.model import Suggestion
from zencorp.tasks.model import Task
from zencorp.users.model import User


class InMemoryCatalogs:
    def __init__(self, catalogs: Iterable[Catalog] = ()):
        self._items = {c.catalog_id: c for c in catalogs}

    def list_all(self) -> Sequence[Catalog]:
        return list(self._items.values())

    def get_by_id(self, catalog_id: str) -> Optional[Catalog]:
        return self._items.get(catalog_id)

    def create(self, catalog: Catalog) -> None:
        self._items[catalog.catalog_id] = catalog

    def update_positions(self, catalog_id: str, positions: Sequence[str]) -> bool:
        if catalog_id not in self._items:
            return False
        self._items[catalog_id] = replace(self._items[catalog_id], positions=tuple(positions))
        return True


class InMemoryEmployees:
    def __init__(self, employees: Iterable[Employee] = ()):
        self._items = {e.employee_id: e for e in employees}

    def get_by_id(self, employee_id: str) -> Optional[Employee]:
        return self._items.get(employee_id)

    def get_by_qr_code(self, qr_code: str) -> Optional[Employee]:
        return next((e for e in self._items.values() if e.qr_code == qr_code), None)

    def list_all(self) -> Sequence[Employee]:
        return list(self._items.values())

    def create(self, employee: Employee) -> None:
        self._items[employee.employee_id] = employee

    def update_fields(self, employee_id: str, fields: Mapping[str, Any]) -> bool:
        if employee_id not in self._items:
            return False
        values = dict(fields)
        if "status" in values:
            values["status"] = EmployeeStatus(values["status"])
        if "is_online" in values:
            values["is_online"] = bool(values["is_online"])
        self._items[employee_id] = replace(self._items[employee_id], **values)
        return True

    def set_status(self, employee_id: str, status: EmployeeStatus) -> bool:
        fields: dict[str, Any] = {"status": status}
        if status != EmployeeStatus.ACTIVE:
            fields["is_online"] = False
        return self.update_fields(employee_id, fields)

    def set_online(self, employee_id: str, is_online: bool) -> bool:
        return self.update_fields(employee_id, {"is_online": is_online})

    def set_reports_to(self, employee_id: str, supervisor_id: Optional[str]) -> bool:
        return self.update_fields(employee_id, {"reports_to_id": supervisor_id})


class InMemoryUsers:
    def __init__(self, users: Iterable[User] = ()):
        self._items = {u.user_id: u for u in users}

    def get_by_id(self, user_id: str) -> Optional[User]:
        return self._items.get(user_id)

    def get_by_username(self, username: str) -> Optional[User]:
        return next((u for u in self._items.values() if u.username == username), None)

    def list_all(self) -> Sequence[User]:
        return list(self._items.values())

    def save(self, user: User) -> None:
        self._items[user.user_id] = user

    def delete_by_id(self, user_id: str) -> bool:
        return self._items.pop(user_id, None) is not None


class InMemoryTasks:
    """Mirrors the MySQL repository's compare-and-set semantics."""

    def __init__(self, tasks: Iterable[Task] = ()):
        self._items = {t.task_id: t for t in tasks}
        self.create_calls = 0
        self.update_calls = 0

    def get_by_id(self, task_id: str) -> Optional[Task]:
        return self._items.get(task_id)

    def list_all(self, *, since: Optional[int] = None) -> Sequence[Task]:
        items = list(self._items.values())
        if since is not None:
            items = [t for t in items if (t.updated_at or t.created_at) >= since]
        return sorted(items, key=lambda t: t.created_at, reverse=True)

    def list_for_assignee(self, to_id: str) -> Sequence[Task]:
        return [t for t in self.list_all() if t.to_id == to_id]

    def list_by_status(self, statuses: Iterable[TaskStatus]) -> Sequence[Task]:
        wanted = set(statuses)
        return [t for t in self.list_all() if t.status in wanted]

    def create_many(self, tasks: Sequence[Task]) -> None:
        self.create_calls += 1
        for t in tasks:
            self._items[t.task_id] = t

    def update_many(self, changes: Sequence[tuple[Task, int]]) -> bool:
        self.update_calls += 1
        for task, expected in changes:
            stored = self._items.get(task.task_id)
            if stored is None or stored.version != expected:
                return False
        for task, _ in changes:
            self._items[task.task_id] = task
        return True

    def delete(self, task_id: str) -> bool:
        return self._items.pop(task_id, None) is not None

    def bump_version(self, task_id: str) -> None:
        """Simulate a concurrent writer."""
        t = self._items[task_id]
        self._items[task_id] = replace(t, version=t.version + 1)


class InMemoryAttendance:
    def __init__(self, records: Iterable[AttendanceRecord] = ()):
        self._items = {r.record_id: r for r in records}

    def get_open_for_employee(self, employee_id: str, work_date: date) -> Optional[AttendanceRecord]:
        return next(
            (
                r
                for r in self._items.values()
                if r.employee_id == employee_id and r.work_date == work_date and r.clock_out is None
            ),
            None,
        )

    def list_for_date(self, work_date: date) -> Sequence[AttendanceRecord]:
        return [r for r in self._items.values() if r.work_date == work_date]

    def list_range(self, start: date, end: date) -> Sequence[AttendanceRecord]:
        rows = [r for r in self._items.values() if start <= r.work_date <= end]
        return sorted(rows, key=lambda r: r.clock_in)

    def list_recent(self, limit: int) -> Sequence[AttendanceRecord]:
        return sorted(self._items.values(), key=lambda r: r.clock_in, reverse=True)[:limit]

    def create(self, record: AttendanceRecord) -> None:
        self._items[record.record_id] = record

    def close(self, record_id: str, clock_out: datetime) -> bool:
        r = self._items.get(record_id)
        if not r or r.clock_out is not None:
            return False
        self._items[record_id] = replace(r, clock_out=clock_out)
        return True

    def delete(self, record_id: str) -> bool:
        return self._items.pop(record_id, None) is not None


class InMemoryMessages:
    def __init__(self):
        self._items: list[Message] = []

    def create(self, message: Message) -> None:
        self._items.append(message)

    def list_for_user(self, user_id: str) -> Sequence[Message]:
        return [m for m in self._items if user_id in (m.from_id, m.to_id)]

    def mark_read(self, *, to_id: str, from_id: str) -> int:
        count = 0
        for i, m in enumerate(self._items):
            if m.to_id == to_id and m.from_id == from_id and not m.read:
                self._items[i] = replace(m, read=True)
                count += 1
        return count

    def unread_counts(self, to_id: str) -> dict[str, int]:
        counts: dict[str, int] = {}
        for m in self._items:
            if m.to_id == to_id and not m.read:
                counts[m.from_id] = counts.get(m.from_id, 0) + 1
        return counts


class InMemorySuggestions:
    def __init__(self):
        self._items: dict[str, Suggestion] = {}

    def create(self, suggestion: Suggestion) -> None:
        self._items[suggestion.suggestion_id] = suggestion

    def get_by_id(self, suggestion_id: str) -> Optional[Suggestion]:
        return self._items.get(suggestion_id)

    def list_all(self) -> Sequence[Suggestion]:
        return list(self._items.values())

    def delete(self, suggestion_id: str) -> bool:
        return self._items.pop(suggestion_id, None) is not None


class FakeFaceVerifier:
    def __init__(self, matched: bool = True):
        self.matched = matched
        self.calls: list[tuple[bytes, bytes]] = []

    def verify(self, reference_image: bytes, probe_image: bytes) -> FaceMatch:
        self.calls.append((reference_image, probe_image))
        if self.matched:
            return FaceMatch(matched=True, distance=0.3)
        return FaceMatch(matched=False, distance=0.8, reason="Face does not match")


def login_as(client, *, user_id: str, role, name: str = "", employee_id: Optional[str] = None) -> None:
    """Put a logged-in user into the Flask test client's session."""
    with client.session_transaction() as sess:
        sess["user_id"] = user_id
        sess["role"] = role.value
        sess["name"] = name or user_id
        sess["employee_id"] = employee_id
