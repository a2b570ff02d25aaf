from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Callable

from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import from_epoch_ms, now_local
from ..core.constants import DEFAULT_ACTIVITY_DAYS
from ..core.enums import EmployeeStatus, TaskStatus
from ..employees.repository import EmployeeRepository
from ..tasks.repository import TaskRepository


class StatsService:
    """Read-only figures for the director dashboard."""

    def __init__(
        self,
        tasks: TaskRepository,
        employees: EmployeeRepository,
        attendance: AttendanceRepository,
        *,
        clock: Callable[[], datetime] = now_local,
    ):
        self._tasks = tasks
        self._employees = employees
        self._attendance = attendance
        self._clock = clock

    def dashboard_summary(self) -> dict:
        today = self._clock().date()
        tasks = self._tasks.list_all()
        records = self._attendance.list_for_date(today)
        return {
            "activeEmployees": sum(1 for e in self._employees.list_all() if e.status == EmployeeStatus.ACTIVE),
            "totalTasks": len(tasks),
            "completedTasks": sum(1 for t in tasks if t.status == TaskStatus.COMPLETED),
            "inOffice": len({r.employee_id for r in records if r.is_open}),
            "lateToday": len({r.employee_id for r in records if r.is_late}),
        }

    def activity_last_7_days(self, *, days: int = DEFAULT_ACTIVITY_DAYS) -> list[dict]:
        """Completed tasks per day, oldest day first, today included."""
        today = self._clock().date()
        window = [today - timedelta(days=offset) for offset in range(days - 1, -1, -1)]
        counts: dict[date, int] = {d: 0 for d in window}

        for task in self._tasks.list_by_status([TaskStatus.COMPLETED]):
            finished = from_epoch_ms(task.updated_at or task.created_at)
            if finished and finished.date() in counts:
                counts[finished.date()] += 1
        return [{"date": d.isoformat(), "count": counts[d]} for d in window]
