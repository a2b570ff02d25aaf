from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import AttendanceMethod


@dataclass(frozen=True)
class AttendanceRecord:
    record_id: str
    employee_id: str
    employee_name: str
    position: Optional[str]
    work_date: date
    clock_in: datetime
    clock_out: Optional[datetime]
    method: AttendanceMethod
    is_late: bool = False

    @property
    def is_open(self) -> bool:
        return self.clock_out is None

    def as_dict(self) -> dict:
        return {
            "id": self.record_id,
            "employeeId": self.employee_id,
            "employeeName": self.employee_name,
            "position": self.position,
            "date": self.work_date.isoformat(),
            "clockIn": self.clock_in.isoformat(timespec="seconds"),
            "clockOut": self.clock_out.isoformat(timespec="seconds") if self.clock_out else None,
            "method": self.method.value,
            "isLate": self.is_late,
        }


@dataclass(frozen=True)
class ClockResult:
    """Outcome of a toggle-style clock (face or QR)."""

    action: str  # "clock_in" | "clock_out"
    record: AttendanceRecord

    def as_dict(self) -> dict:
        return {"action": self.action, "record": self.record.as_dict()}
