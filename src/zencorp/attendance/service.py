from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date, datetime, time, timedelta
from typing import Callable, Optional, Sequence

from ..common.datetime_utils import now_local, parse_hhmm, working_hours_start
from ..common.ids import new_id
from ..core.constants import DEFAULT_LATE_AFTER, DEFAULT_LATE_GRACE_MINUTES, DEFAULT_LIST_LIMIT
from ..core.enums import AttendanceMethod, Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..employees.model import Employee
from ..employees.service import EmployeeService
from .export import build_attendance_xlsx
from .face_verifier import FaceVerifier, decode_image_payload
from .model import AttendanceRecord, ClockResult
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)

_RECORD_ADMINS = frozenset({Role.DIRECTOR, Role.MANAGER, Role.HR_HEAD})

# Shorter payloads cannot hold a usable photo.
_MIN_PHOTO_PAYLOAD = 50


class AttendanceService:
    def __init__(
        self,
        attendance: AttendanceRepository,
        employees: EmployeeService,
        *,
        face_verifier: Optional[FaceVerifier] = None,
        late_after: str = DEFAULT_LATE_AFTER,
        grace_minutes: int = DEFAULT_LATE_GRACE_MINUTES,
        clock: Callable[[], datetime] = now_local,
    ):
        self._attendance = attendance
        self._employees = employees
        self._face_verifier = face_verifier
        self._late_after = parse_hhmm(late_after)
        self._grace = timedelta(minutes=int(grace_minutes))
        self._clock = clock

    def is_late(self, employee: Employee, at: datetime) -> bool:
        start: time = working_hours_start(employee.working_hours) or self._late_after
        threshold = datetime.combine(at.date(), start) + self._grace
        return at.replace(second=0, microsecond=0) > threshold

    def clock_in(
        self, employee_id: str, *, method: AttendanceMethod = AttendanceMethod.STANDARD, now: Optional[datetime] = None
    ) -> AttendanceRecord:
        now = now or self._clock()
        employee = self._employees.get(employee_id)
        if not employee.is_active:
            raise ValidationError(f"{employee.full_name} is archived")

        if self._attendance.get_open_for_employee(employee_id, now.date()):
            raise ValidationError(f"{employee.full_name} is already clocked in")

        record = AttendanceRecord(
            record_id=new_id("att"),
            employee_id=employee_id,
            employee_name=employee.full_name,
            position=employee.position,
            work_date=now.date(),
            clock_in=now,
            clock_out=None,
            method=AttendanceMethod(method),
            is_late=self.is_late(employee, now),
        )
        self._attendance.create(record)
        logger.info(
            "Clock-in %s via %s%s", employee_id, record.method.value, " (late)" if record.is_late else ""
        )
        return record

    def clock_out(self, employee_id: str, *, now: Optional[datetime] = None) -> AttendanceRecord:
        now = now or self._clock()
        record = self._attendance.get_open_for_employee(employee_id, now.date())
        if not record:
            raise ValidationError("No open clock-in for today")
        if not self._attendance.close(record.record_id, now):
            raise ValidationError("Clock-out failed")
        logger.info("Clock-out %s", employee_id)
        return replace(record, clock_out=now)

    def toggle(
        self, employee_id: str, *, method: AttendanceMethod, now: Optional[datetime] = None
    ) -> ClockResult:
        now = now or self._clock()
        if self._attendance.get_open_for_employee(employee_id, now.date()):
            return ClockResult(action="clock_out", record=self.clock_out(employee_id, now=now))
        return ClockResult(action="clock_in", record=self.clock_in(employee_id, method=method, now=now))

    def face_clock(self, employee_id: str, image: str, *, now: Optional[datetime] = None) -> ClockResult:
        if self._face_verifier is None:
            raise ValidationError("Face verification is not enabled")

        employee = self._employees.get(employee_id)
        photo = employee.photo_url or ""
        reference = decode_image_payload(photo) if len(photo) >= _MIN_PHOTO_PAYLOAD else b""
        if not reference:
            raise ValidationError("No reference photo found in system")

        probe = decode_image_payload(image or "")
        if not probe:
            raise ValidationError("Camera image is missing")

        match = self._face_verifier.verify(reference, probe)
        if not match.matched:
            logger.warning("Face verification failed for %s: %s", employee_id, match.reason)
            raise ValidationError(match.reason or "Face does not match")
        return self.toggle(employee_id, method=AttendanceMethod.FACE_ID, now=now)

    def qr_clock(self, code: str, *, now: Optional[datetime] = None) -> ClockResult:
        employee = self._employees.find_by_qr_code(code)
        if not employee:
            logger.warning("Unknown badge code scanned: %r", code)
            raise NotFoundError("Unknown QR code")
        return self.toggle(employee.employee_id, method=AttendanceMethod.QR_CODE, now=now)

    def delete_record(self, *, current_role: Role, record_id: str) -> None:
        if current_role not in _RECORD_ADMINS:
            raise AuthorizationError("You do not have permission to delete attendance records")
        if not self._attendance.delete(record_id):
            raise NotFoundError("Attendance record not found")

    def list_records(self, *, work_date: Optional[date] = None, limit: int = DEFAULT_LIST_LIMIT) -> Sequence[AttendanceRecord]:
        if work_date:
            return self._attendance.list_for_date(work_date)
        return self._attendance.list_recent(limit)

    def export_xlsx(self, *, current_role: Role, start: date, end: date) -> bytes:
        if current_role not in _RECORD_ADMINS:
            raise AuthorizationError("You do not have permission to export attendance")
        if end < start:
            raise ValidationError("End date must not be before start date")
        return build_attendance_xlsx(self._attendance.list_range(start, end))
