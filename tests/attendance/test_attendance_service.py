from __future__ import annotations

import base64
from datetime import date, datetime

import pytest

from zencorp.core.enums import AttendanceMethod, Role
from zencorp.core.exceptions import AuthorizationError, NotFoundError, ValidationError

PHOTO = "data:image/jpeg;base64," + base64.b64encode(b"reference-photo-bytes" * 4).decode("ascii")
CAMERA_FRAME = "data:image/jpeg;base64," + base64.b64encode(b"camera-frame").decode("ascii")


def _at(hour: int, minute: int, second: int = 0) -> datetime:
    return datetime(2026, 3, 2, hour, minute, second)


def test_clock_in_on_time_and_late(container):
    svc = container.attendance_service

    on_time = svc.clock_in("w1", now=_at(9, 0, 45))
    assert on_time.is_late is False
    assert on_time.method == AttendanceMethod.STANDARD

    late = svc.clock_in("w2", now=_at(8, 31))
    assert late.is_late is True


def test_default_start_applies_without_working_hours(container):
    # hr-1 has no working hours; the 09:00 fallback applies.
    record = container.attendance_service.clock_in("hr-1", now=_at(9, 1))
    assert record.is_late is True


def test_grace_minutes_shift_the_threshold(container):
    from zencorp.attendance.service import AttendanceService

    svc = AttendanceService(container.attendance_repo, container.employee_service, grace_minutes=10)
    assert svc.clock_in("w1", now=_at(9, 10)).is_late is False
    assert svc.clock_in("w2", now=_at(8, 41)).is_late is True


def test_second_open_clock_in_is_rejected(container):
    svc = container.attendance_service
    svc.clock_in("w1", now=_at(9, 0))

    with pytest.raises(ValidationError, match="already clocked in"):
        svc.clock_in("w1", now=_at(10, 0))


def test_clock_out_closes_open_record(container):
    svc = container.attendance_service
    svc.clock_in("w1", now=_at(9, 0))

    record = svc.clock_out("w1", now=_at(18, 0))
    assert record.clock_out == _at(18, 0)

    with pytest.raises(ValidationError):
        svc.clock_out("w1", now=_at(18, 5))
    # After closing, a new shift may start the same day.
    assert svc.clock_in("w1", now=_at(19, 0)).is_open


def test_archived_employee_cannot_clock_in(container):
    with pytest.raises(ValidationError, match="archived"):
        container.attendance_service.clock_in("w3", now=_at(9, 0))


def test_qr_clock_toggles(container):
    svc = container.attendance_service

    first = svc.qr_clock("QR-W1", now=_at(8, 55))
    second = svc.qr_clock("QR-W1", now=_at(17, 0))

    assert first.action == "clock_in"
    assert first.record.method == AttendanceMethod.QR_CODE
    assert second.action == "clock_out"

    with pytest.raises(NotFoundError):
        svc.qr_clock("QR-UNKNOWN", now=_at(9, 0))


def test_face_clock_requires_reference_photo(container):
    with pytest.raises(ValidationError, match="reference photo"):
        container.attendance_service.face_clock("w1", CAMERA_FRAME, now=_at(9, 0))


def test_face_clock_matches_and_toggles(container, face_verifier):
    container.employee_service.update_employee(current_role=Role.HR_HEAD, employee_id="w1", updates={"photoUrl": PHOTO})

    result = container.attendance_service.face_clock("w1", CAMERA_FRAME, now=_at(9, 0))

    assert result.action == "clock_in"
    assert result.record.method == AttendanceMethod.FACE_ID
    reference, frame = face_verifier.calls[0]
    assert reference == b"reference-photo-bytes" * 4
    assert frame == b"camera-frame"


def test_face_mismatch_is_rejected(container, face_verifier):
    face_verifier.matched = False
    container.employee_service.update_employee(current_role=Role.HR_HEAD, employee_id="w1", updates={"photoUrl": PHOTO})

    with pytest.raises(ValidationError, match="does not match"):
        container.attendance_service.face_clock("w1", CAMERA_FRAME, now=_at(9, 0))
    assert container.attendance_service.list_records(work_date=date(2026, 3, 2)) == []


def test_delete_record_requires_admin(container):
    svc = container.attendance_service
    record = svc.clock_in("w1", now=_at(9, 0))

    with pytest.raises(AuthorizationError):
        svc.delete_record(current_role=Role.EMPLOYEE, record_id=record.record_id)
    svc.delete_record(current_role=Role.HR_HEAD, record_id=record.record_id)
    with pytest.raises(NotFoundError):
        svc.delete_record(current_role=Role.HR_HEAD, record_id=record.record_id)


def test_export_xlsx(container):
    svc = container.attendance_service
    svc.clock_in("w1", now=_at(9, 0))
    svc.clock_out("w1", now=_at(18, 0))
    svc.clock_in("w2", now=_at(8, 45))

    content = svc.export_xlsx(current_role=Role.DIRECTOR, start=date(2026, 3, 1), end=date(2026, 3, 31))

    assert content[:2] == b"PK"
    with pytest.raises(ValidationError):
        svc.export_xlsx(current_role=Role.DIRECTOR, start=date(2026, 3, 31), end=date(2026, 3, 1))
