from __future__ import annotations

import io
from datetime import date

from flask import Flask, request, send_file, session

from ..common.datetime_utils import parse_iso_date
from ..common.web import api_view, current_role, json_body, ok
from ..container import Container
from ..core.enums import AttendanceMethod, Role
from ..core.exceptions import AuthorizationError, ValidationError


def _date_arg(name: str, default: date) -> date:
    raw = (request.args.get(name) or "").strip()
    if not raw:
        return default
    try:
        return parse_iso_date(raw)
    except ValueError:
        raise ValidationError(f"'{name}' must be YYYY-MM-DD")


def _own_or_admin(employee_id: str) -> str:
    """Staff clock themselves; directors, managers and HR may clock anyone."""
    if current_role() in (Role.EMPLOYEE, Role.UNIT_LEAD) and employee_id != session.get("employee_id"):
        raise AuthorizationError("You can only clock in for yourself")
    return employee_id


def register(app: Flask, container: Container) -> None:
    attendance = container.attendance_service

    @app.route("/api/attendance", methods=["GET"], endpoint="api_attendance")
    @api_view
    def api_attendance():
        work_date = _date_arg("date", date.today()) if request.args.get("date") else None
        records = attendance.list_records(work_date=work_date)
        return ok({"records": [r.as_dict() for r in records]})

    @app.route("/api/attendance/clock-in", methods=["POST"], endpoint="api_clock_in")
    @api_view
    def api_clock_in():
        data = json_body()
        employee_id = _own_or_admin(data.get("employeeId") or session.get("employee_id") or "")
        try:
            method = AttendanceMethod(data.get("method") or AttendanceMethod.STANDARD.value)
        except ValueError:
            raise ValidationError("Unknown clock-in method")
        record = attendance.clock_in(employee_id, method=method)
        return ok({"record": record.as_dict()}, 201)

    @app.route("/api/attendance/clock-out", methods=["POST"], endpoint="api_clock_out")
    @api_view
    def api_clock_out():
        data = json_body()
        employee_id = _own_or_admin(data.get("employeeId") or session.get("employee_id") or "")
        record = attendance.clock_out(employee_id)
        return ok({"record": record.as_dict()})

    @app.route("/api/attendance/face", methods=["POST"], endpoint="api_face_clock")
    @api_view
    def api_face_clock():
        data = json_body()
        employee_id = _own_or_admin(data.get("employeeId") or session.get("employee_id") or "")
        result = attendance.face_clock(employee_id, data.get("image", ""))
        return ok(result.as_dict())

    @app.route("/api/attendance/qr", methods=["POST"], endpoint="api_qr_clock")
    @api_view
    def api_qr_clock():
        if "image" in request.files:
            from .qr_scan import decode_qr_image

            code = decode_qr_image(request.files["image"].read())
            if not code:
                raise ValidationError("No QR code found in the image")
        else:
            code = (json_body().get("code") or "").strip()
            if not code:
                raise ValidationError("QR code is required")
        result = attendance.qr_clock(code)
        return ok(result.as_dict())

    @app.route("/api/attendance/<record_id>", methods=["DELETE"], endpoint="api_delete_attendance")
    @api_view
    def api_delete_attendance(record_id: str):
        attendance.delete_record(current_role=current_role(), record_id=record_id)
        return ok()

    @app.route("/api/attendance/export", methods=["GET"], endpoint="api_export_attendance")
    @api_view
    def api_export_attendance():
        today = date.today()
        start = _date_arg("start", today.replace(day=1))
        end = _date_arg("end", today)
        content = attendance.export_xlsx(current_role=current_role(), start=start, end=end)
        return send_file(
            io.BytesIO(content),
            mimetype="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
            as_attachment=True,
            download_name=f"attendance_{start.isoformat()}_{end.isoformat()}.xlsx",
        )
