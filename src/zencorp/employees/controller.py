from __future__ import annotations

from flask import Flask, Response, request

from ..attendance.qr import qr_data_url, render_qr_png
from ..common.web import api_view, current_role, json_body, ok
from ..container import Container
from ..core.exceptions import ValidationError


def register(app: Flask, container: Container) -> None:
    employees = container.employee_service
    accounts = container.account_service

    @app.route("/api/employees", methods=["GET"], endpoint="api_employees")
    @api_view
    def api_employees():
        rows = employees.list_employees(
            view=request.args.get("view", "workers"),
            catalog_id=request.args.get("catalogId") or None,
            query=request.args.get("q", ""),
        )
        return ok({"employees": [e.as_dict() for e in rows]})

    @app.route("/api/employees/assignable", methods=["GET"], endpoint="api_assignable_workers")
    @api_view
    def api_assignable_workers():
        rows = employees.assignable_workers(request.args.get("catalogId") or None)
        return ok({"employees": [e.as_dict() for e in rows]})

    @app.route("/api/employees", methods=["POST"], endpoint="api_add_employee")
    @api_view
    def api_add_employee():
        employee = employees.add_employee(current_role=current_role(), data=json_body())
        return ok({"employee": employee.as_dict()}, 201)

    @app.route("/api/employees/<employee_id>", methods=["GET"], endpoint="api_employee")
    @api_view
    def api_employee(employee_id: str):
        return ok({"employee": employees.get(employee_id).as_dict()})

    @app.route("/api/employees/<employee_id>", methods=["PUT"], endpoint="api_update_employee")
    @api_view
    def api_update_employee(employee_id: str):
        employee = employees.update_employee(current_role=current_role(), employee_id=employee_id, updates=json_body())
        return ok({"employee": employee.as_dict()})

    @app.route("/api/employees/<employee_id>/archive", methods=["POST"], endpoint="api_archive_employee")
    @api_view
    def api_archive_employee(employee_id: str):
        return ok({"employee": employees.archive(current_role=current_role(), employee_id=employee_id).as_dict()})

    @app.route("/api/employees/<employee_id>/restore", methods=["POST"], endpoint="api_restore_employee")
    @api_view
    def api_restore_employee(employee_id: str):
        return ok({"employee": employees.restore(current_role=current_role(), employee_id=employee_id).as_dict()})

    @app.route("/api/employees/<employee_id>/reports-to", methods=["PUT"], endpoint="api_set_reports_to")
    @api_view
    def api_set_reports_to(employee_id: str):
        supervisor_id = (json_body().get("supervisorId") or "").strip()
        if supervisor_id:
            employee = employees.set_reports_to(
                current_role=current_role(), subordinate_id=employee_id, supervisor_id=supervisor_id
            )
        else:
            employee = employees.clear_reports_to(current_role=current_role(), subordinate_id=employee_id)
        return ok({"employee": employee.as_dict()})

    @app.route("/api/employees/<employee_id>/credentials", methods=["POST"], endpoint="api_issue_credentials")
    @api_view
    def api_issue_credentials(employee_id: str):
        data = json_body()
        user = accounts.issue_credentials(
            current_role=current_role(),
            employee_id=employee_id,
            login=data.get("login", ""),
            password=data.get("password", ""),
        )
        return ok({"account": user.as_dict()}, 201)

    @app.route("/api/employees/<employee_id>/qr", methods=["GET"], endpoint="api_employee_qr")
    @api_view
    def api_employee_qr(employee_id: str):
        employee = employees.get(employee_id)
        if not employee.qr_code:
            raise ValidationError("Employee has no QR code")
        if request.args.get("format") == "png":
            return Response(render_qr_png(employee.qr_code), mimetype="image/png")
        return ok({"qrCode": employee.qr_code, "image": qr_data_url(employee.qr_code)})
