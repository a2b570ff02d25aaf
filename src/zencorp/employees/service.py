from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Mapping, Optional, Sequence

from ..catalogs.service import CatalogService
from ..common.ids import new_id
from ..common.validators import optional_text, require_non_empty
from ..core.enums import EmployeeStatus, Role
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from .model import EDITABLE_FIELDS, Employee
from .repository import EmployeeRepository

logger = logging.getLogger(__name__)

_HR_ROLES = frozenset({Role.DIRECTOR, Role.MANAGER, Role.HR_HEAD})

_VIEWS = ("workers", "archive", "catalog")


class EmployeeService:
    """Employee directory and roster lookups used by the task engine."""

    def __init__(self, employees: EmployeeRepository, catalogs: CatalogService):
        self._employees = employees
        self._catalogs = catalogs

    # ---- roster ----

    def get(self, employee_id: str) -> Employee:
        employee = self._employees.get_by_id(employee_id)
        if not employee:
            raise NotFoundError("Employee not found")
        return employee

    def get_active(self, employee_id: str) -> Employee:
        employee = self._employees.get_by_id(employee_id)
        if not employee:
            raise ValidationError("Selected worker does not exist")
        if not employee.is_active:
            raise ValidationError(f"{employee.full_name} is archived and cannot receive tasks")
        return employee

    def belongs_to(self, employee: Employee, catalog_id: str) -> bool:
        return bool(employee.catalog_id) and employee.catalog_id in self._catalogs.descendant_ids(catalog_id)

    def display_name(self, employee_id: str) -> str:
        employee = self._employees.get_by_id(employee_id)
        return employee.full_name if employee else "Unknown"

    def find_by_qr_code(self, qr_code: str) -> Optional[Employee]:
        code = (qr_code or "").strip()
        return self._employees.get_by_qr_code(code) if code else None

    def list_employees(
        self, *, view: str = "workers", catalog_id: Optional[str] = None, query: str = ""
    ) -> Sequence[Employee]:
        if view not in _VIEWS:
            raise ValidationError(f"Unknown view '{view}'")

        employees = list(self._employees.list_all())
        if view == "archive":
            employees = [e for e in employees if e.status == EmployeeStatus.ARCHIVED]
        else:
            employees = [e for e in employees if e.status != EmployeeStatus.ARCHIVED]
        if view == "catalog" and catalog_id:
            scope = self._catalogs.descendant_ids(catalog_id)
            employees = [e for e in employees if e.catalog_id in scope]

        needle = (query or "").strip().lower()
        if needle:
            employees = [
                e
                for e in employees
                if needle in e.full_name.lower() or needle in (e.position or "").lower()
            ]
        return employees

    def assignable_workers(self, catalog_id: Optional[str] = None) -> Sequence[Employee]:
        active = [e for e in self._employees.list_all() if e.is_active]
        if not catalog_id:
            return active
        scope = self._catalogs.descendant_ids(catalog_id)
        return [e for e in active if e.catalog_id in scope]

    # ---- directory edits ----

    def add_employee(self, *, current_role: Role, data: Mapping[str, Any]) -> Employee:
        self._require_hr(current_role)

        fields = self._project(data)
        first_name = require_non_empty(fields.pop("first_name", None), "First name")
        last_name = require_non_empty(fields.pop("last_name", None), "Last name")
        self._check_catalog(fields.get("catalog_id"))

        employee_id = new_id("emp")
        qr_code = fields.pop("qr_code", None) or f"QR-{employee_id.upper()}"
        self._check_qr_free(qr_code, None)

        employee = Employee(
            employee_id=employee_id,
            first_name=first_name,
            last_name=last_name,
            qr_code=qr_code,
            **fields,
        )
        self._employees.create(employee)
        logger.info("Added employee %s (%s)", employee_id, employee.full_name)
        return employee

    def update_employee(self, *, current_role: Role, employee_id: str, updates: Mapping[str, Any]) -> Employee:
        self._require_hr(current_role)
        current = self.get(employee_id)

        fields = self._project(updates)
        for required, label in (("first_name", "First name"), ("last_name", "Last name")):
            if required in fields:
                fields[required] = require_non_empty(fields[required], label)
        if "catalog_id" in fields:
            self._check_catalog(fields["catalog_id"])
        if fields.get("qr_code"):
            self._check_qr_free(fields["qr_code"], employee_id)
        if not fields:
            return current

        self._employees.update_fields(employee_id, fields)
        return replace(current, **fields)

    def archive(self, *, current_role: Role, employee_id: str) -> Employee:
        self._require_hr(current_role)
        current = self.get(employee_id)
        self._employees.set_status(employee_id, EmployeeStatus.ARCHIVED)
        logger.info("Archived employee %s", employee_id)
        return replace(current, status=EmployeeStatus.ARCHIVED, is_online=False)

    def restore(self, *, current_role: Role, employee_id: str) -> Employee:
        self._require_hr(current_role)
        current = self.get(employee_id)
        self._employees.set_status(employee_id, EmployeeStatus.ACTIVE)
        logger.info("Restored employee %s", employee_id)
        return replace(current, status=EmployeeStatus.ACTIVE)

    def set_online(self, employee_id: str, is_online: bool) -> None:
        if self._employees.get_by_id(employee_id):
            self._employees.set_online(employee_id, is_online)

    def set_reports_to(self, *, current_role: Role, subordinate_id: str, supervisor_id: str) -> Employee:
        self._require_hr(current_role)
        if subordinate_id == supervisor_id:
            raise ValidationError("An employee cannot report to themselves")

        subordinate = self.get(subordinate_id)
        self.get(supervisor_id)

        # Walk up from the supervisor; meeting the subordinate means a loop.
        by_id = {e.employee_id: e for e in self._employees.list_all()}
        cursor = by_id.get(supervisor_id)
        visited: set[str] = set()
        while cursor and cursor.reports_to_id and cursor.employee_id not in visited:
            visited.add(cursor.employee_id)
            if cursor.reports_to_id == subordinate_id:
                raise ValidationError("This link would create a reporting cycle")
            cursor = by_id.get(cursor.reports_to_id)

        self._employees.set_reports_to(subordinate_id, supervisor_id)
        return replace(subordinate, reports_to_id=supervisor_id)

    def clear_reports_to(self, *, current_role: Role, subordinate_id: str) -> Employee:
        self._require_hr(current_role)
        subordinate = self.get(subordinate_id)
        self._employees.set_reports_to(subordinate_id, None)
        return replace(subordinate, reports_to_id=None)

    def record_login(self, employee_id: str, login: str) -> None:
        self._employees.update_fields(employee_id, {"system_login": login})

    # ---- helpers ----

    @staticmethod
    def _require_hr(current_role: Role) -> None:
        if current_role not in _HR_ROLES:
            raise AuthorizationError("You do not have permission to manage employees")

    @staticmethod
    def _project(data: Mapping[str, Any]) -> dict[str, Any]:
        fields: dict[str, Any] = {}
        for key, value in data.items():
            column = EDITABLE_FIELDS.get(key)
            if column is None:
                continue
            if column == "working_days":
                fields[column] = tuple(str(d) for d in (value or ()))
            elif column in ("first_name", "last_name"):
                fields[column] = value
            else:
                fields[column] = optional_text(value) if isinstance(value, str) or value is None else value
        return fields

    def _check_catalog(self, catalog_id: Optional[str]) -> None:
        if catalog_id and catalog_id not in {c.catalog_id for c in self._catalogs.list_catalogs()}:
            raise ValidationError("Catalog does not exist")

    def _check_qr_free(self, qr_code: str, owner_id: Optional[str]) -> None:
        holder = self._employees.get_by_qr_code(qr_code)
        if holder and holder.employee_id != owner_id:
            raise ValidationError("QR code is already assigned to another employee")
