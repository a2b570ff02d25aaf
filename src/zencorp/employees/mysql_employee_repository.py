from __future__ import annotations

from typing import Any, Mapping, Optional, Sequence

from ..core.enums import EmployeeStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, dump_json, fetchall, fetchone, load_json
from .model import EDITABLE_FIELDS, Employee
from .repository import EmployeeRepository

_COLUMNS = """
    id, first_name, last_name, middle_name, position, catalog_id, phone_number,
    residence, passport_serial, passport_pin, status, photo_url, qr_code,
    working_hours, working_days, system_login, reports_to_id, is_online
"""

_ALLOWED_COLUMNS = frozenset(EDITABLE_FIELDS.values()) | {"system_login", "status", "is_online", "reports_to_id"}


def _to_employee(r: dict) -> Employee:
    return Employee(
        employee_id=r["id"],
        first_name=r["first_name"],
        last_name=r["last_name"],
        middle_name=r.get("middle_name"),
        position=r.get("position"),
        catalog_id=r.get("catalog_id"),
        phone_number=r.get("phone_number"),
        residence=r.get("residence"),
        passport_serial=r.get("passport_serial"),
        passport_pin=r.get("passport_pin"),
        status=EmployeeStatus(r.get("status") or "active"),
        photo_url=r.get("photo_url"),
        qr_code=r.get("qr_code"),
        working_hours=r.get("working_hours"),
        working_days=tuple(load_json(r.get("working_days"), [])),
        system_login=r.get("system_login"),
        reports_to_id=r.get("reports_to_id"),
        is_online=bool(r.get("is_online")),
    )


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, employee_id: str) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM employees WHERE id=%s", (employee_id,))
            r = fetchone(cur)
            return _to_employee(r) if r else None

    def get_by_qr_code(self, qr_code: str) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM employees WHERE qr_code=%s", (qr_code,))
            r = fetchone(cur)
            return _to_employee(r) if r else None

    def list_all(self) -> Sequence[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM employees ORDER BY last_name, first_name")
            return [_to_employee(r) for r in fetchall(cur)]

    def create(self, employee: Employee) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                INSERT INTO employees({_COLUMNS})
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    employee.employee_id,
                    employee.first_name,
                    employee.last_name,
                    employee.middle_name,
                    employee.position,
                    employee.catalog_id,
                    employee.phone_number,
                    employee.residence,
                    employee.passport_serial,
                    employee.passport_pin,
                    employee.status.value,
                    employee.photo_url,
                    employee.qr_code,
                    employee.working_hours,
                    dump_json(list(employee.working_days)),
                    employee.system_login,
                    employee.reports_to_id,
                    1 if employee.is_online else 0,
                ),
            )

    def update_fields(self, employee_id: str, fields: Mapping[str, Any]) -> bool:
        unknown = set(fields) - _ALLOWED_COLUMNS
        if unknown:
            raise ValueError(f"Not updatable: {', '.join(sorted(unknown))}")
        if not fields:
            return False

        assignments = ", ".join(f"{column}=%s" for column in fields)
        values = [dump_json(list(v)) if column == "working_days" else v for column, v in fields.items()]
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"UPDATE employees SET {assignments} WHERE id=%s", (*values, employee_id))
            return cur.rowcount > 0

    def set_status(self, employee_id: str, status: EmployeeStatus) -> bool:
        fields: dict[str, Any] = {"status": status.value}
        if status != EmployeeStatus.ACTIVE:
            fields["is_online"] = 0
        return self.update_fields(employee_id, fields)

    def set_online(self, employee_id: str, is_online: bool) -> bool:
        return self.update_fields(employee_id, {"is_online": 1 if is_online else 0})

    def set_reports_to(self, employee_id: str, supervisor_id: Optional[str]) -> bool:
        return self.update_fields(employee_id, {"reports_to_id": supervisor_id})
