from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol, Sequence

from ..core.enums import EmployeeStatus
from .model import Employee


class EmployeeRepository(Protocol):
    def get_by_id(self, employee_id: str) -> Optional[Employee]:
        raise NotImplementedError

    def get_by_qr_code(self, qr_code: str) -> Optional[Employee]:
        raise NotImplementedError

    def list_all(self) -> Sequence[Employee]:
        raise NotImplementedError

    def create(self, employee: Employee) -> None:
        raise NotImplementedError

    def update_fields(self, employee_id: str, fields: Mapping[str, Any]) -> bool:
        """Update column -> value pairs; keys are already whitelisted column names."""
        raise NotImplementedError

    def set_status(self, employee_id: str, status: EmployeeStatus) -> bool:
        raise NotImplementedError

    def set_online(self, employee_id: str, is_online: bool) -> bool:
        raise NotImplementedError

    def set_reports_to(self, employee_id: str, supervisor_id: Optional[str]) -> bool:
        raise NotImplementedError
