from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """A login account.

    Employee credentials share the employee's id so task assignments and
    messages resolve to the same identity.
    """

    user_id: str
    full_name: str
    username: str
    password_hash: str
    role: Role
    employee_id: Optional[str] = None
    is_active: bool = True

    def as_dict(self) -> dict:
        return {
            "id": self.user_id,
            "fullName": self.full_name,
            "username": self.username,
            "role": self.role.value,
            "employeeId": self.employee_id,
            "isActive": self.is_active,
        }
