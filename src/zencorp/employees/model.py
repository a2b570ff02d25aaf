from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

from ..core.enums import EmployeeStatus


@dataclass(frozen=True)
class Employee:
    employee_id: str
    first_name: str
    last_name: str
    middle_name: Optional[str] = None
    position: Optional[str] = None
    catalog_id: Optional[str] = None
    phone_number: Optional[str] = None
    residence: Optional[str] = None
    passport_serial: Optional[str] = None
    passport_pin: Optional[str] = None
    status: EmployeeStatus = EmployeeStatus.ACTIVE
    photo_url: Optional[str] = None
    qr_code: Optional[str] = None
    working_hours: Optional[str] = None
    working_days: tuple[str, ...] = field(default_factory=tuple)
    system_login: Optional[str] = None
    reports_to_id: Optional[str] = None
    is_online: bool = False

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def is_active(self) -> bool:
        return self.status == EmployeeStatus.ACTIVE

    def as_dict(self) -> dict:
        return {
            "id": self.employee_id,
            "firstName": self.first_name,
            "lastName": self.last_name,
            "middleName": self.middle_name,
            "position": self.position,
            "catalogId": self.catalog_id,
            "phoneNumber": self.phone_number,
            "residence": self.residence,
            "passportSerial": self.passport_serial,
            "passportPIN": self.passport_pin,
            "status": self.status.value,
            "photoUrl": self.photo_url,
            "qrCode": self.qr_code,
            "workingHours": self.working_hours,
            "workingDays": list(self.working_days),
            "systemLogin": self.system_login,
            "reportsToId": self.reports_to_id,
            "isOnline": self.is_online,
        }


# API field name -> column name for the fields an update may touch.
EDITABLE_FIELDS = {
    "firstName": "first_name",
    "lastName": "last_name",
    "middleName": "middle_name",
    "position": "position",
    "catalogId": "catalog_id",
    "phoneNumber": "phone_number",
    "residence": "residence",
    "passportSerial": "passport_serial",
    "passportPIN": "passport_pin",
    "photoUrl": "photo_url",
    "qrCode": "qr_code",
    "workingHours": "working_hours",
    "workingDays": "working_days",
}
