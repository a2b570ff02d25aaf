from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Roles used for role-based views and permission checks."""

    DIRECTOR = "director"
    MANAGER = "manager"
    HR_HEAD = "hr_head"
    UNIT_LEAD = "unit_lead"
    EMPLOYEE = "employee"


class TaskStatus(str, Enum):
    """Task workflow states stored in the tasks table."""

    PENDING = "pending"
    PENDING_HR = "pending_hr"
    ASSIGNED_TO_WORKER = "assigned_to_worker"
    IN_PROGRESS = "in_progress"
    IN_REVIEW = "in_review"
    REVIEW_BY_HR = "review_by_hr"
    ON_HOLD = "on_hold"
    COMPLETED = "completed"
    OVERDUE = "overdue"


class EmployeeStatus(str, Enum):
    ACTIVE = "active"
    ARCHIVED = "archived"
    INACTIVE = "inactive"


class AttendanceMethod(str, Enum):
    """How a clock-in was captured."""

    STANDARD = "standard"
    FACE_ID = "face_id"
    QR_CODE = "qr_code"
    MANUAL = "manual"


# Roles allowed to originate task chains.
SENDER_ROLES = frozenset({Role.DIRECTOR, Role.MANAGER, Role.UNIT_LEAD})

# Roles allowed to sign off reviewed work.
REVIEWER_ROLES = frozenset({Role.DIRECTOR, Role.MANAGER, Role.HR_HEAD})
