from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Sequence

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.ids import new_id
from ..common.validators import require_min_length, require_non_empty
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, AuthorizationError, NotFoundError, ValidationError
from ..employees.service import EmployeeService
from .model import User
from .repository import UserRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionUser:
    """What we store into Flask session after login."""

    user_id: str
    full_name: str
    role: Role
    employee_id: Optional[str]


class AuthService:
    """Use case: authenticate user (login/logout)."""

    def __init__(self, users: UserRepository, employees: EmployeeService):
        self._users = users
        self._employees = employees

    def authenticate(self, username: str, password: str) -> SessionUser:
        user = self._users.get_by_username((username or "").strip())
        if not user or not user.is_active:
            logger.warning("Failed login for %r", username)
            raise AuthenticationError("Invalid username or password")

        try:
            ok = check_password_hash(user.password_hash, password or "")
        except ValueError:
            # Placeholder or corrupted hashes never match.
            ok = False

        if not ok:
            logger.warning("Failed login for %r", username)
            raise AuthenticationError("Invalid username or password")

        if user.employee_id:
            employee = self._employees.get(user.employee_id)
            if not employee.is_active:
                raise AuthenticationError("This employee account is archived")
            self._employees.set_online(user.employee_id, True)

        logger.info("User %s logged in as %s", user.user_id, user.role.value)
        return SessionUser(
            user_id=user.user_id,
            full_name=user.full_name,
            role=user.role,
            employee_id=user.employee_id,
        )

    def logout(self, *, employee_id: Optional[str]) -> None:
        if employee_id:
            self._employees.set_online(employee_id, False)


class AccountService:
    """Use case: manage accounts (director) and issue employee credentials (HR)."""

    def __init__(self, users: UserRepository, employees: EmployeeService):
        self._users = users
        self._employees = employees

    def list_accounts(self, *, current_role: Role) -> Sequence[User]:
        if current_role != Role.DIRECTOR:
            raise AuthorizationError("Only the director can view accounts")
        return self._users.list_all()

    def create_account(
        self,
        *,
        current_role: Role,
        full_name: str,
        username: str,
        password: str,
        role: Role,
    ) -> User:
        if current_role != Role.DIRECTOR:
            raise AuthorizationError("Only the director can create accounts")
        if role == Role.DIRECTOR:
            raise ValidationError("Director accounts cannot be created here")

        full_name = require_non_empty(full_name, "Full name")
        username = require_non_empty(username, "Username")
        require_min_length(password, "Password", 6)
        if self._users.get_by_username(username):
            raise ValidationError("Username already exists")

        user = User(
            user_id=new_id("u"),
            full_name=full_name,
            username=username,
            password_hash=generate_password_hash(password),
            role=role,
        )
        self._users.save(user)
        logger.info("Created %s account %s", role.value, username)
        return user

    def issue_credentials(
        self,
        *,
        current_role: Role,
        employee_id: str,
        login: str,
        password: str,
        role: Role = Role.EMPLOYEE,
    ) -> User:
        """Give an employee a login; re-issuing replaces the previous one."""
        if current_role not in (Role.DIRECTOR, Role.MANAGER, Role.HR_HEAD):
            raise AuthorizationError("You do not have permission to issue credentials")
        if role not in (Role.EMPLOYEE, Role.UNIT_LEAD, Role.HR_HEAD):
            raise ValidationError("Employee credentials can only carry staff roles")

        employee = self._employees.get(employee_id)
        login = require_non_empty(login, "Login")
        require_min_length(password, "Password", 6)

        holder = self._users.get_by_username(login)
        if holder and holder.user_id != employee_id:
            raise ValidationError("Login is already taken")

        user = User(
            user_id=employee_id,
            full_name=employee.full_name,
            username=login,
            password_hash=generate_password_hash(password),
            role=role,
            employee_id=employee_id,
        )
        self._users.save(user)
        self._employees.record_login(employee_id, login)
        logger.info("Issued credentials %s for employee %s", login, employee_id)
        return user

    def delete_account(self, *, current_role: Role, user_id: str) -> None:
        if current_role != Role.DIRECTOR:
            raise AuthorizationError("Only the director can delete accounts")

        user = self._users.get_by_id(user_id)
        if not user:
            raise NotFoundError("Account not found")
        if user.role == Role.DIRECTOR:
            raise ValidationError("The director account cannot be deleted")
        self._users.delete_by_id(user_id)
