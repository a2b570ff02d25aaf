from __future__ import annotations

import pytest
from werkzeug.security import generate_password_hash

from zencorp.catalogs.model import Catalog
from zencorp.container import Container, build_services
from zencorp.core.enums import EmployeeStatus, Role
from zencorp.employees.model import Employee
from zencorp.main import create_app
from zencorp.users.model import User

from fakes import (
    FakeFaceVerifier,
    InMemoryAttendance,
    InMemoryCatalogs,
    InMemoryEmployees,
    InMemoryMessages,
    InMemorySuggestions,
    InMemoryTasks,
    InMemoryUsers,
)


def make_catalogs() -> InMemoryCatalogs:
    return InMemoryCatalogs(
        [
            Catalog(catalog_id="cat-hq", name="Headquarters"),
            Catalog(catalog_id="cat-hr", name="Human Resources", positions=("HR Head",), parent_id="cat-hq"),
            Catalog(catalog_id="cat-it", name="IT", positions=("Engineer",), parent_id="cat-hq"),
            Catalog(catalog_id="cat-it-ops", name="IT Operations", parent_id="cat-it"),
        ]
    )


def make_employees() -> InMemoryEmployees:
    return InMemoryEmployees(
        [
            Employee(employee_id="hr-1", first_name="Sarah", last_name="Hale", position="HR Head", catalog_id="cat-hr", qr_code="QR-HR-1"),
            Employee(
                employee_id="w1",
                first_name="Aziz",
                last_name="Karimov",
                position="Engineer",
                catalog_id="cat-it",
                working_hours="09:00 - 18:00",
                qr_code="QR-W1",
            ),
            Employee(
                employee_id="w2",
                first_name="Lena",
                last_name="Orlova",
                position="Operator",
                catalog_id="cat-it-ops",
                working_hours="08:30 - 17:30",
                qr_code="QR-W2",
            ),
            Employee(
                employee_id="w3",
                first_name="Old",
                last_name="Timer",
                catalog_id="cat-it",
                status=EmployeeStatus.ARCHIVED,
            ),
        ]
    )


def make_users() -> InMemoryUsers:
    return InMemoryUsers(
        [
            User(user_id="dir-1", full_name="Director", username="director", password_hash=generate_password_hash("director123"), role=Role.DIRECTOR),
            User(user_id="u-1", full_name="John Manager", username="admin", password_hash=generate_password_hash("manager123"), role=Role.MANAGER),
            User(
                user_id="hr-1",
                full_name="Sarah Hale",
                username="hr_boss",
                password_hash=generate_password_hash("hr12345"),
                role=Role.HR_HEAD,
                employee_id="hr-1",
            ),
            User(
                user_id="w1",
                full_name="Aziz Karimov",
                username="aziz",
                password_hash=generate_password_hash("worker123"),
                role=Role.EMPLOYEE,
                employee_id="w1",
            ),
        ]
    )


@pytest.fixture()
def face_verifier() -> FakeFaceVerifier:
    return FakeFaceVerifier(matched=True)


@pytest.fixture()
def container(face_verifier: FakeFaceVerifier) -> Container:
    return build_services(
        catalogs_repo=make_catalogs(),
        employees_repo=make_employees(),
        users_repo=make_users(),
        tasks_repo=InMemoryTasks(),
        attendance_repo=InMemoryAttendance(),
        messages_repo=InMemoryMessages(),
        suggestions_repo=InMemorySuggestions(),
        face_verifier=face_verifier,
    )


@pytest.fixture()
def app(container: Container):
    return create_app(container, settings_module="config.testing")


@pytest.fixture()
def client(app):
    return app.test_client()
