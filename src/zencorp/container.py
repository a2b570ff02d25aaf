from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Optional

from .attendance.face_verifier import FaceVerifier
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .catalogs.mysql_catalog_repository import MySQLCatalogRepository
from .catalogs.repository import CatalogRepository
from .catalogs.service import CatalogService
from .core.constants import (
    DEFAULT_FACE_MATCH_THRESHOLD,
    DEFAULT_LATE_AFTER,
    DEFAULT_LATE_GRACE_MINUTES,
    DEFAULT_SUBTASK_GATE_ROLES,
)
from .database.connection import DBConfig, DatabaseConnection
from .employees.mysql_employee_repository import MySQLEmployeeRepository
from .employees.repository import EmployeeRepository
from .employees.service import EmployeeService
from .messaging.mysql_message_repository import MySQLMessageRepository
from .messaging.repository import MessageRepository
from .messaging.service import MessageService
from .stats.service import StatsService
from .suggestions.mysql_suggestion_repository import MySQLSuggestionRepository
from .suggestions.repository import SuggestionRepository
from .suggestions.service import SuggestionService
from .tasks.chain import ChainBuilder
from .tasks.mysql_task_repository import MySQLTaskRepository
from .tasks.policy import CompletionPolicy
from .tasks.repository import TaskRepository
from .tasks.service import TaskWorkflowService
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import AccountService, AuthService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    catalogs_repo: CatalogRepository
    employees_repo: EmployeeRepository
    users_repo: UserRepository
    tasks_repo: TaskRepository
    attendance_repo: AttendanceRepository
    messages_repo: MessageRepository
    suggestions_repo: SuggestionRepository

    catalog_service: CatalogService
    employee_service: EmployeeService
    auth_service: AuthService
    account_service: AccountService
    task_service: TaskWorkflowService
    attendance_service: AttendanceService
    message_service: MessageService
    suggestion_service: SuggestionService
    stats_service: StatsService


def build_services(
    *,
    catalogs_repo: CatalogRepository,
    employees_repo: EmployeeRepository,
    users_repo: UserRepository,
    tasks_repo: TaskRepository,
    attendance_repo: AttendanceRepository,
    messages_repo: MessageRepository,
    suggestions_repo: SuggestionRepository,
    conn: Optional[DatabaseConnection] = None,
    face_verifier: Optional[FaceVerifier] = None,
    late_after: str = DEFAULT_LATE_AFTER,
    late_grace_minutes: int = DEFAULT_LATE_GRACE_MINUTES,
    subtask_gate_roles: Iterable[str] = DEFAULT_SUBTASK_GATE_ROLES,
) -> Container:
    """Wire services over any repository implementations (MySQL or in-memory)."""
    catalog_service = CatalogService(catalogs_repo)
    employee_service = EmployeeService(employees_repo, catalog_service)
    message_service = MessageService(messages_repo)
    chain_builder = ChainBuilder(tasks_repo, employee_service)

    return Container(
        conn=conn,
        catalogs_repo=catalogs_repo,
        employees_repo=employees_repo,
        users_repo=users_repo,
        tasks_repo=tasks_repo,
        attendance_repo=attendance_repo,
        messages_repo=messages_repo,
        suggestions_repo=suggestions_repo,
        catalog_service=catalog_service,
        employee_service=employee_service,
        auth_service=AuthService(users_repo, employee_service),
        account_service=AccountService(users_repo, employee_service),
        task_service=TaskWorkflowService(
            tasks_repo,
            chain_builder,
            policy=CompletionPolicy(subtask_gate_roles),
        ),
        attendance_service=AttendanceService(
            attendance_repo,
            employee_service,
            face_verifier=face_verifier,
            late_after=late_after,
            grace_minutes=late_grace_minutes,
        ),
        message_service=message_service,
        suggestion_service=SuggestionService(suggestions_repo, message_service),
        stats_service=StatsService(tasks_repo, employees_repo, attendance_repo),
    )


def build_container(
    *,
    db_config: dict,
    face_verifier_enabled: bool = False,
    face_match_threshold: float = DEFAULT_FACE_MATCH_THRESHOLD,
    late_after: str = DEFAULT_LATE_AFTER,
    late_grace_minutes: int = DEFAULT_LATE_GRACE_MINUTES,
    subtask_gate_roles: Iterable[str] = DEFAULT_SUBTASK_GATE_ROLES,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    face_verifier = None
    if face_verifier_enabled:
        # dlib/opencv are heavy optional installs; only load them when asked.
        from .attendance.face_recognition_verifier import FaceRecognitionVerifier

        face_verifier = FaceRecognitionVerifier(threshold=face_match_threshold)
        logger.info("Face verification enabled (threshold %.2f)", face_match_threshold)

    return build_services(
        conn=conn,
        catalogs_repo=MySQLCatalogRepository(conn),
        employees_repo=MySQLEmployeeRepository(conn),
        users_repo=MySQLUserRepository(conn),
        tasks_repo=MySQLTaskRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        messages_repo=MySQLMessageRepository(conn),
        suggestions_repo=MySQLSuggestionRepository(conn),
        face_verifier=face_verifier,
        late_after=late_after,
        late_grace_minutes=late_grace_minutes,
        subtask_gate_roles=subtask_gate_roles,
    )
