from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from typing import Optional

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .core.constants import DEFAULT_TOKEN_TTL_DAYS
from .courses.mysql_course_repository import MySQLCourseRepository, MySQLSectionRepository
from .courses.repository import CourseRepository, SectionRepository
from .courses.service import CourseService
from .database.connection import DBConfig, DatabaseConnection
from .events.mysql_event_repository import MySQLEventRepository
from .events.qr import QrCodeService
from .events.repository import EventRepository
from .events.scope import EventScopeResolver
from .events.service import EventService
from .reports.service import ReportService
from .settings.mysql_settings_repository import MySQLSettingsRepository
from .settings.repository import SettingsRepository
from .settings.service import SettingsService
from .students.mysql_student_repository import MySQLStudentRepository
from .students.repository import StudentRepository
from .students.service import StudentService
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import AuthService
from .users.tokens import TokenService


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    users_repo: UserRepository
    students_repo: StudentRepository
    courses_repo: CourseRepository
    sections_repo: SectionRepository
    events_repo: EventRepository
    attendance_repo: AttendanceRepository
    settings_repo: SettingsRepository

    qr_service: QrCodeService
    token_service: TokenService
    auth_service: AuthService
    course_service: CourseService
    student_service: StudentService
    event_service: EventService
    scope_resolver: EventScopeResolver
    settings_service: SettingsService
    attendance_service: AttendanceService
    report_service: ReportService


def assemble(
    *,
    users_repo: UserRepository,
    students_repo: StudentRepository,
    courses_repo: CourseRepository,
    sections_repo: SectionRepository,
    events_repo: EventRepository,
    attendance_repo: AttendanceRepository,
    settings_repo: SettingsRepository,
    secret_key: str,
    token_ttl_days: int = DEFAULT_TOKEN_TTL_DAYS,
    reject_inactive: bool = False,
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    """Wire services on top of the given repositories (MySQL or in-memory)."""

    qr_service = QrCodeService()
    token_service = TokenService(secret_key, ttl=timedelta(days=token_ttl_days))
    settings_service = SettingsService(settings_repo)
    scope_resolver = EventScopeResolver(events_repo, attendance_repo)

    return Container(
        conn=conn,
        users_repo=users_repo,
        students_repo=students_repo,
        courses_repo=courses_repo,
        sections_repo=sections_repo,
        events_repo=events_repo,
        attendance_repo=attendance_repo,
        settings_repo=settings_repo,
        qr_service=qr_service,
        token_service=token_service,
        auth_service=AuthService(users_repo, students_repo, token_service),
        course_service=CourseService(courses_repo, sections_repo, students_repo),
        student_service=StudentService(students_repo, courses_repo, sections_repo),
        event_service=EventService(events_repo, courses_repo, sections_repo, qr_service),
        scope_resolver=scope_resolver,
        settings_service=settings_service,
        attendance_service=AttendanceService(
            attendance_repo,
            students_repo,
            events_repo,
            settings_service,
            qr_service,
            reject_inactive=reject_inactive,
        ),
        report_service=ReportService(
            students=students_repo,
            courses=courses_repo,
            events=events_repo,
            attendance=attendance_repo,
            scope=scope_resolver,
        ),
    )


def build_container(
    *,
    db_config: dict,
    secret_key: str,
    token_ttl_days: int = DEFAULT_TOKEN_TTL_DAYS,
    reject_inactive: bool = False,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    return assemble(
        conn=conn,
        users_repo=MySQLUserRepository(conn),
        students_repo=MySQLStudentRepository(conn),
        courses_repo=MySQLCourseRepository(conn),
        sections_repo=MySQLSectionRepository(conn),
        events_repo=MySQLEventRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        settings_repo=MySQLSettingsRepository(conn),
        secret_key=secret_key,
        token_ttl_days=token_ttl_days,
        reject_inactive=reject_inactive,
    )
