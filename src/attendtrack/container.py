from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .accounts.mysql_account_repository import MySQLAccountRepository
from .accounts.repository import AccountRepository
from .accounts.service import AuthService, ProfileService, RoleService
from .analytics.notifier import SimulatedWarningNotifier
from .analytics.service import AnalyticsService
from .attendance.checkin import CheckInService
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .core.constants import DEFAULT_WARNING_SEND_DELAY_SECONDS
from .courses.mysql_course_repository import MySQLCourseRepository
from .courses.repository import CourseRepository
from .courses.service import CourseService
from .database.connection import DBConfig, DatabaseConnection


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    accounts_repo: AccountRepository
    courses_repo: CourseRepository
    attendance_repo: AttendanceRepository

    auth_service: AuthService
    profile_service: ProfileService
    role_service: RoleService
    course_service: CourseService
    checkin_service: CheckInService
    attendance_service: AttendanceService
    analytics_service: AnalyticsService


def wire(
    *,
    accounts_repo: AccountRepository,
    courses_repo: CourseRepository,
    attendance_repo: AttendanceRepository,
    conn: Optional[DatabaseConnection] = None,
    warning_send_delay: float = DEFAULT_WARNING_SEND_DELAY_SECONDS,
    analytics_service: Optional[AnalyticsService] = None,
) -> Container:
    """Build services on top of any repository implementations."""
    return Container(
        conn=conn,
        accounts_repo=accounts_repo,
        courses_repo=courses_repo,
        attendance_repo=attendance_repo,
        auth_service=AuthService(accounts_repo),
        profile_service=ProfileService(accounts_repo),
        role_service=RoleService(accounts_repo),
        course_service=CourseService(courses_repo),
        checkin_service=CheckInService(courses_repo, attendance_repo),
        attendance_service=AttendanceService(attendance_repo, courses_repo),
        analytics_service=analytics_service
        or AnalyticsService(SimulatedWarningNotifier(delay_seconds=warning_send_delay)),
    )


def build_container(*, db_config: dict, warning_send_delay: float = DEFAULT_WARNING_SEND_DELAY_SECONDS) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    return wire(
        accounts_repo=MySQLAccountRepository(conn),
        courses_repo=MySQLCourseRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        conn=conn,
        warning_send_delay=warning_send_delay,
    )
