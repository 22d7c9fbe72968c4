from __future__ import annotations

from dataclasses import dataclass

from .attendance.deriver import AttendanceDeriver
from .attendance.service import AttendanceService
from .dashboards.service import DashboardService
from .database.connection import DBConfig, DatabaseConnection
from .enrollment.mysql_class_repository import MySQLClassRepository
from .enrollment.mysql_enrollment_repository import MySQLEnrollmentRepository
from .enrollment.service import ClassService, EnrollmentManager
from .feedback.mysql_report_repository import MySQLReportRepository
from .feedback.service import FeedbackWorkflow
from .sessions.mysql_session_repository import MySQLSessionRepository
from .sessions.service import SessionTracker
from .users.mysql_user_repository import MySQLUserRepository
from .users.provisioning import UserProvisioningPolicy
from .users.service import UserService


@dataclass(frozen=True)
class Container:
    user_service: UserService
    session_tracker: SessionTracker
    attendance_service: AttendanceService
    class_service: ClassService
    enrollment_manager: EnrollmentManager
    feedback_workflow: FeedbackWorkflow
    dashboard_service: DashboardService


def build_services(*, users, sessions, classes, enrollments, reports) -> Container:
    """Wire services over any set of repositories (MySQL in production, fakes in tests)."""
    deriver = AttendanceDeriver(sessions)
    return Container(
        user_service=UserService(users, policy=UserProvisioningPolicy()),
        session_tracker=SessionTracker(sessions),
        attendance_service=AttendanceService(deriver, users),
        class_service=ClassService(classes, enrollments, users),
        enrollment_manager=EnrollmentManager(enrollments, classes, users),
        feedback_workflow=FeedbackWorkflow(reports),
        dashboard_service=DashboardService(users, sessions, classes, enrollments, deriver),
    )


def build_container(*, db_config: dict) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))
    return build_services(
        users=MySQLUserRepository(conn),
        sessions=MySQLSessionRepository(conn),
        classes=MySQLClassRepository(conn),
        enrollments=MySQLEnrollmentRepository(conn),
        reports=MySQLReportRepository(conn),
    )
