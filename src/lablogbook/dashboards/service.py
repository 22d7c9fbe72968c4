from __future__ import annotations

from datetime import date
from typing import Optional

from ..attendance.deriver import AttendanceDeriver
from ..common.datetime_utils import now_local
from ..core.enums import Role
from ..core.exceptions import NotFoundError
from ..enrollment.class_repository import ClassRepository
from ..enrollment.repository import EnrollmentRepository
from ..sessions.repository import SessionRepository
from ..users.repository import UserRepository
from .model import AdminDashboard, ClassAttendance, InstructorDashboard, WorkingStudentDashboard


class DashboardService:
    """Read-only counters and overviews for the role landing screens."""

    def __init__(
        self,
        users: UserRepository,
        sessions: SessionRepository,
        classes: ClassRepository,
        enrollments: EnrollmentRepository,
        deriver: AttendanceDeriver,
    ):
        self._users = users
        self._sessions = sessions
        self._classes = classes
        self._enrollments = enrollments
        self._deriver = deriver

    def admin(self, *, day: Optional[date] = None) -> AdminDashboard:
        day = day or now_local().date()
        counts = self._users.count_by_role()
        return AdminDashboard(
            total_students=counts.get(Role.STUDENT, 0),
            total_teachers=counts.get(Role.TEACHER, 0),
            working_students=counts.get(Role.WORKING_STUDENT, 0),
            logins_today=self._sessions.count_logins_on(day),
        )

    def working_student(self) -> WorkingStudentDashboard:
        counts = self._users.count_by_role()
        return WorkingStudentDashboard(
            students_registered=counts.get(Role.STUDENT, 0),
            classlists_created=len(self._classes.list_classes()),
        )

    def instructor(self, instructor_id: int, *, day: Optional[date] = None) -> InstructorDashboard:
        """The instructor's classes and each enrolled student's status for `day`.

        Rows are grouped by class code, students ordered by name.
        """
        if not self._users.get_by_id(int(instructor_id)):
            raise NotFoundError(f"Instructor {instructor_id} does not exist")
        day = day or now_local().date()

        classes = list(self._classes.list_classes(instructor_id=int(instructor_id)))
        students = self._users.list_students()
        rows: list[ClassAttendance] = []
        for lab_class in classes:
            enrolled = self._enrollments.student_ids_for_class(lab_class.class_id)
            for student in students:
                if student.user_id in enrolled:
                    record = self._deriver.derive_record(student.user_id, day)
                    rows.append(ClassAttendance(lab_class=lab_class, student=student, record=record))

        return InstructorDashboard(instructor_id=int(instructor_id), day=day, classes=classes, attendance=rows)
