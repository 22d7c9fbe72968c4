from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date

from ..attendance.model import AttendanceRecord
from ..enrollment.class_model import LabClass
from ..users.model import User


@dataclass(frozen=True)
class AdminDashboard:
    total_students: int
    total_teachers: int
    working_students: int
    logins_today: int

    def to_dict(self) -> dict:
        return {
            "total_students": self.total_students,
            "total_teachers": self.total_teachers,
            "working_students": self.working_students,
            "logins_today": self.logins_today,
        }


@dataclass(frozen=True)
class WorkingStudentDashboard:
    students_registered: int
    classlists_created: int

    def to_dict(self) -> dict:
        return {
            "students_registered": self.students_registered,
            "classlists_created": self.classlists_created,
        }


@dataclass(frozen=True)
class ClassAttendance:
    """One enrolled student's attendance for the dashboard day."""

    lab_class: LabClass
    student: User
    record: AttendanceRecord

    def to_dict(self) -> dict:
        data = self.record.to_dict()
        data["class_id"] = self.lab_class.class_id
        data["class_code"] = self.lab_class.code
        data["student_name"] = self.student.full_name
        return data


@dataclass(frozen=True)
class InstructorDashboard:
    instructor_id: int
    day: date
    classes: list[LabClass] = field(default_factory=list)
    attendance: list[ClassAttendance] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "instructor_id": self.instructor_id,
            "date": self.day.isoformat(),
            "classes": [c.to_dict() for c in self.classes],
            "attendance": [a.to_dict() for a in self.attendance],
        }
