from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User roles; the value is what gets stored in the users table."""

    ADMIN = "admin"
    TEACHER = "teacher"
    STUDENT = "student"
    WORKING_STUDENT = "working_student"


class AttendanceStatus(str, Enum):
    """Daily attendance status derived from a student's sessions."""

    PRESENT = "Present"
    ABSENT = "Absent"
    SEAT_IN = "Seat-in"


class ReportStatus(str, Enum):
    """Escalation state of an equipment report."""

    PENDING = "Pending"
    FORWARDED = "Forwarded"


class Condition(str, Enum):
    """Condition of one piece of workstation equipment."""

    GOOD = "Good"
    MINOR_ISSUE = "Minor Issue"
    MAJOR_ISSUE = "Major Issue"
