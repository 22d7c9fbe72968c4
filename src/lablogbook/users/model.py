from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import to_iso
from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Domain entity: a person with exactly one role.

    Note: pure data object, no DB access. `username` is the role-specific
    identifier (employee code or student code) and doubles as the login name.
    """

    user_id: int
    username: str
    password_hash: str
    role: Role
    first_name: Optional[str] = None
    middle_name: Optional[str] = None
    last_name: Optional[str] = None
    gender: Optional[str] = None
    email: Optional[str] = None
    employee_id: Optional[str] = None
    student_id: Optional[str] = None
    year_level: Optional[str] = None
    section: Optional[str] = None
    created_at: Optional[datetime] = None

    @property
    def full_name(self) -> str:
        parts = [p for p in (self.first_name, self.middle_name, self.last_name) if p]
        return " ".join(parts) or self.username

    @property
    def sort_name(self) -> tuple[str, str]:
        return ((self.last_name or "").lower(), (self.first_name or self.username).lower())

    @property
    def is_student(self) -> bool:
        return self.role in (Role.STUDENT, Role.WORKING_STUDENT)

    def to_dict(self) -> dict:
        return {
            "user_id": self.user_id,
            "username": self.username,
            "role": self.role.value,
            "full_name": self.full_name,
            "first_name": self.first_name,
            "middle_name": self.middle_name,
            "last_name": self.last_name,
            "gender": self.gender,
            "email": self.email,
            "employee_id": self.employee_id,
            "student_id": self.student_id,
            "year_level": self.year_level,
            "section": self.section,
            "created_at": to_iso(self.created_at),
        }


@dataclass(frozen=True)
class NewUser:
    """Validated input for account creation (already hashed)."""

    username: str
    password_hash: str
    role: Role
    first_name: Optional[str] = None
    middle_name: Optional[str] = None
    last_name: Optional[str] = None
    gender: Optional[str] = None
    email: Optional[str] = None
    employee_id: Optional[str] = None
    student_id: Optional[str] = None
    year_level: Optional[str] = None
    section: Optional[str] = None

