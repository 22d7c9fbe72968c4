from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Union

from ..common.datetime_utils import to_iso
from ..core.exceptions import DomainError, error_kind
from ..users.model import User


@dataclass(frozen=True)
class ClassEnrollment:
    """Roster row, unique per (class_id, student_id)."""

    class_id: int
    student_id: int
    enrolled_by: Optional[int]
    enrolled_at: datetime

    def to_dict(self) -> dict:
        return {
            "class_id": self.class_id,
            "student_id": self.student_id,
            "enrolled_by": self.enrolled_by,
            "enrolled_at": to_iso(self.enrolled_at),
        }


@dataclass
class EnrollResult:
    """Outcome of a batch enrollment. Partial success is expected."""

    succeeded: list[int] = field(default_factory=list)
    # Keyed by the id as submitted; malformed ids keep their raw value.
    failed: dict[Union[int, str], DomainError] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.failed

    def to_dict(self) -> dict:
        return {
            "succeeded": list(self.succeeded),
            "failed": {
                str(student_id): {"error": error_kind(exc), "message": str(exc)}
                for student_id, exc in self.failed.items()
            },
        }


@dataclass(frozen=True)
class AvailableStudent:
    student: User
    is_enrolled: bool

    def to_dict(self) -> dict:
        data = self.student.to_dict()
        data["is_enrolled"] = self.is_enrolled
        return data
