from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..common.datetime_utils import to_iso


@dataclass(frozen=True)
class LabClass:
    """A class (subject section) that meets in the lab and owns a roster."""

    class_id: int
    code: str
    subject_name: str
    instructor_id: Optional[int] = None
    room: Optional[str] = None
    section: Optional[str] = None
    year_level: Optional[str] = None
    schedule: Optional[str] = None
    created_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "class_id": self.class_id,
            "code": self.code,
            "subject_name": self.subject_name,
            "instructor_id": self.instructor_id,
            "room": self.room,
            "section": self.section,
            "year_level": self.year_level,
            "schedule": self.schedule,
            "created_at": to_iso(self.created_at),
        }
