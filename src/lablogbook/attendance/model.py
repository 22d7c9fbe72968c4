from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Mapping, Optional

from ..common.datetime_utils import to_iso
from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class AttendanceRecord:
    """Derived, never stored: a student's status for one calendar date."""

    user_id: int
    work_date: date
    status: AttendanceStatus
    first_login: Optional[datetime] = None
    last_logout: Optional[datetime] = None
    session_count: int = 0

    def to_dict(self) -> dict:
        return {
            "user_id": self.user_id,
            "date": self.work_date.isoformat(),
            "status": self.status.value,
            "first_login": to_iso(self.first_login),
            "last_logout": to_iso(self.last_logout),
            "session_count": self.session_count,
        }


@dataclass(frozen=True)
class AttendanceSummary:
    """Dashboard counters over a date range."""

    user_id: int
    start_date: date
    end_date: date
    counts: Mapping[AttendanceStatus, int] = field(default_factory=dict)

    def count(self, status: AttendanceStatus) -> int:
        return int(self.counts.get(status, 0))

    def to_dict(self) -> dict:
        return {
            "user_id": self.user_id,
            "start": self.start_date.isoformat(),
            "end": self.end_date.isoformat(),
            "counts": {status.value: self.count(status) for status in AttendanceStatus},
        }
