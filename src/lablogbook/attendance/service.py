from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Optional

from ..common.datetime_utils import now_local
from ..core.constants import DEFAULT_SUMMARY_DAYS
from ..core.exceptions import NotFoundError
from ..users.repository import UserRepository
from .deriver import AttendanceDeriver
from .model import AttendanceRecord, AttendanceSummary


class AttendanceService:
    def __init__(self, deriver: AttendanceDeriver, users: UserRepository):
        self._deriver = deriver
        self._users = users

    def _require_user(self, user_id: int) -> None:
        if not self._users.get_by_id(int(user_id)):
            raise NotFoundError(f"User {user_id} does not exist")

    def record_attendance(self, user_id: int, *, now: Optional[datetime] = None) -> AttendanceRecord:
        """Today's attendance for a user, recomputed from sessions."""
        self._require_user(user_id)
        today = (now or now_local()).date()
        return self._deriver.derive_record(int(user_id), today)

    def _default_range(self, start: Optional[date], end: Optional[date]) -> tuple[date, date]:
        end = end or now_local().date()
        start = start or end - timedelta(days=DEFAULT_SUMMARY_DAYS - 1)
        return start, end

    def summarize(self, user_id: int, *, start: Optional[date] = None, end: Optional[date] = None) -> AttendanceSummary:
        self._require_user(user_id)
        start, end = self._default_range(start, end)
        return self._deriver.summarize(int(user_id), start, end)

    def history(self, user_id: int, *, start: Optional[date] = None, end: Optional[date] = None) -> list[AttendanceRecord]:
        self._require_user(user_id)
        start, end = self._default_range(start, end)
        return self._deriver.derive_range(int(user_id), start, end)
