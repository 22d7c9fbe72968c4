"""Attendance derivation.

Status for a (student, date) pair is a pure function of the sessions that
started on that date:

- no session              -> Absent
- latest session closed   -> Present
- latest session open     -> Seat-in (occupant still at the workstation)

"Latest" is the greatest (login_time, session_id); an earlier session left
open does not matter once a later one has been closed.

A session spanning midnight counts for its login date only. An unclosed
session from an earlier day does not count toward later days.
"""

from __future__ import annotations

from collections import defaultdict
from datetime import date
from typing import Iterable, Sequence

from ..common.datetime_utils import iter_dates
from ..core.constants import MAX_RANGE_DAYS
from ..core.enums import AttendanceStatus
from ..core.exceptions import ValidationError
from ..sessions.model import LoginSession
from ..sessions.repository import SessionRepository
from .model import AttendanceRecord, AttendanceSummary


def status_for_day(sessions_of_day: Sequence[LoginSession]) -> AttendanceStatus:
    if not sessions_of_day:
        return AttendanceStatus.ABSENT
    latest = max(sessions_of_day, key=lambda s: (s.login_time, s.session_id))
    return AttendanceStatus.SEAT_IN if latest.is_open else AttendanceStatus.PRESENT


def build_record(user_id: int, day: date, sessions: Iterable[LoginSession]) -> AttendanceRecord:
    of_day = sorted((s for s in sessions if s.login_date == day), key=lambda s: (s.login_time, s.session_id))
    logouts = [s.logout_time for s in of_day if s.logout_time is not None]
    return AttendanceRecord(
        user_id=int(user_id),
        work_date=day,
        status=status_for_day(of_day),
        first_login=of_day[0].login_time if of_day else None,
        last_logout=max(logouts) if logouts else None,
        session_count=len(of_day),
    )


def summarize_sessions(user_id: int, start: date, end: date, sessions: Iterable[LoginSession]) -> AttendanceSummary:
    by_day: dict[date, list[LoginSession]] = defaultdict(list)
    for s in sessions:
        by_day[s.login_date].append(s)

    counts = {status: 0 for status in AttendanceStatus}
    for day in iter_dates(start, end):
        counts[status_for_day(by_day.get(day, []))] += 1
    return AttendanceSummary(user_id=int(user_id), start_date=start, end_date=end, counts=counts)


class AttendanceDeriver:
    """Reads sessions and recomputes status on every call. No persistence."""

    def __init__(self, sessions: SessionRepository):
        self._sessions = sessions

    def derive_status(self, user_id: int, day: date) -> AttendanceStatus:
        return self.derive_record(user_id, day).status

    def derive_record(self, user_id: int, day: date) -> AttendanceRecord:
        sessions = self._sessions.list_for_user(int(user_id), start_date=day, end_date=day)
        return build_record(user_id, day, sessions)

    def derive_range(self, user_id: int, start: date, end: date) -> list[AttendanceRecord]:
        """One record per date, newest first."""
        self._check_range(start, end)
        sessions = self._sessions.list_for_user(int(user_id), start_date=start, end_date=end)
        return [build_record(user_id, day, sessions) for day in reversed(list(iter_dates(start, end)))]

    def summarize(self, user_id: int, start: date, end: date) -> AttendanceSummary:
        self._check_range(start, end)
        sessions = self._sessions.list_for_user(int(user_id), start_date=start, end_date=end)
        return summarize_sessions(user_id, start, end, sessions)

    @staticmethod
    def _check_range(start: date, end: date) -> None:
        if end < start:
            raise ValidationError("End date must be on or after start date", fields=("start", "end"))
        if (end - start).days + 1 > MAX_RANGE_DAYS:
            raise ValidationError(f"Date range is limited to {MAX_RANGE_DAYS} days", fields=("start", "end"))
