from __future__ import annotations

from datetime import date, datetime

import pytest

from lablogbook.attendance.deriver import AttendanceDeriver, status_for_day
from lablogbook.core.enums import AttendanceStatus, Role
from lablogbook.core.exceptions import ValidationError
from lablogbook.sessions.model import LoginSession


@pytest.fixture
def student(users_repo):
    return users_repo.add(Role.STUDENT, "2024-0001", first_name="Ana", last_name="Cruz")


def _session(sid, login, logout=None, user_id=1):
    return LoginSession(sid, user_id, "PC-01", login, logout)


def test_status_for_day_rules():
    open_one = _session(1, datetime(2026, 2, 2, 8, 0))
    closed_one = _session(2, datetime(2026, 2, 2, 10, 0), datetime(2026, 2, 2, 11, 0))

    assert status_for_day([]) == AttendanceStatus.ABSENT
    assert status_for_day([open_one]) == AttendanceStatus.SEAT_IN
    assert status_for_day([closed_one]) == AttendanceStatus.PRESENT
    # The latest session decides: an earlier one left open is outweighed by a later close.
    assert status_for_day([open_one, closed_one]) == AttendanceStatus.PRESENT


def test_open_session_is_seat_in_then_present_after_close(sessions_repo, student):
    deriver = AttendanceDeriver(sessions_repo)
    day = date(2026, 2, 2)

    assert deriver.derive_status(student.user_id, day) == AttendanceStatus.ABSENT

    sessions_repo.open_session(user_id=student.user_id, workstation_id="PC-01", login_time=datetime(2026, 2, 2, 8, 0))
    assert deriver.derive_status(student.user_id, day) == AttendanceStatus.SEAT_IN

    sessions_repo.close_open_session(user_id=student.user_id, logout_time=datetime(2026, 2, 2, 10, 0))
    record = deriver.derive_record(student.user_id, day)
    assert record.status == AttendanceStatus.PRESENT
    assert record.first_login == datetime(2026, 2, 2, 8, 0)
    assert record.last_logout == datetime(2026, 2, 2, 10, 0)
    assert record.session_count == 1


def test_midnight_session_counts_for_login_date_only(sessions_repo, student):
    sessions_repo.open_session(user_id=student.user_id, workstation_id="PC-01", login_time=datetime(2026, 2, 1, 23, 30))
    sessions_repo.close_open_session(user_id=student.user_id, logout_time=datetime(2026, 2, 2, 0, 45))

    deriver = AttendanceDeriver(sessions_repo)
    assert deriver.derive_status(student.user_id, date(2026, 2, 1)) == AttendanceStatus.PRESENT
    assert deriver.derive_status(student.user_id, date(2026, 2, 2)) == AttendanceStatus.ABSENT


def test_stale_open_session_does_not_carry_over(sessions_repo, student):
    sessions_repo.open_session(user_id=student.user_id, workstation_id="PC-01", login_time=datetime(2026, 1, 30, 15, 0))

    deriver = AttendanceDeriver(sessions_repo)
    assert deriver.derive_status(student.user_id, date(2026, 1, 30)) == AttendanceStatus.SEAT_IN
    assert deriver.derive_status(student.user_id, date(2026, 2, 2)) == AttendanceStatus.ABSENT


def test_summarize_counts_each_day_once(sessions_repo, student):
    repo = sessions_repo
    uid = student.user_id
    repo.open_session(user_id=uid, workstation_id="PC-01", login_time=datetime(2026, 2, 1, 8, 0))
    repo.close_open_session(user_id=uid, logout_time=datetime(2026, 2, 1, 9, 0))
    repo.open_session(user_id=uid, workstation_id="PC-02", login_time=datetime(2026, 2, 1, 13, 0))
    repo.close_open_session(user_id=uid, logout_time=datetime(2026, 2, 1, 14, 0))
    repo.open_session(user_id=uid, workstation_id="PC-01", login_time=datetime(2026, 2, 3, 8, 0))

    summary = AttendanceDeriver(repo).summarize(uid, date(2026, 2, 1), date(2026, 2, 4))
    assert summary.count(AttendanceStatus.PRESENT) == 1
    assert summary.count(AttendanceStatus.SEAT_IN) == 1
    assert summary.count(AttendanceStatus.ABSENT) == 2
    assert summary.to_dict()["counts"] == {"Present": 1, "Absent": 2, "Seat-in": 1}


def test_derive_range_is_newest_first(sessions_repo, student):
    sessions_repo.open_session(user_id=student.user_id, workstation_id="PC-01", login_time=datetime(2026, 2, 1, 8, 0))

    records = AttendanceDeriver(sessions_repo).derive_range(student.user_id, date(2026, 1, 31), date(2026, 2, 2))
    assert [r.work_date for r in records] == [date(2026, 2, 2), date(2026, 2, 1), date(2026, 1, 31)]
    assert [r.status for r in records] == [AttendanceStatus.ABSENT, AttendanceStatus.SEAT_IN, AttendanceStatus.ABSENT]


def test_inverted_range_is_rejected(sessions_repo, student):
    with pytest.raises(ValidationError):
        AttendanceDeriver(sessions_repo).summarize(student.user_id, date(2026, 2, 2), date(2026, 2, 1))


def test_return_visit_after_logout_is_seat_in(sessions_repo, student):
    uid = student.user_id
    sessions_repo.open_session(user_id=uid, workstation_id="PC-01", login_time=datetime(2026, 2, 2, 8, 0))
    sessions_repo.close_open_session(user_id=uid, logout_time=datetime(2026, 2, 2, 9, 0))
    sessions_repo.open_session(user_id=uid, workstation_id="PC-04", login_time=datetime(2026, 2, 2, 13, 0))

    deriver = AttendanceDeriver(sessions_repo)
    assert deriver.derive_status(uid, date(2026, 2, 2)) == AttendanceStatus.SEAT_IN

    sessions_repo.close_open_session(user_id=uid, logout_time=datetime(2026, 2, 2, 15, 0))
    record = deriver.derive_record(uid, date(2026, 2, 2))
    assert record.status == AttendanceStatus.PRESENT
    assert record.session_count == 2
    assert record.last_logout == datetime(2026, 2, 2, 15, 0)


def test_same_login_time_breaks_tie_by_session_id():
    first = _session(1, datetime(2026, 2, 2, 8, 0), datetime(2026, 2, 2, 9, 0))
    second = _session(2, datetime(2026, 2, 2, 8, 0))
    assert status_for_day([second, first]) == AttendanceStatus.SEAT_IN


def test_range_longer_than_a_year_is_rejected(sessions_repo, student):
    deriver = AttendanceDeriver(sessions_repo)
    deriver.summarize(student.user_id, date(2025, 2, 2), date(2026, 2, 2))
    with pytest.raises(ValidationError):
        deriver.derive_range(student.user_id, date(1, 1, 1), date(2026, 2, 2))
