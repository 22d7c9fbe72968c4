from __future__ import annotations

import threading
from dataclasses import asdict, replace
from datetime import date, datetime, timedelta
from typing import Optional

import pytest

from lablogbook.container import build_services
from lablogbook.core.enums import ReportStatus, Role
from lablogbook.core.exceptions import ConflictError, NotFoundError
from lablogbook.enrollment.class_model import LabClass
from lablogbook.enrollment.model import ClassEnrollment
from lablogbook.feedback.model import EquipmentReport
from lablogbook.sessions.model import LoginSession, SessionLogRow
from lablogbook.users.model import NewUser, User


class InMemoryUsers:
    def __init__(self):
        self._by_id: dict[int, User] = {}
        self._next_id = 1

    def add(self, role: Role, username: str, **kwargs) -> User:
        user = User(
            user_id=kwargs.pop("user_id", self._next_id),
            username=username,
            password_hash=kwargs.pop("password_hash", "x"),
            role=role,
            created_at=kwargs.pop("created_at", datetime(2026, 1, 1, 8, 0) + timedelta(minutes=self._next_id)),
            **kwargs,
        )
        self._by_id[user.user_id] = user
        self._next_id = max(self._next_id, user.user_id) + 1
        return user

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self._by_id.get(int(user_id))

    def get_by_username(self, username: str) -> Optional[User]:
        return next((u for u in self._by_id.values() if u.username == username), None)

    def create_user(self, new_user: NewUser) -> int:
        if self.get_by_username(new_user.username):
            raise ConflictError("Duplicate entry")
        fields = asdict(new_user)
        role = fields.pop("role")
        username = fields.pop("username")
        return self.add(role, username, **fields).user_id

    def update_profile(self, user_id: int, fields) -> bool:
        user = self._by_id.get(int(user_id))
        if user is None:
            return False
        self._by_id[user.user_id] = replace(user, **fields)
        return True

    def update_password_hash(self, user_id: int, password_hash: str) -> bool:
        return self.update_profile(user_id, {"password_hash": password_hash})

    def delete_by_id(self, user_id: int) -> bool:
        return self._by_id.pop(int(user_id), None) is not None

    def list_users(self, *, role=None, search=None):
        users = [u for u in self._by_id.values() if role is None or u.role == role]
        if search:
            needle = search.lower()
            users = [
                u
                for u in users
                if needle in u.full_name.lower()
                or needle in u.username.lower()
                or needle in (u.gender or "").lower()
            ]
        return sorted(users, key=lambda u: (u.created_at, u.user_id), reverse=True)

    def list_students(self):
        students = [u for u in self._by_id.values() if u.is_student]
        return sorted(students, key=lambda u: (u.sort_name, u.user_id))

    def count_by_role(self):
        counts = {role: 0 for role in Role}
        for u in self._by_id.values():
            counts[u.role] += 1
        return counts


class InMemorySessions:
    """Lock-guarded so check-and-set behaves like the unique open-session index."""

    def __init__(self, users: Optional[InMemoryUsers] = None):
        self._users = users
        self._lock = threading.Lock()
        self.rows: dict[int, LoginSession] = {}
        self._next_id = 1

    def open_session(self, *, user_id, workstation_id, login_time) -> int:
        with self._lock:
            if self._users is not None and not self._users.get_by_id(user_id):
                raise NotFoundError(f"User {user_id} does not exist")
            if any(s.user_id == user_id and s.is_open for s in self.rows.values()):
                raise ConflictError(f"User {user_id} already has an open session")
            sid = self._next_id
            self._next_id += 1
            self.rows[sid] = LoginSession(sid, int(user_id), workstation_id, login_time)
            return sid

    def close_open_session(self, *, user_id, logout_time):
        with self._lock:
            for sid, s in self.rows.items():
                if s.user_id == user_id and s.is_open:
                    closed = LoginSession(s.session_id, s.user_id, s.workstation_id, s.login_time, logout_time)
                    self.rows[sid] = closed
                    return closed
            return None

    def get_open_session(self, user_id):
        return next((s for s in self.rows.values() if s.user_id == user_id and s.is_open), None)

    def list_for_user(self, user_id, *, start_date=None, end_date=None):
        out = []
        for s in self.rows.values():
            if s.user_id != user_id:
                continue
            in_range = (start_date is None or s.login_date >= start_date) and (end_date is None or s.login_date <= end_date)
            still_open = s.is_open and (end_date is None or s.login_date <= end_date)
            if in_range or still_open:
                out.append(s)
        return sorted(out, key=lambda s: (s.login_time, s.session_id))

    def list_recent(self, *, role=None, search=None, limit=200):
        rows = []
        for s in sorted(self.rows.values(), key=lambda s: (s.login_time, s.session_id), reverse=True):
            user = self._users.get_by_id(s.user_id) if self._users else None
            if user is None or (role is not None and user.role != role):
                continue
            if search and search.lower() not in f"{user.full_name} {s.workstation_id or ''} {s.login_date}".lower():
                continue
            rows.append(SessionLogRow(session=s, user_name=user.full_name, role=user.role))
        return rows[:limit]

    def count_logins_on(self, day: date) -> int:
        return sum(1 for s in self.rows.values() if s.login_date == day)


class InMemoryClasses:
    def __init__(self):
        self._by_id: dict[int, LabClass] = {}

    def get_by_id(self, class_id):
        return self._by_id.get(int(class_id))

    def create_class(self, *, code, subject_name, instructor_id, room, section, year_level, schedule) -> int:
        if any(c.code == code for c in self._by_id.values()):
            raise ConflictError(f"Class code already exists: {code}")
        cid = len(self._by_id) + 1
        self._by_id[cid] = LabClass(cid, code, subject_name, instructor_id, room, section, year_level, schedule)
        return cid

    def list_classes(self, *, instructor_id=None):
        items = [c for c in self._by_id.values() if instructor_id is None or c.instructor_id == instructor_id]
        return sorted(items, key=lambda c: c.code)


class InMemoryEnrollments:
    def __init__(self):
        self._lock = threading.Lock()
        self.rows: dict[tuple[int, int], ClassEnrollment] = {}

    def add(self, *, class_id, student_id, enrolled_by, enrolled_at) -> bool:
        with self._lock:
            key = (int(class_id), int(student_id))
            if key in self.rows:
                return False
            self.rows[key] = ClassEnrollment(int(class_id), int(student_id), enrolled_by, enrolled_at)
            return True

    def remove(self, *, class_id, student_id) -> bool:
        with self._lock:
            return self.rows.pop((int(class_id), int(student_id)), None) is not None

    def list_for_class(self, class_id):
        rows = [e for (cid, _), e in self.rows.items() if cid == class_id]
        return sorted(rows, key=lambda e: e.enrolled_at)

    def student_ids_for_class(self, class_id):
        return {sid for (cid, sid) in self.rows if cid == class_id}


class InMemoryReports:
    """mark_forwarded is a lock-guarded compare-and-swap on status."""

    def __init__(self):
        self._lock = threading.Lock()
        self.rows: dict[int, EquipmentReport] = {}

    def create_report(self, *, student_id, workstation_id, conditions, comments, submitted_at) -> int:
        with self._lock:
            rid = len(self.rows) + 1
            self.rows[rid] = EquipmentReport(rid, int(student_id), workstation_id, conditions, comments, submitted_at)
            return rid

    def get_by_id(self, report_id):
        return self.rows.get(int(report_id))

    def mark_forwarded(self, *, report_id, forwarded_by, forwarded_at, notes) -> bool:
        with self._lock:
            r = self.rows.get(int(report_id))
            if r is None or r.status != ReportStatus.PENDING:
                return False
            self.rows[r.report_id] = EquipmentReport(
                r.report_id,
                r.student_id,
                r.workstation_id,
                r.conditions,
                r.comments,
                r.submitted_at,
                status=ReportStatus.FORWARDED,
                forwarded_by=forwarded_by,
                forwarded_at=forwarded_at,
                forward_notes=notes,
            )
            return True

    def list_reports(self, *, status=None, oldest_first=False, limit=None):
        items = [r for r in self.rows.values() if status is None or r.status == status]
        items.sort(key=lambda r: (r.submitted_at, r.report_id), reverse=not oldest_first)
        return items[:limit]


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2026, 2, 2, 9, 0, 0)


@pytest.fixture
def users_repo() -> InMemoryUsers:
    return InMemoryUsers()


@pytest.fixture
def sessions_repo(users_repo) -> InMemorySessions:
    return InMemorySessions(users_repo)


@pytest.fixture
def classes_repo() -> InMemoryClasses:
    return InMemoryClasses()


@pytest.fixture
def enrollments_repo() -> InMemoryEnrollments:
    return InMemoryEnrollments()


@pytest.fixture
def reports_repo() -> InMemoryReports:
    return InMemoryReports()


@pytest.fixture
def container(users_repo, sessions_repo, classes_repo, enrollments_repo, reports_repo):
    return build_services(
        users=users_repo,
        sessions=sessions_repo,
        classes=classes_repo,
        enrollments=enrollments_repo,
        reports=reports_repo,
    )
