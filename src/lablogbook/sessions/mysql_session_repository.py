from __future__ import annotations

from datetime import date, datetime
from typing import Any, Dict, Optional, Sequence

from ..common.datetime_utils import start_of_day, start_of_next_day
from ..core.enums import Role
from ..core.exceptions import ConflictError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, like_pattern
from .model import LoginSession, SessionLogRow
from .repository import SessionRepository


def _to_session(r: Dict[str, Any]) -> LoginSession:
    return LoginSession(
        session_id=int(r["session_id"]),
        user_id=int(r["user_id"]),
        workstation_id=r.get("workstation_id"),
        login_time=r["login_time"],
        logout_time=r.get("logout_time"),
    )


class MySQLSessionRepository(SessionRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def open_session(self, *, user_id: int, workstation_id: Optional[str], login_time: datetime) -> int:
        # uq_login_sessions_open_user rejects a second open row for the same user.
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO login_sessions(user_id, workstation_id, login_time)
                    VALUES(%s,%s,%s)
                    """,
                    (int(user_id), workstation_id, login_time),
                )
                return int(cur.lastrowid)
        except ConflictError as e:
            raise ConflictError(f"User {user_id} already has an open session") from e

    def close_open_session(self, *, user_id: int, logout_time: datetime) -> Optional[LoginSession]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT session_id, user_id, workstation_id, login_time, logout_time
                FROM login_sessions
                WHERE user_id=%s AND logout_time IS NULL
                FOR UPDATE
                """,
                (int(user_id),),
            )
            r = fetchone(cur)
            if not r:
                return None

            cur.execute(
                "UPDATE login_sessions SET logout_time=%s WHERE session_id=%s AND logout_time IS NULL",
                (logout_time, int(r["session_id"])),
            )
            if cur.rowcount == 0:
                return None

            r["logout_time"] = logout_time
            return _to_session(r)

    def get_open_session(self, user_id: int) -> Optional[LoginSession]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT session_id, user_id, workstation_id, login_time, logout_time
                FROM login_sessions
                WHERE user_id=%s AND logout_time IS NULL
                """,
                (int(user_id),),
            )
            r = fetchone(cur)
            return _to_session(r) if r else None

    def list_for_user(
        self,
        user_id: int,
        *,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Sequence[LoginSession]:
        clauses = ["user_id=%s"]
        params: list[object] = [int(user_id)]

        if start_date is not None or end_date is not None:
            in_range: list[str] = []
            still_open = ["logout_time IS NULL"]
            range_params: list[object] = []
            open_params: list[object] = []
            if start_date is not None:
                in_range.append("login_time >= %s")
                range_params.append(start_of_day(start_date))
            if end_date is not None:
                in_range.append("login_time < %s")
                range_params.append(start_of_next_day(end_date))
                # An open session that started before the window still counts.
                still_open.append("login_time < %s")
                open_params.append(start_of_next_day(end_date))
            clauses.append(f"(({' AND '.join(in_range)}) OR ({' AND '.join(still_open)}))")
            params.extend(range_params + open_params)

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT session_id, user_id, workstation_id, login_time, logout_time
                FROM login_sessions
                WHERE {where}
                ORDER BY login_time ASC, session_id ASC
                """,
                tuple(params),
            )
            return [_to_session(r) for r in fetchall(cur)]

    def list_recent(
        self,
        *,
        role: Optional[Role] = None,
        search: Optional[str] = None,
        limit: int = 200,
    ) -> Sequence[SessionLogRow]:
        clauses = ["1=1"]
        params: list[object] = []

        if role is not None:
            clauses.append("u.role=%s")
            params.append(role.value)
        if search:
            pattern = like_pattern(search)
            clauses.append(
                "(CONCAT_WS(' ', u.first_name, u.last_name) LIKE %s OR u.username LIKE %s"
                " OR s.workstation_id LIKE %s OR DATE(s.login_time) LIKE %s)"
            )
            params.extend([pattern] * 4)

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT s.session_id, s.user_id, s.workstation_id, s.login_time, s.logout_time,
                       u.username, u.first_name, u.middle_name, u.last_name, u.role
                FROM login_sessions s
                JOIN users u ON u.user_id = s.user_id
                WHERE {where}
                ORDER BY s.login_time DESC, s.session_id DESC
                LIMIT %s
                """,
                tuple(params + [int(limit)]),
            )
            rows = fetchall(cur)
            out: list[SessionLogRow] = []
            for r in rows:
                name = " ".join(p for p in (r.get("first_name"), r.get("middle_name"), r.get("last_name")) if p)
                out.append(SessionLogRow(session=_to_session(r), user_name=name or r["username"], role=Role(r["role"])))
            return out

    def count_logins_on(self, day: date) -> int:
        start_dt, end_dt = start_of_day(day), start_of_next_day(day)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT COUNT(*) AS n FROM login_sessions WHERE login_time >= %s AND login_time < %s",
                (start_dt, end_dt),
            )
            r = fetchone(cur)
            return int(r["n"]) if r else 0
