from __future__ import annotations

from typing import Any, Dict, Mapping, Optional, Sequence

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, like_pattern
from .model import NewUser, User
from .repository import UserRepository

_COLUMNS = """
    user_id, username, password_hash, role, first_name, middle_name, last_name,
    gender, email, employee_id, student_id, year_level, section, created_at
"""


def _to_user(r: Dict[str, Any]) -> User:
    return User(
        user_id=int(r["user_id"]),
        username=r["username"],
        password_hash=r["password_hash"],
        role=Role(r["role"]),
        first_name=r.get("first_name"),
        middle_name=r.get("middle_name"),
        last_name=r.get("last_name"),
        gender=r.get("gender"),
        email=r.get("email"),
        employee_id=r.get("employee_id"),
        student_id=r.get("student_id"),
        year_level=r.get("year_level"),
        section=r.get("section"),
        created_at=r.get("created_at"),
    )


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, user_id: int) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users WHERE user_id=%s", (int(user_id),))
            row = fetchone(cur)
            return _to_user(row) if row else None

    def get_by_username(self, username: str) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM users WHERE username=%s", (username,))
            row = fetchone(cur)
            return _to_user(row) if row else None

    def create_user(self, new_user: NewUser) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO users(
                    username, password_hash, role, first_name, middle_name, last_name,
                    gender, email, employee_id, student_id, year_level, section
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    new_user.username,
                    new_user.password_hash,
                    new_user.role.value,
                    new_user.first_name,
                    new_user.middle_name,
                    new_user.last_name,
                    new_user.gender,
                    new_user.email,
                    new_user.employee_id,
                    new_user.student_id,
                    new_user.year_level,
                    new_user.section,
                ),
            )
            return int(cur.lastrowid)

    def update_profile(self, user_id: int, fields: Mapping[str, Optional[str]]) -> bool:
        if not fields:
            return self.get_by_id(user_id) is not None
        # Column names come from the service whitelist, never from request keys.
        assignments = ", ".join(f"{name}=%s" for name in fields)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE users SET {assignments} WHERE user_id=%s",
                tuple(fields.values()) + (int(user_id),),
            )
            if cur.rowcount > 0:
                return True
            # rowcount is 0 both for a missing row and for an unchanged one.
            cur.execute("SELECT 1 AS found FROM users WHERE user_id=%s", (int(user_id),))
            return fetchone(cur) is not None

    def update_password_hash(self, user_id: int, password_hash: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE users SET password_hash=%s WHERE user_id=%s", (password_hash, int(user_id)))
            return cur.rowcount > 0

    def delete_by_id(self, user_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM users WHERE user_id=%s", (int(user_id),))
            return cur.rowcount > 0

    def list_users(self, *, role: Optional[Role] = None, search: Optional[str] = None) -> Sequence[User]:
        clauses = ["1=1"]
        params: list[object] = []

        if role is not None:
            clauses.append("role=%s")
            params.append(role.value)
        if search:
            pattern = like_pattern(search)
            clauses.append(
                "(CONCAT_WS(' ', first_name, middle_name, last_name) LIKE %s"
                " OR username LIKE %s OR student_id LIKE %s OR employee_id LIKE %s OR gender LIKE %s)"
            )
            params.extend([pattern] * 5)

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM users WHERE {where} ORDER BY created_at DESC, user_id DESC",
                tuple(params),
            )
            return [_to_user(r) for r in fetchall(cur)]

    def list_students(self) -> Sequence[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM users
                WHERE role IN (%s, %s)
                ORDER BY last_name ASC, first_name ASC, user_id ASC
                """,
                (Role.STUDENT.value, Role.WORKING_STUDENT.value),
            )
            return [_to_user(r) for r in fetchall(cur)]

    def count_by_role(self) -> Mapping[Role, int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT role, COUNT(*) AS n FROM users GROUP BY role")
            counts = {role: 0 for role in Role}
            for r in fetchall(cur):
                counts[Role(r["role"])] = int(r["n"])
            return counts
