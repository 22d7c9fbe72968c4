from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence, Set

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import ClassEnrollment
from .repository import EnrollmentRepository


class MySQLEnrollmentRepository(EnrollmentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def add(self, *, class_id: int, student_id: int, enrolled_by: Optional[int], enrolled_at: datetime) -> bool:
        # rowcount: 1 when inserted, 0 when the (class_id, student_id) key already existed.
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO class_enrollments(class_id, student_id, enrolled_by, enrolled_at)
                VALUES(%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE enrollment_id=enrollment_id
                """,
                (int(class_id), int(student_id), enrolled_by, enrolled_at),
            )
            return cur.rowcount == 1

    def remove(self, *, class_id: int, student_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "DELETE FROM class_enrollments WHERE class_id=%s AND student_id=%s",
                (int(class_id), int(student_id)),
            )
            return cur.rowcount > 0

    def list_for_class(self, class_id: int) -> Sequence[ClassEnrollment]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT class_id, student_id, enrolled_by, enrolled_at
                FROM class_enrollments
                WHERE class_id=%s
                ORDER BY enrolled_at ASC, enrollment_id ASC
                """,
                (int(class_id),),
            )
            return [
                ClassEnrollment(
                    class_id=int(r["class_id"]),
                    student_id=int(r["student_id"]),
                    enrolled_by=int(r["enrolled_by"]) if r.get("enrolled_by") is not None else None,
                    enrolled_at=r["enrolled_at"],
                )
                for r in fetchall(cur)
            ]

    def student_ids_for_class(self, class_id: int) -> Set[int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT student_id FROM class_enrollments WHERE class_id=%s", (int(class_id),))
            return {int(r["student_id"]) for r in fetchall(cur)}
