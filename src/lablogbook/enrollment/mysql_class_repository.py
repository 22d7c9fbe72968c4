from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from ..core.exceptions import ConflictError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .class_model import LabClass
from .class_repository import ClassRepository

_COLUMNS = "class_id, code, subject_name, instructor_id, room, section, year_level, schedule, created_at"


def _to_class(r: Dict[str, Any]) -> LabClass:
    return LabClass(
        class_id=int(r["class_id"]),
        code=r["code"],
        subject_name=r["subject_name"],
        instructor_id=int(r["instructor_id"]) if r.get("instructor_id") is not None else None,
        room=r.get("room"),
        section=r.get("section"),
        year_level=r.get("year_level"),
        schedule=r.get("schedule"),
        created_at=r.get("created_at"),
    )


class MySQLClassRepository(ClassRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, class_id: int) -> Optional[LabClass]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM lab_classes WHERE class_id=%s", (int(class_id),))
            r = fetchone(cur)
            return _to_class(r) if r else None

    def create_class(
        self,
        *,
        code: str,
        subject_name: str,
        instructor_id: Optional[int],
        room: Optional[str],
        section: Optional[str],
        year_level: Optional[str],
        schedule: Optional[str],
    ) -> int:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO lab_classes(code, subject_name, instructor_id, room, section, year_level, schedule)
                    VALUES(%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (code, subject_name, instructor_id, room, section, year_level, schedule),
                )
                return int(cur.lastrowid)
        except ConflictError as e:
            raise ConflictError(f"Class code already exists: {code}") from e

    def list_classes(self, *, instructor_id: Optional[int] = None) -> Sequence[LabClass]:
        clauses = ["1=1"]
        params: list[object] = []
        if instructor_id is not None:
            clauses.append("instructor_id=%s")
            params.append(int(instructor_id))

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM lab_classes WHERE {where} ORDER BY code ASC", tuple(params))
            return [_to_class(r) for r in fetchall(cur)]
