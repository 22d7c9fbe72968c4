from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional, Sequence

from ..core.enums import Condition, ReportStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import EquipmentConditions, EquipmentReport
from .repository import ReportRepository

_COLUMNS = """
    report_id, student_id, workstation_id,
    equipment_condition, monitor_condition, keyboard_condition, mouse_condition,
    comments, submitted_at, status, forwarded_by, forwarded_at, forward_notes
"""


def _to_report(r: Dict[str, Any]) -> EquipmentReport:
    return EquipmentReport(
        report_id=int(r["report_id"]),
        student_id=int(r["student_id"]),
        workstation_id=r["workstation_id"],
        conditions=EquipmentConditions(
            equipment=Condition(r["equipment_condition"]),
            monitor=Condition(r["monitor_condition"]),
            keyboard=Condition(r["keyboard_condition"]),
            mouse=Condition(r["mouse_condition"]),
        ),
        comments=r.get("comments"),
        submitted_at=r["submitted_at"],
        status=ReportStatus(r["status"]),
        forwarded_by=int(r["forwarded_by"]) if r.get("forwarded_by") is not None else None,
        forwarded_at=r.get("forwarded_at"),
        forward_notes=r.get("forward_notes"),
    )


class MySQLReportRepository(ReportRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create_report(
        self,
        *,
        student_id: int,
        workstation_id: str,
        conditions: EquipmentConditions,
        comments: Optional[str],
        submitted_at: datetime,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO equipment_reports(
                    student_id, workstation_id,
                    equipment_condition, monitor_condition, keyboard_condition, mouse_condition,
                    comments, submitted_at, status
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(student_id),
                    workstation_id,
                    conditions.equipment.value,
                    conditions.monitor.value,
                    conditions.keyboard.value,
                    conditions.mouse.value,
                    comments,
                    submitted_at,
                    ReportStatus.PENDING.value,
                ),
            )
            return int(cur.lastrowid)

    def get_by_id(self, report_id: int) -> Optional[EquipmentReport]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM equipment_reports WHERE report_id=%s", (int(report_id),))
            r = fetchone(cur)
            return _to_report(r) if r else None

    def mark_forwarded(
        self,
        *,
        report_id: int,
        forwarded_by: int,
        forwarded_at: datetime,
        notes: Optional[str],
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE equipment_reports
                SET status=%s, forwarded_by=%s, forwarded_at=%s, forward_notes=%s
                WHERE report_id=%s AND status=%s
                """,
                (
                    ReportStatus.FORWARDED.value,
                    int(forwarded_by),
                    forwarded_at,
                    notes,
                    int(report_id),
                    ReportStatus.PENDING.value,
                ),
            )
            return cur.rowcount > 0

    def list_reports(
        self,
        *,
        status: Optional[ReportStatus] = None,
        oldest_first: bool = False,
        limit: Optional[int] = None,
    ) -> Sequence[EquipmentReport]:
        clauses = ["1=1"]
        params: list[object] = []
        if status is not None:
            clauses.append("status=%s")
            params.append(status.value)

        where = " AND ".join(clauses)
        order = "ASC" if oldest_first else "DESC"
        page = ""
        if limit is not None:
            page = "LIMIT %s"
            params.append(int(limit))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM equipment_reports
                WHERE {where}
                ORDER BY submitted_at {order}, report_id {order}
                {page}
                """,
                tuple(params),
            )
            return [_to_report(r) for r in fetchall(cur)]
