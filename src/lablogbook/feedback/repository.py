from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import ReportStatus
from .model import EquipmentConditions, EquipmentReport


class ReportRepository(Protocol):
    def create_report(
        self,
        *,
        student_id: int,
        workstation_id: str,
        conditions: EquipmentConditions,
        comments: Optional[str],
        submitted_at: datetime,
    ) -> int:
        raise NotImplementedError

    def get_by_id(self, report_id: int) -> Optional[EquipmentReport]:
        raise NotImplementedError

    def mark_forwarded(
        self,
        *,
        report_id: int,
        forwarded_by: int,
        forwarded_at: datetime,
        notes: Optional[str],
    ) -> bool:
        """Compare-and-swap Pending -> Forwarded. False if the report is missing or not Pending."""

        raise NotImplementedError

    def list_reports(
        self,
        *,
        status: Optional[ReportStatus] = None,
        oldest_first: bool = False,
        limit: Optional[int] = None,
    ) -> Sequence[EquipmentReport]:
        """No LIMIT clause when limit is None."""

        raise NotImplementedError
