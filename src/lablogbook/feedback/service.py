from __future__ import annotations

import logging
from datetime import datetime
from typing import Mapping, Optional, Sequence

from ..common.datetime_utils import now_local
from ..common.validators import optional_text, require_non_empty
from ..core.constants import DEFAULT_REPORT_LIMIT
from ..core.enums import ReportStatus
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from .model import EquipmentConditions, EquipmentReport
from .repository import ReportRepository

logger = logging.getLogger(__name__)


def _check_limit(limit: Optional[int]) -> Optional[int]:
    if limit is None:
        return None
    if int(limit) <= 0:
        raise ValidationError("Limit must be positive", fields=("limit",))
    return int(limit)


class FeedbackWorkflow:
    """Equipment report escalation: Pending --forward--> Forwarded.

    Forwarded is terminal here; administrative resolution happens elsewhere.
    """

    def __init__(self, reports: ReportRepository):
        self._reports = reports

    def submit(
        self,
        student_id: int,
        workstation_id: str,
        conditions: Mapping[str, object],
        comments: Optional[str] = None,
        *,
        now: Optional[datetime] = None,
    ) -> int:
        workstation_id = require_non_empty(workstation_id, "workstation_id")
        parsed = EquipmentConditions.from_mapping(conditions)

        report_id = self._reports.create_report(
            student_id=int(student_id),
            workstation_id=workstation_id,
            conditions=parsed,
            comments=optional_text(comments),
            submitted_at=now or now_local(),
        )
        logger.info("Report %s submitted by student_id=%s for %s", report_id, student_id, workstation_id)
        return report_id

    def forward(self, report_id: int, actor_id: int, notes: Optional[str] = None, *, now: Optional[datetime] = None) -> None:
        """Escalate a Pending report to the administrator, exactly once."""
        forwarded = self._reports.mark_forwarded(
            report_id=int(report_id),
            forwarded_by=int(actor_id),
            forwarded_at=now or now_local(),
            notes=optional_text(notes),
        )
        if forwarded:
            logger.info("Report %s forwarded by user_id=%s", report_id, actor_id)
            return

        report = self._reports.get_by_id(int(report_id))
        if report is None:
            raise NotFoundError(f"Report {report_id} does not exist")
        raise ConflictError(f"Report {report_id} is already {report.status.value}")

    def get_report(self, report_id: int) -> EquipmentReport:
        report = self._reports.get_by_id(int(report_id))
        if report is None:
            raise NotFoundError(f"Report {report_id} does not exist")
        return report

    def list_pending(self, *, limit: Optional[int] = None) -> Sequence[EquipmentReport]:
        """Every Pending report, oldest first, so escalation is FIFO.

        Unbounded unless the caller asks for a page.
        """
        reports = self._reports.list_reports(status=ReportStatus.PENDING, oldest_first=True, limit=_check_limit(limit))
        return sorted(reports, key=lambda r: (r.submitted_at, r.report_id))

    def list_reports(self, *, status: Optional[ReportStatus] = None, limit: int = DEFAULT_REPORT_LIMIT) -> Sequence[EquipmentReport]:
        return self._reports.list_reports(status=status, oldest_first=False, limit=_check_limit(limit))
