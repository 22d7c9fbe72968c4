from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Mapping, Optional

from ..common.datetime_utils import to_iso
from ..core.enums import Condition, ReportStatus
from ..core.exceptions import ValidationError

CONDITION_FIELDS = ("equipment", "monitor", "keyboard", "mouse")


@dataclass(frozen=True)
class EquipmentConditions:
    equipment: Condition
    monitor: Condition
    keyboard: Condition
    mouse: Condition

    @classmethod
    def from_mapping(cls, raw: Mapping[str, object]) -> "EquipmentConditions":
        """Parse the four literal condition strings; reports every bad field at once."""
        parsed: dict[str, Condition] = {}
        invalid: list[str] = []
        for name in CONDITION_FIELDS:
            value = raw.get(name)
            try:
                parsed[name] = value if isinstance(value, Condition) else Condition(value)
            except ValueError:
                invalid.append(name)
        if invalid:
            allowed = ", ".join(c.value for c in Condition)
            raise ValidationError(f"Invalid condition for {', '.join(invalid)} (allowed: {allowed})", fields=invalid)
        return cls(**parsed)

    @property
    def has_issue(self) -> bool:
        return any(getattr(self, name) != Condition.GOOD for name in CONDITION_FIELDS)

    def to_dict(self) -> dict:
        return {name: getattr(self, name).value for name in CONDITION_FIELDS}


@dataclass(frozen=True)
class EquipmentReport:
    """Domain entity: a student's condition report for one workstation.

    Forwarding fields are all None while Pending and all set once Forwarded.
    """

    report_id: int
    student_id: int
    workstation_id: str
    conditions: EquipmentConditions
    comments: Optional[str]
    submitted_at: datetime
    status: ReportStatus = ReportStatus.PENDING
    forwarded_by: Optional[int] = None
    forwarded_at: Optional[datetime] = None
    forward_notes: Optional[str] = None

    @property
    def is_pending(self) -> bool:
        return self.status == ReportStatus.PENDING

    def to_dict(self) -> dict:
        return {
            "report_id": self.report_id,
            "student_id": self.student_id,
            "workstation_id": self.workstation_id,
            "conditions": self.conditions.to_dict(),
            "has_issue": self.conditions.has_issue,
            "comments": self.comments,
            "submitted_at": to_iso(self.submitted_at),
            "status": self.status.value,
            "forwarded_by": self.forwarded_by,
            "forwarded_at": to_iso(self.forwarded_at),
            "forward_notes": self.forward_notes,
        }
