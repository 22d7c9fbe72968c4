from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..common.datetime_utils import to_iso
from ..core.enums import Role


@dataclass(frozen=True)
class LoginSession:
    """Domain entity: one continuous occupancy of a workstation.

    Created on login, mutated exactly once (logout_time) on logout, never deleted.
    """

    session_id: int
    user_id: int
    workstation_id: Optional[str]
    login_time: datetime
    logout_time: Optional[datetime] = None

    @property
    def is_open(self) -> bool:
        return self.logout_time is None

    @property
    def login_date(self) -> date:
        # Sessions spanning midnight belong to the day they started.
        return self.login_time.date()

    @property
    def has_clock_skew(self) -> bool:
        return self.logout_time is not None and self.logout_time < self.login_time

    def to_dict(self) -> dict:
        return {
            "session_id": self.session_id,
            "user_id": self.user_id,
            "workstation_id": self.workstation_id,
            "login_time": to_iso(self.login_time),
            "logout_time": to_iso(self.logout_time),
        }


@dataclass(frozen=True)
class SessionLogRow:
    """Read-model for the lab log screens (session joined with its user)."""

    session: LoginSession
    user_name: str
    role: Role

    def to_dict(self) -> dict:
        data = self.session.to_dict()
        data["user_name"] = self.user_name
        data["role"] = self.role.value
        return data
