from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import Role
from .model import LoginSession, SessionLogRow


class SessionRepository(Protocol):
    def open_session(self, *, user_id: int, workstation_id: Optional[str], login_time: datetime) -> int:
        """Atomic check-and-set: insert a session unless the user already has an open one.

        Raises ConflictError if an open session exists.
        """

        raise NotImplementedError

    def close_open_session(self, *, user_id: int, logout_time: datetime) -> Optional[LoginSession]:
        """Set logout_time on the user's open session and return it, or None if there is none."""

        raise NotImplementedError

    def get_open_session(self, user_id: int) -> Optional[LoginSession]:
        raise NotImplementedError

    def list_for_user(
        self,
        user_id: int,
        *,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Sequence[LoginSession]:
        """Sessions whose login date falls in the range, plus the open one if any.

        Ordered by login_time ascending.
        """

        raise NotImplementedError

    def list_recent(
        self,
        *,
        role: Optional[Role] = None,
        search: Optional[str] = None,
        limit: int = 200,
    ) -> Sequence[SessionLogRow]:
        raise NotImplementedError

    def count_logins_on(self, day: date) -> int:
        raise NotImplementedError
