from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Optional, Sequence

from ..common.datetime_utils import now_local
from ..common.validators import optional_text
from ..core.constants import DEFAULT_SESSION_LOG_LIMIT
from ..core.enums import Role
from ..core.exceptions import NotFoundError, ValidationError
from .model import LoginSession, SessionLogRow
from .repository import SessionRepository

logger = logging.getLogger(__name__)


class SessionTracker:
    """Opens and closes workstation sessions.

    Holds no per-user state: the one-open-session rule is enforced by the
    repository's atomic check-and-set, so concurrent logins for the same user
    yield exactly one session and one ConflictError.
    """

    def __init__(self, sessions: SessionRepository):
        self._sessions = sessions

    def open_session(self, user_id: int, workstation_id: Optional[str], *, now: Optional[datetime] = None) -> int:
        now = now or now_local()
        session_id = self._sessions.open_session(
            user_id=int(user_id),
            workstation_id=optional_text(workstation_id),
            login_time=now,
        )
        logger.info("Opened session %s for user_id=%s on %s", session_id, user_id, workstation_id or "-")
        return session_id

    def close_session(self, user_id: int, *, now: Optional[datetime] = None) -> LoginSession:
        now = now or now_local()
        closed = self._sessions.close_open_session(user_id=int(user_id), logout_time=now)
        if closed is None:
            raise NotFoundError(f"User {user_id} has no open session")

        if closed.has_clock_skew:
            # Workstation clocks are not authoritative; keep the record and flag it.
            logger.warning(
                "Clock skew on session %s (user_id=%s): logout %s is before login %s",
                closed.session_id,
                closed.user_id,
                closed.logout_time.isoformat(),
                closed.login_time.isoformat(),
            )
        else:
            logger.info("Closed session %s for user_id=%s", closed.session_id, user_id)
        return closed

    def get_open_session(self, user_id: int) -> Optional[LoginSession]:
        return self._sessions.get_open_session(int(user_id))

    def list_sessions(
        self,
        user_id: int,
        *,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> Sequence[LoginSession]:
        if start_date and end_date and end_date < start_date:
            raise ValidationError("End date must be on or after start date", fields=("start", "end"))
        sessions = self._sessions.list_for_user(int(user_id), start_date=start_date, end_date=end_date)
        return sorted(sessions, key=lambda s: (s.login_time, s.session_id))

    def list_recent(
        self,
        *,
        role: Optional[Role] = None,
        search: Optional[str] = None,
        limit: int = DEFAULT_SESSION_LOG_LIMIT,
    ) -> Sequence[SessionLogRow]:
        if int(limit) <= 0:
            raise ValidationError("Limit must be positive", fields=("limit",))
        return self._sessions.list_recent(role=role, search=optional_text(search), limit=int(limit))
