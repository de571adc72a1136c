from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import Company
from .model import AttendanceDayRow, AttendanceSession

# Store constraint names the lifecycle engine maps back to domain errors.
OPEN_SESSION_CONSTRAINT = "uq_open_session"
REPLAY_CONSTRAINTS = frozenset(
    {
        "uq_replay_update_id",
        "uq_attendance_update_id",
        "uq_attendance_clock_out_update_id",
    }
)


class AttendanceRepository(Protocol):
    def replay_token_exists(self, update_id: int) -> bool:
        raise NotImplementedError

    def get_open_sessions(self, trainee_id: int) -> Sequence[AttendanceSession]:
        """All open sessions of a trainee, most recent clock-in first."""

        raise NotImplementedError

    def get_recent_for_trainee(self, trainee_id: int, limit: int) -> Sequence[AttendanceSession]:
        raise NotImplementedError

    def create_clock_in(
        self,
        *,
        trainee_id: int,
        update_id: int,
        clock_in_time: datetime,
        session_date: date,
    ) -> int:
        """Record the replay token and insert an open session in one transaction.

        Raises UniqueViolation when the token was already used or the trainee
        already has an open session.
        """

        raise NotImplementedError

    def close_session(
        self,
        *,
        session_id: int,
        trainee_id: int,
        update_id: int,
        clock_out_time: datetime,
    ) -> bool:
        """Record the replay token and close the session if it is still open.

        Returns False (and keeps the token unused) when the session was no
        longer open.
        """

        raise NotImplementedError

    def list_overdue_candidates(self, session_date: date) -> Sequence[AttendanceSession]:
        raise NotImplementedError

    def mark_overdue(self, session_id: int) -> bool:
        """Flag an open session overdue. False if it was already flagged or closed."""

        raise NotImplementedError

    def list_for_date(self, session_date: date, *, company: Optional[Company] = None) -> Sequence[AttendanceDayRow]:
        raise NotImplementedError
