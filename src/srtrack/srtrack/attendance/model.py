from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Optional

from ..core.enums import Company, SessionStatus
from ..trainees.model import Trainee


@dataclass(frozen=True)
class AttendanceSession:
    """Domain entity: one clock-in attempt and its (optional) clock-out."""

    session_id: int
    trainee_id: int
    clock_in_time: datetime
    clock_out_time: Optional[datetime]
    status: SessionStatus
    session_date: date
    is_overdue: bool
    update_id: int
    clock_out_update_id: Optional[int] = None

    @property
    def is_open(self) -> bool:
        return self.status == SessionStatus.IN and self.clock_out_time is None

    @property
    def duration(self) -> Optional[timedelta]:
        if self.clock_out_time is None:
            return None
        return self.clock_out_time - self.clock_in_time


@dataclass(frozen=True)
class SessionStatusView:
    status: SessionStatus
    session: Optional[AttendanceSession]


@dataclass(frozen=True)
class ClockResult:
    trainee: Trainee
    session: AttendanceSession


@dataclass(frozen=True)
class AttendanceDayRow:
    """Read-model for the daily attendance listing (session joined with trainee)."""

    session_id: int
    trainee_id: int
    rank: str
    full_name: str
    identification_number: str
    company: Company
    session_date: date
    clock_in_time: datetime
    clock_out_time: Optional[datetime]
    status: SessionStatus
    is_overdue: bool
