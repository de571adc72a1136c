from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Optional, Sequence

from ..common.datetime_utils import TimeAuthority
from ..core.constants import DEFAULT_HISTORY_LIMIT
from ..core.enums import Company, NotificationKind, SessionStatus
from ..core.exceptions import (
    AlreadyClockedIn,
    DataIntegrityError,
    DomainError,
    DuplicateReplay,
    InvalidDuration,
    NotClockedIn,
    PastCutoff,
    UniqueViolation,
)
from ..notifications.service import NotificationDispatcher
from ..trainees.model import Trainee
from ..trainees.service import TraineeService
from .model import AttendanceDayRow, AttendanceSession, ClockResult, SessionStatusView
from .repository import OPEN_SESSION_CONSTRAINT, REPLAY_CONSTRAINTS, AttendanceRepository

logger = logging.getLogger(__name__)


class AttendanceService:
    """Session lifecycle: NONE -> IN -> OUT per trainee per day.

    Every trigger surface (JSON API, Telegram webhook) goes through this class.
    The checks here give precise errors; the store's unique keys are what
    actually keep concurrent duplicates out, and their violations are mapped
    back to the same errors.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        trainees: TraineeService,
        time: TimeAuthority,
        dispatcher: Optional[NotificationDispatcher] = None,
    ):
        self._attendance = attendance
        self._trainees = trainees
        self._time = time
        self._dispatcher = dispatcher

    def _get_open_session(self, trainee_id: int) -> Optional[AttendanceSession]:
        sessions = self._attendance.get_open_sessions(trainee_id)
        if not sessions:
            return None
        if len(sessions) > 1:
            ids = [s.session_id for s in sessions]
            logger.error("trainee %s has %d open sessions: %s", trainee_id, len(sessions), ids)
            raise DataIntegrityError(f"Trainee {trainee_id} has multiple open sessions: {ids}")
        return sessions[0]

    def _notify(self, trainee: Trainee, kind: NotificationKind, at: datetime) -> None:
        if not self._dispatcher:
            return
        try:
            self._dispatcher.notify_commanders(trainee, kind, at)
        except Exception:
            # The state change is already committed; never fail it over a notification.
            logger.exception("%s notification for trainee %s failed", kind.value, trainee.trainee_id)

    @staticmethod
    def _map_violation(exc: UniqueViolation, update_id: int) -> Optional[DomainError]:
        if exc.constraint in REPLAY_CONSTRAINTS:
            return DuplicateReplay(update_id)
        if exc.constraint == OPEN_SESSION_CONSTRAINT:
            return AlreadyClockedIn()
        return None

    def clock_in(self, telegram_user_id: int, *, update_id: int) -> ClockResult:
        trainee = self._trainees.get_active(telegram_user_id)

        if self._attendance.replay_token_exists(update_id):
            raise DuplicateReplay(update_id)

        if self._get_open_session(trainee.trainee_id):
            raise AlreadyClockedIn()

        now = self._time.now()
        if self._time.is_past_cutoff(now):
            raise PastCutoff(self._time.cutoff_hour)

        today = now.date()
        try:
            session_id = self._attendance.create_clock_in(
                trainee_id=trainee.trainee_id,
                update_id=update_id,
                clock_in_time=now,
                session_date=today,
            )
        except UniqueViolation as exc:
            mapped = self._map_violation(exc, update_id)
            if mapped is None:
                raise
            raise mapped from exc

        session = AttendanceSession(
            session_id=session_id,
            trainee_id=trainee.trainee_id,
            clock_in_time=now,
            clock_out_time=None,
            status=SessionStatus.IN,
            session_date=today,
            is_overdue=False,
            update_id=int(update_id),
        )
        logger.info("trainee %s clocked in (session %s, update %s)", trainee.trainee_id, session_id, update_id)

        self._notify(trainee, NotificationKind.CLOCK_IN, now)
        return ClockResult(trainee=trainee, session=session)

    def clock_out(self, telegram_user_id: int, *, update_id: int) -> ClockResult:
        trainee = self._trainees.get_active(telegram_user_id)

        if self._attendance.replay_token_exists(update_id):
            raise DuplicateReplay(update_id)

        session = self._get_open_session(trainee.trainee_id)
        if not session:
            raise NotClockedIn()

        now = self._time.now()
        if now <= session.clock_in_time:
            raise InvalidDuration()

        try:
            closed = self._attendance.close_session(
                session_id=session.session_id,
                trainee_id=trainee.trainee_id,
                update_id=update_id,
                clock_out_time=now,
            )
        except UniqueViolation as exc:
            mapped = self._map_violation(exc, update_id)
            if mapped is None:
                raise
            raise mapped from exc

        if not closed:
            raise NotClockedIn()

        closed_session = AttendanceSession(
            session_id=session.session_id,
            trainee_id=session.trainee_id,
            clock_in_time=session.clock_in_time,
            clock_out_time=now,
            status=SessionStatus.OUT,
            session_date=session.session_date,
            is_overdue=session.is_overdue,
            update_id=session.update_id,
            clock_out_update_id=int(update_id),
        )
        logger.info(
            "trainee %s clocked out (session %s, duration %s)",
            trainee.trainee_id,
            session.session_id,
            closed_session.duration,
        )

        self._notify(trainee, NotificationKind.CLOCK_OUT, now)
        return ClockResult(trainee=trainee, session=closed_session)

    def get_status(self, telegram_user_id: int) -> SessionStatusView:
        trainee = self._trainees.get_active(telegram_user_id)
        return self.get_status_for_trainee(trainee.trainee_id)

    def get_status_for_trainee(self, trainee_id: int) -> SessionStatusView:
        """Pure read: the open session if any, else the latest closed one."""

        session = self._get_open_session(trainee_id)
        if session:
            return SessionStatusView(status=SessionStatus.IN, session=session)

        recent = self._attendance.get_recent_for_trainee(trainee_id, 1)
        return SessionStatusView(status=SessionStatus.OUT, session=recent[0] if recent else None)

    def get_history(self, trainee_id: int, *, limit: int = DEFAULT_HISTORY_LIMIT) -> Sequence[AttendanceSession]:
        return self._attendance.get_recent_for_trainee(trainee_id, limit)

    def get_day(self, session_date: Optional[date] = None, *, company: Optional[Company] = None) -> list[dict]:
        """Daily listing for commanders, with the overdue flag as they should see it now."""

        today = self._time.today()
        session_date = session_date or today
        past_cutoff = self._time.is_past_cutoff()
        return [self._to_view(r, today=today, past_cutoff=past_cutoff) for r in self._attendance.list_for_date(session_date, company=company)]

    def _to_view(self, r: AttendanceDayRow, *, today: date, past_cutoff: bool) -> dict:
        open_now = r.status == SessionStatus.IN and r.clock_out_time is None
        return {
            "session_id": r.session_id,
            "rank": r.rank,
            "name": r.full_name,
            "number": r.identification_number,
            "company": r.company.value,
            "date": r.session_date.isoformat(),
            "clock_in_time": self._time.format_time(r.clock_in_time),
            "clock_out_time": self._time.format_time(r.clock_out_time) if r.clock_out_time else None,
            "status": r.status.value,
            "is_overdue": r.is_overdue or (open_now and r.session_date == today and past_cutoff),
        }
