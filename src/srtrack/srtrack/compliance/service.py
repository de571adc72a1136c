from __future__ import annotations

import logging

from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import TimeAuthority
from ..core.enums import NotificationKind
from ..notifications.service import NotificationDispatcher
from ..trainees.repository import TraineeRepository
from .model import SweepError, SweepReport

logger = logging.getLogger(__name__)


class OverdueSweep:
    """Promotes today's still-open sessions to overdue once the cutoff has passed.

    Idempotent: a row is only notified by the run that flips its flag, so a
    second run the same day finds nothing to do.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        trainees: TraineeRepository,
        dispatcher: NotificationDispatcher,
        time: TimeAuthority,
    ):
        self._attendance = attendance
        self._trainees = trainees
        self._dispatcher = dispatcher
        self._time = time

    def check_and_mark_overdue(self) -> SweepReport:
        today = self._time.today()
        report = SweepReport(session_date=today)

        if not self._time.is_past_cutoff():
            report.skipped_run = True
            report.message = f"Not yet {self._time.cutoff_hour:02d}:00 {self._time.tz_label}; nothing to check"
            logger.info("overdue sweep skipped: before cutoff (%s)", self._time.now().isoformat())
            return report

        candidates = self._attendance.list_overdue_candidates(today)
        if not candidates:
            report.message = "No overdue trainees found"
            logger.info("overdue sweep %s: no open sessions", today)
            return report

        for session in candidates:
            report.processed += 1
            try:
                if not self._attendance.mark_overdue(session.session_id):
                    report.skipped += 1
                    continue
                report.marked += 1

                trainee = self._trainees.get_by_id(session.trainee_id)
                if trainee is None:
                    raise LookupError(f"trainee {session.trainee_id} not found")

                dispatch = self._dispatcher.notify_commanders(trainee, NotificationKind.OVERDUE)
                report.notifications_recorded += dispatch.recorded
                for err in dispatch.errors:
                    report.errors.append(
                        SweepError(
                            session_id=session.session_id,
                            trainee_id=session.trainee_id,
                            error=f"commander {err.commander_id}: {err.error}",
                        )
                    )
            except Exception as exc:
                logger.exception("overdue sweep failed for session %s", session.session_id)
                report.errors.append(SweepError(session_id=session.session_id, trainee_id=session.trainee_id, error=str(exc)))

        report.message = f"Marked {report.marked} trainee(s) as overdue"
        logger.info(
            "overdue sweep %s: processed=%d marked=%d skipped=%d errors=%d",
            today,
            report.processed,
            report.marked,
            report.skipped,
            len(report.errors),
        )
        return report
