from __future__ import annotations

import logging
from datetime import date, datetime
from typing import Dict, Optional, Sequence

from ..commanders.model import Commander
from ..commanders.repository import CommanderRepository
from ..common.datetime_utils import TimeAuthority
from ..core.enums import NotificationKind
from ..core.exceptions import UniqueViolation
from ..trainees.model import Trainee
from .messages import compose_message
from .model import DispatchError, DispatchReport, NotificationRecord
from .repository import NotificationRepository
from .sender import MessageSender

logger = logging.getLogger(__name__)


class NotificationDispatcher:
    """Fans a trainee event out to commanders, at most once per commander/trainee/kind/day.

    The ledger row is written after the send attempt whatever its outcome;
    that row, not the send, is what makes a retried trigger safe.
    """

    def __init__(
        self,
        notifications: NotificationRepository,
        commanders: CommanderRepository,
        time: TimeAuthority,
        sender: MessageSender,
        *,
        include_admins: bool = False,
    ):
        self._notifications = notifications
        self._commanders = commanders
        self._time = time
        self._sender = sender
        self._include_admins = bool(include_admins)

    def _resolve_commanders(self, trainee: Trainee) -> Sequence[Commander]:
        found: Dict[int, Commander] = {c.commander_id: c for c in self._commanders.list_active_by_company(trainee.company)}
        if self._include_admins:
            for admin in self._commanders.list_active_admins():
                found.setdefault(admin.commander_id, admin)
        return list(found.values())

    def _deliver(self, commander: Commander, message: str) -> bool:
        if commander.telegram_user_id is None:
            logger.warning("commander %s has no Telegram chat; recording without delivery", commander.commander_id)
            return False
        try:
            return bool(self._sender.send(commander.telegram_user_id, message))
        except Exception:
            logger.exception("send to commander %s failed", commander.commander_id)
            return False

    def notify_commanders(
        self,
        trainee: Trainee,
        action: NotificationKind,
        timestamp: Optional[datetime] = None,
    ) -> DispatchReport:
        report = DispatchReport(kind=action, trainee_id=trainee.trainee_id)

        try:
            commanders = self._resolve_commanders(trainee)
        except Exception as exc:
            logger.exception("could not resolve commanders for company %s", trainee.company.value)
            report.errors.append(DispatchError(commander_id=None, error=str(exc)))
            return report

        if not commanders:
            logger.debug("no active commanders for company %s", trainee.company.value)
            return report

        today = self._time.today()
        message = compose_message(
            action,
            trainee,
            time_str=self._time.format_time(timestamp or self._time.now()),
            tz_label=self._time.tz_label,
            cutoff_hour=self._time.cutoff_hour,
        )

        for commander in commanders:
            try:
                if self._notifications.exists(
                    commander_id=commander.commander_id,
                    trainee_id=trainee.trainee_id,
                    kind=action,
                    notification_date=today,
                ):
                    report.skipped += 1
                    continue

                delivered = self._deliver(commander, message)
                try:
                    self._notifications.create_record(
                        commander_id=commander.commander_id,
                        trainee_id=trainee.trainee_id,
                        kind=action,
                        notification_date=today,
                        message_text=message,
                        delivered=delivered,
                    )
                except UniqueViolation:
                    # A concurrent dispatch recorded it first.
                    report.skipped += 1
                    continue

                report.recorded += 1
                if delivered:
                    report.delivered += 1
            except Exception as exc:
                logger.exception("notification to commander %s failed", commander.commander_id)
                report.errors.append(DispatchError(commander_id=commander.commander_id, error=str(exc)))

        logger.info(
            "%s for trainee %s: recorded=%d delivered=%d skipped=%d errors=%d",
            action.value,
            trainee.trainee_id,
            report.recorded,
            report.delivered,
            report.skipped,
            len(report.errors),
        )
        return report

    def list_sent(self, trainee_id: int, notification_date: Optional[date] = None) -> Sequence[NotificationRecord]:
        """Ledger rows for one trainee on one local day (default today)."""

        return self._notifications.list_for_trainee(int(trainee_id), notification_date or self._time.today())
