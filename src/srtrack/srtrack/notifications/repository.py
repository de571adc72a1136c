from __future__ import annotations

from datetime import date
from typing import Protocol, Sequence

from ..core.enums import NotificationKind
from .model import NotificationRecord

DEDUP_CONSTRAINT = "uq_notification_dedup"


class NotificationRepository(Protocol):
    def exists(self, *, commander_id: int, trainee_id: int, kind: NotificationKind, notification_date: date) -> bool:
        raise NotImplementedError

    def create_record(
        self,
        *,
        commander_id: int,
        trainee_id: int,
        kind: NotificationKind,
        notification_date: date,
        message_text: str,
        delivered: bool,
    ) -> int:
        """Insert a ledger row. Raises UniqueViolation if the key is already taken."""

        raise NotImplementedError

    def list_for_trainee(self, trainee_id: int, notification_date: date) -> Sequence[NotificationRecord]:
        raise NotImplementedError
