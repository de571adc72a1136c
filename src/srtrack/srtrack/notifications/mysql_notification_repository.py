from __future__ import annotations

from datetime import date
from typing import Sequence

from ..core.enums import NotificationKind
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_utc, db_cursor, fetchall, fetchone
from .model import NotificationRecord
from .repository import NotificationRepository


class MySQLNotificationRepository(NotificationRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def exists(self, *, commander_id: int, trainee_id: int, kind: NotificationKind, notification_date: date) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT notification_id
                FROM notifications
                WHERE commander_id=%s AND trainee_id=%s AND kind=%s AND notification_date=%s
                """,
                (int(commander_id), int(trainee_id), kind.value, notification_date),
            )
            return fetchone(cur) is not None

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO notifications(commander_id, trainee_id, kind, notification_date, message_text, delivered)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (int(commander_id), int(trainee_id), kind.value, notification_date, message_text, 1 if delivered else 0),
            )
            return int(cur.lastrowid)

    def list_for_trainee(self, trainee_id: int, notification_date: date) -> Sequence[NotificationRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT notification_id, commander_id, trainee_id, kind, notification_date,
                       message_text, delivered, created_at
                FROM notifications
                WHERE trainee_id=%s AND notification_date=%s
                ORDER BY notification_id
                """,
                (int(trainee_id), notification_date),
            )
            return [
                NotificationRecord(
                    notification_id=int(r["notification_id"]),
                    commander_id=int(r["commander_id"]),
                    trainee_id=int(r["trainee_id"]),
                    kind=NotificationKind(r["kind"]),
                    notification_date=r["notification_date"],
                    message_text=r["message_text"],
                    delivered=bool(r.get("delivered")),
                    created_at=as_utc(r.get("created_at")),
                )
                for r in fetchall(cur)
            ]
