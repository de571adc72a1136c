from __future__ import annotations

from datetime import datetime
from typing import Optional

from ..core.enums import RegistrationStep
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_utc, db_cursor, fetchone, to_db_datetime
from .model import RegistrationState
from .repository import RegistrationStateRepository


class MySQLRegistrationStateRepository(RegistrationStateRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, telegram_user_id: int) -> Optional[RegistrationState]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT telegram_user_id, step, `rank`, full_name, identification_number, expires_at
                FROM registration_states
                WHERE telegram_user_id=%s
                """,
                (int(telegram_user_id),),
            )
            r = fetchone(cur)
            if not r:
                return None
            return RegistrationState(
                telegram_user_id=int(r["telegram_user_id"]),
                step=RegistrationStep(r["step"]),
                expires_at=as_utc(r["expires_at"]),
                rank=r.get("rank"),
                full_name=r.get("full_name"),
                identification_number=r.get("identification_number"),
            )

    def save(self, state: RegistrationState) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO registration_states(telegram_user_id, step, `rank`, full_name, identification_number, expires_at)
                VALUES(%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    step=VALUES(step), `rank`=VALUES(`rank`), full_name=VALUES(full_name),
                    identification_number=VALUES(identification_number), expires_at=VALUES(expires_at)
                """,
                (
                    int(state.telegram_user_id),
                    state.step.value,
                    state.rank,
                    state.full_name,
                    state.identification_number,
                    to_db_datetime(state.expires_at),
                ),
            )

    def transition(self, telegram_user_id: int, *, from_step: RegistrationStep, to_step: RegistrationStep) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE registration_states SET step=%s WHERE telegram_user_id=%s AND step=%s",
                (to_step.value, int(telegram_user_id), from_step.value),
            )
            return cur.rowcount > 0

    def delete(self, telegram_user_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM registration_states WHERE telegram_user_id=%s", (int(telegram_user_id),))
            return cur.rowcount > 0

    def purge_expired(self, now: datetime) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM registration_states WHERE expires_at <= %s", (to_db_datetime(now),))
            return int(cur.rowcount)
