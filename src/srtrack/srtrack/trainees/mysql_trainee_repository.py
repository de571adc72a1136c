from __future__ import annotations

from typing import Any, Dict, Optional

from ..core.enums import Company
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_utc, db_cursor, fetchone
from .model import Trainee
from .repository import TraineeRepository

_COLUMNS = "trainee_id, telegram_user_id, `rank`, full_name, identification_number, company, is_active, created_at"


def row_to_trainee(r: Dict[str, Any]) -> Trainee:
    return Trainee(
        trainee_id=int(r["trainee_id"]),
        telegram_user_id=int(r["telegram_user_id"]),
        rank=r["rank"],
        full_name=r["full_name"],
        identification_number=r["identification_number"],
        company=Company(r["company"]),
        is_active=bool(r.get("is_active", True)),
        created_at=as_utc(r.get("created_at")),
    )


class MySQLTraineeRepository(TraineeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _get_one(self, where: str, value: object) -> Optional[Trainee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM trainees WHERE {where}=%s", (value,))
            row = fetchone(cur)
            return row_to_trainee(row) if row else None

    def get_by_id(self, trainee_id: int) -> Optional[Trainee]:
        return self._get_one("trainee_id", int(trainee_id))

    def get_by_telegram_user_id(self, telegram_user_id: int) -> Optional[Trainee]:
        return self._get_one("telegram_user_id", int(telegram_user_id))

    def get_by_identification_number(self, identification_number: str) -> Optional[Trainee]:
        return self._get_one("identification_number", identification_number)

    def create_trainee(
        self,
        *,
        telegram_user_id: int,
        rank: str,
        full_name: str,
        identification_number: str,
        company: Company,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO trainees(telegram_user_id, `rank`, full_name, identification_number, company, is_active)
                VALUES(%s,%s,%s,%s,%s,1)
                """,
                (int(telegram_user_id), rank, full_name, identification_number, company.value),
            )
            return int(cur.lastrowid)

    def set_active(self, trainee_id: int, *, is_active: bool) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE trainees SET is_active=%s WHERE trainee_id=%s",
                (1 if is_active else 0, int(trainee_id)),
            )
            return cur.rowcount > 0

