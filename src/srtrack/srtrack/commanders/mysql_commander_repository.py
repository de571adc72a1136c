from __future__ import annotations

from typing import Any, Dict, Sequence

from ..core.enums import CommanderRole, Company
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall
from .model import Commander
from .repository import CommanderRepository

_COLUMNS = "commander_id, `rank`, full_name, company, role, is_active, telegram_user_id, contact_number"


def _row_to_commander(r: Dict[str, Any]) -> Commander:
    tg = r.get("telegram_user_id")
    return Commander(
        commander_id=int(r["commander_id"]),
        rank=r["rank"],
        full_name=r["full_name"],
        company=Company(r["company"]),
        role=CommanderRole(r["role"]),
        is_active=bool(r.get("is_active", True)),
        telegram_user_id=int(tg) if tg is not None else None,
        contact_number=r.get("contact_number"),
    )


class MySQLCommanderRepository(CommanderRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_active_by_company(self, company: Company) -> Sequence[Commander]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM commanders
                WHERE company=%s AND is_active=1
                ORDER BY commander_id
                """,
                (company.value,),
            )
            return [_row_to_commander(r) for r in fetchall(cur)]

    def list_active_admins(self) -> Sequence[Commander]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM commanders
                WHERE role=%s AND is_active=1
                ORDER BY commander_id
                """,
                (CommanderRole.ADMIN.value,),
            )
            return [_row_to_commander(r) for r in fetchall(cur)]
