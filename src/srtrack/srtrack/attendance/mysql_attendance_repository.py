from __future__ import annotations

from datetime import date, datetime
from typing import Any, Dict, Optional, Sequence

from ..core.enums import Company, NotificationKind, SessionStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_utc, db_cursor, fetchall, fetchone, to_db_datetime
from .model import AttendanceDayRow, AttendanceSession
from .repository import AttendanceRepository

_COLUMNS = (
    "session_id, trainee_id, clock_in_time, clock_out_time, status, session_date, "
    "is_overdue, update_id, clock_out_update_id"
)


def _row_to_session(r: Dict[str, Any]) -> AttendanceSession:
    out_update = r.get("clock_out_update_id")
    return AttendanceSession(
        session_id=int(r["session_id"]),
        trainee_id=int(r["trainee_id"]),
        clock_in_time=as_utc(r["clock_in_time"]),
        clock_out_time=as_utc(r.get("clock_out_time")),
        status=SessionStatus(r["status"]),
        session_date=r["session_date"],
        is_overdue=bool(r.get("is_overdue")),
        update_id=int(r["update_id"]),
        clock_out_update_id=int(out_update) if out_update is not None else None,
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def replay_token_exists(self, update_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT 1 AS hit FROM replay_tokens WHERE update_id=%s", (int(update_id),))
            return fetchone(cur) is not None

    def get_open_sessions(self, trainee_id: int) -> Sequence[AttendanceSession]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_sessions
                WHERE trainee_id=%s AND status=%s AND clock_out_time IS NULL
                ORDER BY clock_in_time DESC
                """,
                (int(trainee_id), SessionStatus.IN.value),
            )
            return [_row_to_session(r) for r in fetchall(cur)]

    def get_recent_for_trainee(self, trainee_id: int, limit: int) -> Sequence[AttendanceSession]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_sessions
                WHERE trainee_id=%s
                ORDER BY clock_in_time DESC
                LIMIT %s
                """,
                (int(trainee_id), int(limit)),
            )
            return [_row_to_session(r) for r in fetchall(cur)]

    def create_clock_in(
        self,
        *,
        trainee_id: int,
        update_id: int,
        clock_in_time: datetime,
        session_date: date,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO replay_tokens(update_id, trainee_id, action) VALUES(%s,%s,%s)",
                (int(update_id), int(trainee_id), NotificationKind.CLOCK_IN.value),
            )
            cur.execute(
                """
                INSERT INTO attendance_sessions(trainee_id, clock_in_time, status, session_date, is_overdue, update_id)
                VALUES(%s,%s,%s,%s,0,%s)
                """,
                (int(trainee_id), to_db_datetime(clock_in_time), SessionStatus.IN.value, session_date, int(update_id)),
            )
            return int(cur.lastrowid)

    def close_session(
        self,
        *,
        session_id: int,
        trainee_id: int,
        update_id: int,
        clock_out_time: datetime,
    ) -> bool:
        with db_cursor(self._conn_factory) as (conn, cur):
            cur.execute(
                "INSERT INTO replay_tokens(update_id, trainee_id, action) VALUES(%s,%s,%s)",
                (int(update_id), int(trainee_id), NotificationKind.CLOCK_OUT.value),
            )
            cur.execute(
                """
                UPDATE attendance_sessions
                SET clock_out_time=%s, status=%s, clock_out_update_id=%s
                WHERE session_id=%s AND status=%s AND clock_out_time IS NULL
                """,
                (
                    to_db_datetime(clock_out_time),
                    SessionStatus.OUT.value,
                    int(update_id),
                    int(session_id),
                    SessionStatus.IN.value,
                ),
            )
            if cur.rowcount == 0:
                # Closed by someone else; give the token back.
                conn.rollback()
                return False
            return True

    def list_overdue_candidates(self, session_date: date) -> Sequence[AttendanceSession]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_sessions
                WHERE session_date=%s AND status=%s AND clock_out_time IS NULL AND is_overdue=0
                ORDER BY clock_in_time ASC
                """,
                (session_date, SessionStatus.IN.value),
            )
            return [_row_to_session(r) for r in fetchall(cur)]

    def mark_overdue(self, session_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_sessions
                SET is_overdue=1
                WHERE session_id=%s AND status=%s AND clock_out_time IS NULL AND is_overdue=0
                """,
                (int(session_id), SessionStatus.IN.value),
            )
            return cur.rowcount > 0

    def list_for_date(self, session_date: date, *, company: Optional[Company] = None) -> Sequence[AttendanceDayRow]:
        clauses = ["s.session_date=%s"]
        params: list[object] = [session_date]
        if company is not None:
            clauses.append("t.company=%s")
            params.append(company.value)

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT
                    s.session_id, s.trainee_id, t.`rank`, t.full_name, t.identification_number, t.company,
                    s.session_date, s.clock_in_time, s.clock_out_time, s.status, s.is_overdue
                FROM attendance_sessions s
                JOIN trainees t ON t.trainee_id = s.trainee_id
                WHERE {where}
                ORDER BY s.clock_in_time DESC
                """,
                tuple(params),
            )
            return [
                AttendanceDayRow(
                    session_id=int(r["session_id"]),
                    trainee_id=int(r["trainee_id"]),
                    rank=r["rank"],
                    full_name=r["full_name"],
                    identification_number=r["identification_number"],
                    company=Company(r["company"]),
                    session_date=r["session_date"],
                    clock_in_time=as_utc(r["clock_in_time"]),
                    clock_out_time=as_utc(r.get("clock_out_time")),
                    status=SessionStatus(r["status"]),
                    is_overdue=bool(r.get("is_overdue")),
                )
                for r in fetchall(cur)
            ]
