from __future__ import annotations

from datetime import datetime, timezone
from unittest.mock import MagicMock, patch

import mysql.connector
import pytest
from mysql.connector import errorcode

from src.srtrack.srtrack.core.exceptions import StoreError, StoreUnavailable, UniqueViolation
from src.srtrack.srtrack.database.bootstrap import iter_sql_statements
from src.srtrack.srtrack.database.connection import DatabaseConnection, DBConfig
from src.srtrack.srtrack.database.mysql_base import as_utc, to_db_datetime, translate_error
from tests.fakes import sgt


def test_duplicate_key_keeps_constraint_name():
    exc = mysql.connector.IntegrityError(
        msg="Duplicate entry '7' for key 'attendance_sessions.uq_open_session'",
        errno=errorcode.ER_DUP_ENTRY,
    )

    err = translate_error(exc)

    assert isinstance(err, UniqueViolation)
    assert err.constraint == "uq_open_session"


def test_duplicate_key_without_table_prefix():
    exc = mysql.connector.IntegrityError(
        msg="Duplicate entry '123456' for key 'uq_replay_update_id'",
        errno=errorcode.ER_DUP_ENTRY,
    )

    assert translate_error(exc).constraint == "uq_replay_update_id"


def test_lock_timeout_is_unavailable():
    exc = mysql.connector.DatabaseError(msg="Lock wait timeout exceeded", errno=errorcode.ER_LOCK_WAIT_TIMEOUT)

    assert isinstance(translate_error(exc), StoreUnavailable)


def test_lost_connection_is_unavailable():
    exc = mysql.connector.InterfaceError(msg="Lost connection to MySQL server", errno=errorcode.CR_SERVER_LOST)

    assert isinstance(translate_error(exc), StoreUnavailable)


def test_other_errors_are_plain_store_errors():
    exc = mysql.connector.ProgrammingError(msg="Unknown column 'x'", errno=errorcode.ER_BAD_FIELD_ERROR)

    err = translate_error(exc)

    assert type(err) is StoreError


def test_datetimes_go_to_the_store_as_naive_utc():
    stored = to_db_datetime(sgt(2026, 3, 2, 9, 0))

    assert stored == datetime(2026, 3, 2, 1, 0)
    assert as_utc(stored) == sgt(2026, 3, 2, 9, 0)
    assert as_utc(None) is None
    assert as_utc(stored).tzinfo is timezone.utc


def test_statement_splitter_ignores_quoted_semicolons():
    sql = "INSERT INTO t VALUES ('a;b');\nINSERT INTO t VALUES ('it\\'s');\n\nSELECT 1"

    assert list(iter_sql_statements(sql)) == [
        "INSERT INTO t VALUES ('a;b')",
        "INSERT INTO t VALUES ('it\\'s')",
        "SELECT 1",
    ]


def test_connection_is_closed_when_session_setup_fails():
    conn = MagicMock()
    conn.cursor.return_value.execute.side_effect = mysql.connector.OperationalError(msg="lock wait timeout")
    db = DatabaseConnection(DBConfig(host="db", port=3306, user="u", password="p", database="srtrack", timeout_seconds=3))

    with patch("mysql.connector.connect", return_value=conn) as connect:
        with pytest.raises(mysql.connector.OperationalError):
            db.connect()

    assert connect.call_args.kwargs["connection_timeout"] == 3
    conn.cursor.return_value.close.assert_called_once()
    conn.close.assert_called_once()


def test_connection_sets_lock_wait_timeout():
    conn = MagicMock()
    db = DatabaseConnection(DBConfig(host="db", port=3306, user="u", password="p", database="srtrack", timeout_seconds=3))

    with patch("mysql.connector.connect", return_value=conn):
        assert db.connect() is conn

    conn.cursor.return_value.execute.assert_called_once_with("SET SESSION innodb_lock_wait_timeout = %s", (3,))
    conn.close.assert_not_called()
