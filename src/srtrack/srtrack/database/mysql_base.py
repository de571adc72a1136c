from __future__ import annotations

import logging
import re
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import mysql.connector
from mysql.connector import errorcode

from ..core.exceptions import StoreError, StoreUnavailable, UniqueViolation
from .connection import DatabaseConnection

logger = logging.getLogger(__name__)

_DUPLICATE_KEY = re.compile(r"for key '(?:[\w]+\.)?([\w]+)'")

_UNAVAILABLE_ERRNOS = {
    errorcode.CR_CONN_HOST_ERROR,
    errorcode.CR_CONNECTION_ERROR,
    errorcode.CR_SERVER_GONE_ERROR,
    errorcode.CR_SERVER_LOST,
    errorcode.ER_LOCK_WAIT_TIMEOUT,
    errorcode.ER_LOCK_DEADLOCK,
}


def translate_error(exc: mysql.connector.Error) -> StoreError:
    """Map a driver error to the store error hierarchy used by services."""

    if exc.errno == errorcode.ER_DUP_ENTRY:
        match = _DUPLICATE_KEY.search(exc.msg or "")
        return UniqueViolation(match.group(1) if match else None, str(exc.msg))
    if exc.errno in _UNAVAILABLE_ERRNOS or isinstance(exc, (mysql.connector.InterfaceError, mysql.connector.OperationalError)):
        return StoreUnavailable(str(exc))
    return StoreError(str(exc))


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    """One connection and one transaction: commit on success, rollback on error."""

    try:
        conn = conn_factory.connect()
    except mysql.connector.Error as exc:
        raise translate_error(exc) from exc

    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except mysql.connector.Error as exc:
        conn.rollback()
        logger.warning("store error errno=%s: %s", exc.errno, exc.msg)
        raise translate_error(exc) from exc
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """DATETIME columns hold UTC; the driver hands them back naive."""

    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def to_db_datetime(value: datetime) -> datetime:
    return value.astimezone(timezone.utc).replace(tzinfo=None)
