from __future__ import annotations

from dataclasses import dataclass

import mysql.connector

from ..core.constants import DEFAULT_STORE_TIMEOUT_SECONDS


@dataclass
class DBConfig:
    host: str
    port: int
    user: str
    password: str
    database: str
    timeout_seconds: int = DEFAULT_STORE_TIMEOUT_SECONDS


class DatabaseConnection:
    """DB connection factory, owned by whoever builds the container.

    Note: We create short-lived connections per operation. Every connection gets
    a bounded connect timeout and lock wait so a stuck store fails fast and the
    caller can let upstream redeliver.
    """

    def __init__(self, config: DBConfig):
        self._config = config

    @property
    def config(self) -> DBConfig:
        return self._config

    def connect(self):
        conn = mysql.connector.connect(
            host=self._config.host,
            port=int(self._config.port),
            user=self._config.user,
            password=self._config.password,
            database=self._config.database,
            connection_timeout=int(self._config.timeout_seconds),
            time_zone="+00:00",
        )
        try:
            cur = conn.cursor()
            try:
                cur.execute("SET SESSION innodb_lock_wait_timeout = %s", (int(self._config.timeout_seconds),))
            finally:
                cur.close()
        except Exception:
            conn.close()
            raise
        return conn
