from __future__ import annotations

from dataclasses import dataclass

import mysql.connector

from ..core.exceptions import StoreUnavailable


@dataclass(frozen=True)
class DBConfig:
    host: str
    port: int
    user: str
    password: str
    database: str
    connect_timeout: int = 10

    @classmethod
    def from_dict(cls, db_config: dict) -> "DBConfig":
        return cls(
            host=str(db_config.get("host", "localhost")),
            port=int(db_config.get("port", 3306)),
            user=str(db_config.get("user", "root")),
            password=str(db_config.get("password", "")),
            database=str(db_config.get("database", "attendance_tick")),
            connect_timeout=int(db_config.get("connect_timeout", 10)),
        )


class DatabaseConnection:
    """DB connection factory owned by the MySQL store.

    Note: We create short-lived connections per operation (safe for simple Flask apps).
    Constructed once at startup and closed on shutdown; after `close()` no new
    connections are handed out.
    """

    def __init__(self, config: DBConfig):
        self._config = config
        self._closed = False

    @property
    def config(self) -> DBConfig:
        return self._config

    def connect(self):
        if self._closed:
            raise StoreUnavailable("Database connection factory is closed", backend="mysql")
        return mysql.connector.connect(
            host=self._config.host,
            port=int(self._config.port),
            user=self._config.user,
            password=self._config.password,
            database=self._config.database,
            connection_timeout=int(self._config.connect_timeout),
        )

    def close(self) -> None:
        self._closed = True
