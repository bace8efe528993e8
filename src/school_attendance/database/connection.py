from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import mysql.connector
from mysql.connector.constants import ClientFlag


@dataclass
class DBConfig:
    host: str
    port: int
    user: str
    password: str
    database: str


class DatabaseConnection:
    """Opens MySQL connections for the school repositories.

    Every repository call gets a fresh connection and runs as one transaction
    (see ``db_cursor``). ``FOUND_ROWS`` makes an UPDATE report matched rows, so
    saving a class or student unchanged still counts as found.
    """

    _instance: Optional["DatabaseConnection"] = None

    def __init__(self, config: DBConfig):
        self._config = config

    @classmethod
    def get_instance(cls, config: DBConfig) -> "DatabaseConnection":
        """Process-wide factory shared by the container."""

        if cls._instance is None:
            cls._instance = DatabaseConnection(config)
        return cls._instance

    def connect(self):
        return mysql.connector.connect(
            host=self._config.host,
            port=int(self._config.port),
            user=self._config.user,
            password=self._config.password,
            database=self._config.database,
            autocommit=False,
            client_flags=[ClientFlag.FOUND_ROWS],
        )
