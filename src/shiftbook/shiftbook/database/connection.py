from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import mysql.connector


@dataclass(frozen=True)
class DBConfig:
    host: str = "localhost"
    port: int = 3306
    user: str = "root"
    password: str = ""
    database: str = "shiftbook"

    @classmethod
    def from_dict(cls, raw: dict) -> "DBConfig":
        defaults = cls()
        return cls(
            host=str(raw.get("host") or defaults.host),
            port=int(raw.get("port") or defaults.port),
            user=str(raw.get("user") or defaults.user),
            password=str(raw.get("password") or ""),
            database=str(raw.get("database") or defaults.database),
        )

    def without_database(self) -> dict:
        """Connection kwargs for server-level work such as CREATE DATABASE."""
        return {"host": self.host, "port": self.port, "user": self.user, "password": self.password}


class DatabaseConnection:
    """Shared connection factory for the MySQL repositories.

    Every repository call opens and closes its own connection.
    """

    _instance: Optional["DatabaseConnection"] = None

    def __init__(self, config: DBConfig):
        self.config = config

    @classmethod
    def get_instance(cls, config: DBConfig) -> "DatabaseConnection":
        if cls._instance is None or cls._instance.config != config:
            cls._instance = cls(config)
        return cls._instance

    def connect(self):
        return mysql.connector.connect(database=self.config.database, **self.config.without_database())
