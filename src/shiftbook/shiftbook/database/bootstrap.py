"""Idempotent schema setup for the MySQL backend (database/schema.sql)."""
from __future__ import annotations

import logging
import re
from contextlib import closing
from pathlib import Path
from typing import Iterator

import mysql.connector

from ..core.exceptions import TransportError
from .connection import DBConfig

logger = logging.getLogger(__name__)

# The target database always comes from DB_CONFIG, never from the script.
_DB_SELECTION = re.compile(r"^\s*(CREATE\s+DATABASE|USE)\b[^;]*;", re.IGNORECASE | re.MULTILINE)
_LINE_COMMENT = re.compile(r"^\s*--.*$", re.MULTILINE)


def iter_sql_statements(script: str) -> Iterator[str]:
    """Statements of a DDL script, without comments or database selection.

    Splits on ';'. The schema holds no string literals containing one.
    """
    script = _DB_SELECTION.sub("", _LINE_COMMENT.sub("", script))
    for chunk in script.split(";"):
        stmt = chunk.strip()
        if stmt:
            yield stmt


def _connect(config: DBConfig, *, with_database: bool = True):
    kwargs = config.without_database()
    if with_database:
        kwargs["database"] = config.database
    try:
        return mysql.connector.connect(**kwargs)
    except mysql.connector.Error as e:
        raise TransportError(f"Cannot reach MySQL at {config.host}:{config.port}") from e


def ensure_database_exists(db_config: dict) -> None:
    config = DBConfig.from_dict(db_config)
    with closing(_connect(config, with_database=False)) as conn:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{config.database}` "
            "CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )
        conn.commit()


def apply_schema(db_config: dict, *, schema_path: str | Path) -> int:
    """Create the database if needed and run every statement; returns how many ran."""
    ensure_database_exists(db_config)
    statements = list(iter_sql_statements(Path(schema_path).read_text(encoding="utf-8")))

    with closing(_connect(DBConfig.from_dict(db_config))) as conn:
        cur = conn.cursor()
        for stmt in statements:
            cur.execute(stmt)
        conn.commit()

    logger.info("Schema applied", extra={"statements": len(statements), "schema_path": str(schema_path)})
    return len(statements)


def list_tables(db_config: dict) -> list[str]:
    with closing(_connect(DBConfig.from_dict(db_config))) as conn:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return sorted(row[0] for row in cur.fetchall())
