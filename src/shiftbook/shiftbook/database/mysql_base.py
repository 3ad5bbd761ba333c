from __future__ import annotations

import logging
import uuid
from contextlib import contextmanager
from datetime import time, timedelta
from decimal import Decimal
from typing import Any, Dict, List, Optional

import mysql.connector

from ..common.datetime_utils import format_hhmm, parse_hhmm
from ..core.exceptions import TransportError
from .connection import DatabaseConnection

logger = logging.getLogger(__name__)


@contextmanager
def db_cursor(db: DatabaseConnection, *, dictionary: bool = True):
    """One connection per repository call; commit on success.

    Connector errors surface as TransportError, everything else propagates
    unchanged after a rollback.
    """
    try:
        conn = db.connect()
    except mysql.connector.Error as e:
        logger.exception("Could not connect to database", extra={"backend": "mysql"})
        raise TransportError("Database unavailable") from e

    cur = conn.cursor(dictionary=dictionary)
    try:
        yield conn, cur
        conn.commit()
    except mysql.connector.Error as e:
        conn.rollback()
        logger.exception("Database operation failed", extra={"backend": "mysql"})
        raise TransportError("Database operation failed") from e
    except Exception:
        conn.rollback()
        raise
    finally:
        cur.close()
        conn.close()


def fetchone(cur) -> Optional[Dict[str, Any]]:
    return cur.fetchone() or None


def fetchall(cur) -> List[Dict[str, Any]]:
    return list(cur.fetchall() or [])


def new_id() -> str:
    return str(uuid.uuid4())


def as_decimal(value: Any) -> Decimal:
    if value is None:
        return Decimal("0")
    return value if isinstance(value, Decimal) else Decimal(str(value))


def shift_time_from_mysql(value: Any) -> str:
    """TIME column -> "HH:MM".

    mysql-connector hands TIME back as ``timedelta`` (seconds since midnight);
    some drivers use ``time`` or a string instead.
    """
    if value is None:
        return ""
    if isinstance(value, timedelta):
        seconds = int(value.total_seconds()) % 86400
        value = time(seconds // 3600, (seconds % 3600) // 60)
    if isinstance(value, time):
        return format_hhmm(value)
    return format_hhmm(parse_hhmm(str(value)))
