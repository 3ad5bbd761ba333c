from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Sequence

from ..core.enums import TimeOffStatus, TimeOffType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, new_id
from .model import TimeOffRequest
from .repository import TimeOffRepository

_COLUMNS = """
    id, business_id, employee_id, type, start_date, end_date, reason,
    status, created_at, approved_by, approved_at
"""


def _to_request(r: dict) -> TimeOffRequest:
    return TimeOffRequest(
        id=r["id"],
        business_id=r["business_id"],
        employee_id=r["employee_id"],
        type=TimeOffType(r["type"]),
        start_date=r["start_date"],
        end_date=r["end_date"],
        reason=r["reason"],
        status=TimeOffStatus(r["status"]),
        created_at=r["created_at"],
        approved_by=r.get("approved_by"),
        approved_at=r.get("approved_at"),
    )


class MySQLTimeOffRepository(TimeOffRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_for_business(
        self,
        business_id: str,
        *,
        employee_id: Optional[str] = None,
        status: Optional[TimeOffStatus] = None,
    ) -> Sequence[TimeOffRequest]:
        clauses = ["business_id=%s"]
        params: list[object] = [business_id]
        if employee_id is not None:
            clauses.append("employee_id=%s")
            params.append(employee_id)
        if status is not None:
            clauses.append("status=%s")
            params.append(status.value)

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM time_off_requests
                WHERE {where}
                ORDER BY created_at DESC
                """,
                tuple(params),
            )
            return [_to_request(r) for r in fetchall(cur)]

    def get_by_id(self, request_id: str) -> Optional[TimeOffRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM time_off_requests WHERE id=%s", (request_id,))
            r = fetchone(cur)
            return _to_request(r) if r else None

    def create(
        self,
        *,
        business_id: str,
        employee_id: str,
        type: TimeOffType,
        start_date: date,
        end_date: date,
        reason: str,
        created_at: datetime,
    ) -> TimeOffRequest:
        request_id = new_id()
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO time_off_requests(
                    id, business_id, employee_id, type, start_date, end_date, reason, status, created_at
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    request_id,
                    business_id,
                    employee_id,
                    type.value,
                    start_date,
                    end_date,
                    reason,
                    TimeOffStatus.PENDING.value,
                    created_at,
                ),
            )
        return TimeOffRequest(
            id=request_id,
            business_id=business_id,
            employee_id=employee_id,
            type=type,
            start_date=start_date,
            end_date=end_date,
            reason=reason,
            status=TimeOffStatus.PENDING,
            created_at=created_at,
        )

    def decide(
        self,
        request_id: str,
        *,
        status: TimeOffStatus,
        decided_by: str,
        decided_at: datetime,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE time_off_requests
                SET status=%s, approved_by=%s, approved_at=%s
                WHERE id=%s AND status=%s
                """,
                (status.value, decided_by, decided_at, request_id, TimeOffStatus.PENDING.value),
            )
            return cur.rowcount > 0
