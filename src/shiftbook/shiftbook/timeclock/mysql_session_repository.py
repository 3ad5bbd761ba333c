from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, new_id
from .model import WorkSession
from .repository import WorkSessionRepository

_COLUMNS = """
    id, business_id, employee_id, schedule_id, clock_in_time, clock_out_time,
    break_duration, total_hours, notes
"""


def _to_session(r: dict) -> WorkSession:
    return WorkSession(
        id=r["id"],
        business_id=r["business_id"],
        employee_id=r["employee_id"],
        schedule_id=r.get("schedule_id"),
        clock_in_time=r["clock_in_time"],
        clock_out_time=r.get("clock_out_time"),
        break_duration=int(r.get("break_duration") or 0),
        total_hours=float(r.get("total_hours") or 0),
        notes=r.get("notes"),
    )


class MySQLWorkSessionRepository(WorkSessionRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_range(
        self,
        business_id: str,
        *,
        employee_id: Optional[str] = None,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> Sequence[WorkSession]:
        clauses = ["business_id=%s"]
        params: list[object] = [business_id]
        if employee_id is not None:
            clauses.append("employee_id=%s")
            params.append(employee_id)
        if start is not None:
            clauses.append("clock_in_time >= %s")
            params.append(start)
        if end is not None:
            clauses.append("clock_in_time <= %s")
            params.append(end)

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM work_sessions
                WHERE {where}
                ORDER BY clock_in_time DESC
                """,
                tuple(params),
            )
            return [_to_session(r) for r in fetchall(cur)]

    def get_by_id(self, session_id: str) -> Optional[WorkSession]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM work_sessions WHERE id=%s", (session_id,))
            r = fetchone(cur)
            return _to_session(r) if r else None

    def get_open_for_employee(self, employee_id: str) -> Optional[WorkSession]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM work_sessions
                WHERE employee_id=%s AND clock_out_time IS NULL
                ORDER BY clock_in_time DESC
                LIMIT 1
                """,
                (employee_id,),
            )
            r = fetchone(cur)
            return _to_session(r) if r else None

    def create_open(
        self,
        *,
        business_id: str,
        employee_id: str,
        clock_in_time: datetime,
        schedule_id: Optional[str] = None,
        break_duration: int = 0,
    ) -> WorkSession:
        session_id = new_id()
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO work_sessions(
                    id, business_id, employee_id, schedule_id, clock_in_time, break_duration, total_hours
                )
                VALUES(%s,%s,%s,%s,%s,%s,0)
                """,
                (session_id, business_id, employee_id, schedule_id, clock_in_time, int(break_duration)),
            )
        return WorkSession(
            id=session_id,
            business_id=business_id,
            employee_id=employee_id,
            schedule_id=schedule_id,
            clock_in_time=clock_in_time,
            break_duration=int(break_duration),
        )

    def close(self, session_id: str, *, clock_out_time: datetime, total_hours: float) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE work_sessions
                SET clock_out_time=%s, total_hours=%s
                WHERE id=%s AND clock_out_time IS NULL
                """,
                (clock_out_time, round(float(total_hours), 2), session_id),
            )
            return cur.rowcount > 0
