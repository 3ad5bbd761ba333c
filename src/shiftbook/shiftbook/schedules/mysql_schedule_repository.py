from __future__ import annotations

from datetime import date
from typing import Optional, Sequence

from ..core.enums import ScheduleStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, shift_time_from_mysql, new_id
from .model import Schedule
from .repository import ScheduleRepository

_COLUMNS = """
    id, business_id, employee_id, work_date, start_time, end_time,
    break_duration, notes, status, created_by
"""


def _to_schedule(r: dict) -> Schedule:
    return Schedule(
        id=r["id"],
        business_id=r["business_id"],
        employee_id=r["employee_id"],
        date=r["work_date"],
        start_time=shift_time_from_mysql(r["start_time"]),
        end_time=shift_time_from_mysql(r["end_time"]),
        break_duration=int(r.get("break_duration") or 0),
        status=ScheduleStatus(r["status"]),
        created_by=r.get("created_by"),
        notes=r.get("notes"),
    )


class MySQLScheduleRepository(ScheduleRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_range(
        self,
        business_id: str,
        *,
        start: Optional[date] = None,
        end: Optional[date] = None,
        employee_id: Optional[str] = None,
    ) -> Sequence[Schedule]:
        clauses = ["business_id=%s"]
        params: list[object] = [business_id]
        if employee_id is not None:
            clauses.append("employee_id=%s")
            params.append(employee_id)
        if start is not None:
            clauses.append("work_date >= %s")
            params.append(start)
        if end is not None:
            clauses.append("work_date <= %s")
            params.append(end)

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM employee_schedules
                WHERE {where}
                ORDER BY work_date ASC, start_time ASC
                """,
                tuple(params),
            )
            return [_to_schedule(r) for r in fetchall(cur)]

    def get_by_id(self, schedule_id: str) -> Optional[Schedule]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM employee_schedules WHERE id=%s", (schedule_id,))
            r = fetchone(cur)
            return _to_schedule(r) if r else None

    def create(
        self,
        *,
        business_id: str,
        employee_id: str,
        work_date: date,
        start_time: str,
        end_time: str,
        break_duration: int,
        created_by: Optional[str],
        notes: Optional[str] = None,
    ) -> Schedule:
        schedule_id = new_id()
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO employee_schedules(
                    id, business_id, employee_id, work_date, start_time, end_time,
                    break_duration, notes, status, created_by
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    schedule_id,
                    business_id,
                    employee_id,
                    work_date,
                    start_time,
                    end_time,
                    int(break_duration),
                    notes,
                    ScheduleStatus.SCHEDULED.value,
                    created_by,
                ),
            )
        return Schedule(
            id=schedule_id,
            business_id=business_id,
            employee_id=employee_id,
            date=work_date,
            start_time=start_time,
            end_time=end_time,
            break_duration=int(break_duration),
            status=ScheduleStatus.SCHEDULED,
            created_by=created_by,
            notes=notes,
        )

    def update_status(self, schedule_id: str, *, status: ScheduleStatus, expected: ScheduleStatus) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE employee_schedules SET status=%s WHERE id=%s AND status=%s",
                (status.value, schedule_id, expected.value),
            )
            return cur.rowcount > 0
