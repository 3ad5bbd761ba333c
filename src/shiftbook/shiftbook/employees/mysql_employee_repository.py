from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Optional, Sequence

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_decimal, db_cursor, fetchall, fetchone, new_id
from .model import Employee
from .repository import EmployeeRepository

_COLUMNS = """
    id, business_id, user_id, first_name, last_name, email, role,
    hourly_rate, overtime_rate, start_date, is_active
"""


def _to_employee(r: dict) -> Employee:
    return Employee(
        id=r["id"],
        business_id=r["business_id"],
        user_id=r.get("user_id"),
        first_name=r["first_name"],
        last_name=r["last_name"],
        email=r.get("email") or "",
        role=Role(r["role"]),
        hourly_rate=as_decimal(r.get("hourly_rate")),
        overtime_rate=as_decimal(r["overtime_rate"]) if r.get("overtime_rate") is not None else None,
        start_date=r["start_date"],
        is_active=bool(r.get("is_active", True)),
    )


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_for_business(self, business_id: str, *, include_inactive: bool = False) -> Sequence[Employee]:
        clauses = ["business_id=%s"]
        params: list[object] = [business_id]
        if not include_inactive:
            clauses.append("is_active=1")

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM employees
                WHERE {where}
                ORDER BY last_name, first_name
                """,
                tuple(params),
            )
            return [_to_employee(r) for r in fetchall(cur)]

    def get_by_id(self, employee_id: str) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM employees WHERE id=%s", (employee_id,))
            r = fetchone(cur)
            return _to_employee(r) if r else None

    def create(
        self,
        *,
        business_id: str,
        user_id: Optional[str],
        first_name: str,
        last_name: str,
        email: str,
        role: Role,
        hourly_rate: Decimal,
        overtime_rate: Optional[Decimal],
        start_date: date,
    ) -> Employee:
        employee_id = new_id()
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO employees(
                    id, business_id, user_id, first_name, last_name, email, role,
                    hourly_rate, overtime_rate, start_date, is_active
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,1)
                """,
                (
                    employee_id,
                    business_id,
                    user_id,
                    first_name,
                    last_name,
                    email,
                    role.value,
                    hourly_rate,
                    overtime_rate,
                    start_date,
                ),
            )
        return Employee(
            id=employee_id,
            business_id=business_id,
            user_id=user_id,
            first_name=first_name,
            last_name=last_name,
            email=email,
            role=role,
            hourly_rate=hourly_rate,
            overtime_rate=overtime_rate,
            start_date=start_date,
        )

    def update_rates(self, employee_id: str, *, hourly_rate: Decimal, overtime_rate: Decimal) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE employees SET hourly_rate=%s, overtime_rate=%s WHERE id=%s",
                (hourly_rate, overtime_rate, employee_id),
            )
            return cur.rowcount > 0

    def set_active(self, employee_id: str, *, is_active: bool) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE employees SET is_active=%s WHERE id=%s", (1 if is_active else 0, employee_id))
            return cur.rowcount > 0
