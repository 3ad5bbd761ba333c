from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Optional, Sequence

from ..core.enums import PayrollEntryStatus, PayrollPeriodStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_decimal, db_cursor, fetchall, fetchone, new_id
from .model import PayrollEntry, PayrollPeriod
from .repository import PayrollRepository

_PERIOD_COLUMNS = "id, business_id, start_date, end_date, status"

_ENTRY_COLUMNS = """
    id, business_id, employee_id, payroll_period_id, regular_hours, overtime_hours,
    hourly_rate, overtime_rate, gross_pay, deductions, net_pay, status
"""


def _to_period(r: dict) -> PayrollPeriod:
    return PayrollPeriod(
        id=r["id"],
        business_id=r["business_id"],
        start_date=r["start_date"],
        end_date=r["end_date"],
        status=PayrollPeriodStatus(r["status"]),
    )


def _to_entry(r: dict) -> PayrollEntry:
    return PayrollEntry(
        id=r["id"],
        business_id=r["business_id"],
        employee_id=r["employee_id"],
        payroll_period_id=r["payroll_period_id"],
        regular_hours=as_decimal(r.get("regular_hours")),
        overtime_hours=as_decimal(r.get("overtime_hours")),
        hourly_rate=as_decimal(r.get("hourly_rate")),
        overtime_rate=as_decimal(r.get("overtime_rate")),
        gross_pay=as_decimal(r.get("gross_pay")),
        deductions=as_decimal(r.get("deductions")),
        net_pay=as_decimal(r.get("net_pay")),
        status=PayrollEntryStatus(r["status"]),
    )


class MySQLPayrollRepository(PayrollRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    # -------- Periods --------
    def list_periods(self, business_id: str) -> Sequence[PayrollPeriod]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_PERIOD_COLUMNS}
                FROM payroll_periods
                WHERE business_id=%s
                ORDER BY start_date DESC
                """,
                (business_id,),
            )
            return [_to_period(r) for r in fetchall(cur)]

    def get_period(self, period_id: str) -> Optional[PayrollPeriod]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_PERIOD_COLUMNS} FROM payroll_periods WHERE id=%s", (period_id,))
            r = fetchone(cur)
            return _to_period(r) if r else None

    def create_period(
        self,
        *,
        business_id: str,
        start_date: date,
        end_date: date,
        status: PayrollPeriodStatus,
    ) -> PayrollPeriod:
        period_id = new_id()
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO payroll_periods(id, business_id, start_date, end_date, status)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (period_id, business_id, start_date, end_date, status.value),
            )
        return PayrollPeriod(
            id=period_id,
            business_id=business_id,
            start_date=start_date,
            end_date=end_date,
            status=status,
        )

    def update_period_status(self, period_id: str, *, status: PayrollPeriodStatus) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE payroll_periods SET status=%s WHERE id=%s",
                (status.value, period_id),
            )
            return cur.rowcount > 0

    # -------- Entries --------
    def list_entries(
        self,
        business_id: str,
        *,
        period_id: Optional[str] = None,
        employee_id: Optional[str] = None,
    ) -> Sequence[PayrollEntry]:
        clauses = ["business_id=%s"]
        params: list[object] = [business_id]
        if period_id is not None:
            clauses.append("payroll_period_id=%s")
            params.append(period_id)
        if employee_id is not None:
            clauses.append("employee_id=%s")
            params.append(employee_id)

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_ENTRY_COLUMNS} FROM payroll_entries WHERE {where}", tuple(params))
            return [_to_entry(r) for r in fetchall(cur)]

    def get_entry(self, entry_id: str) -> Optional[PayrollEntry]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_ENTRY_COLUMNS} FROM payroll_entries WHERE id=%s", (entry_id,))
            r = fetchone(cur)
            return _to_entry(r) if r else None

    def create_entry(
        self,
        *,
        business_id: str,
        employee_id: str,
        payroll_period_id: str,
        regular_hours: Decimal,
        overtime_hours: Decimal,
        hourly_rate: Decimal,
        overtime_rate: Decimal,
        gross_pay: Decimal,
        deductions: Decimal,
        net_pay: Decimal,
    ) -> PayrollEntry:
        entry_id = new_id()
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO payroll_entries(
                    id, business_id, employee_id, payroll_period_id, regular_hours, overtime_hours,
                    hourly_rate, overtime_rate, gross_pay, deductions, net_pay, status
                )
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    entry_id,
                    business_id,
                    employee_id,
                    payroll_period_id,
                    regular_hours,
                    overtime_hours,
                    hourly_rate,
                    overtime_rate,
                    gross_pay,
                    deductions,
                    net_pay,
                    PayrollEntryStatus.DRAFT.value,
                ),
            )
        return PayrollEntry(
            id=entry_id,
            business_id=business_id,
            employee_id=employee_id,
            payroll_period_id=payroll_period_id,
            regular_hours=regular_hours,
            overtime_hours=overtime_hours,
            hourly_rate=hourly_rate,
            overtime_rate=overtime_rate,
            gross_pay=gross_pay,
            deductions=deductions,
            net_pay=net_pay,
        )

    def update_entry_status(
        self,
        entry_id: str,
        *,
        status: PayrollEntryStatus,
        expected: PayrollEntryStatus,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE payroll_entries SET status=%s WHERE id=%s AND status=%s",
                (status.value, entry_id, expected.value),
            )
            return cur.rowcount > 0
