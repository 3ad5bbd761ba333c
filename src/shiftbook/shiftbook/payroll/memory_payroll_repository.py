from __future__ import annotations

import threading
import uuid
from dataclasses import replace
from datetime import date
from decimal import Decimal
from typing import Optional, Sequence

from ..core.enums import PayrollEntryStatus, PayrollPeriodStatus
from .model import PayrollEntry, PayrollPeriod
from .repository import PayrollRepository


class InMemoryPayrollRepository(PayrollRepository):
    def __init__(self):
        self._lock = threading.Lock()
        self._periods: dict[str, PayrollPeriod] = {}
        self._entries: dict[str, PayrollEntry] = {}

    def add_period(self, period: PayrollPeriod) -> PayrollPeriod:
        with self._lock:
            self._periods[period.id] = period
        return period

    def add_entry(self, entry: PayrollEntry) -> PayrollEntry:
        with self._lock:
            self._entries[entry.id] = entry
        return entry

    def list_periods(self, business_id: str) -> Sequence[PayrollPeriod]:
        with self._lock:
            items = [p for p in self._periods.values() if p.business_id == business_id]
        items.sort(key=lambda p: p.start_date, reverse=True)
        return items

    def get_period(self, period_id: str) -> Optional[PayrollPeriod]:
        with self._lock:
            return self._periods.get(period_id)

    def create_period(
        self,
        *,
        business_id: str,
        start_date: date,
        end_date: date,
        status: PayrollPeriodStatus,
    ) -> PayrollPeriod:
        return self.add_period(
            PayrollPeriod(
                id=str(uuid.uuid4()),
                business_id=business_id,
                start_date=start_date,
                end_date=end_date,
                status=status,
            )
        )

    def update_period_status(self, period_id: str, *, status: PayrollPeriodStatus) -> bool:
        with self._lock:
            current = self._periods.get(period_id)
            if not current:
                return False
            self._periods[period_id] = replace(current, status=status)
            return True

    def list_entries(
        self,
        business_id: str,
        *,
        period_id: Optional[str] = None,
        employee_id: Optional[str] = None,
    ) -> Sequence[PayrollEntry]:
        with self._lock:
            items = [e for e in self._entries.values() if e.business_id == business_id]
        if period_id is not None:
            items = [e for e in items if e.payroll_period_id == period_id]
        if employee_id is not None:
            items = [e for e in items if e.employee_id == employee_id]
        return items

    def get_entry(self, entry_id: str) -> Optional[PayrollEntry]:
        with self._lock:
            return self._entries.get(entry_id)

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
        return self.add_entry(
            PayrollEntry(
                id=str(uuid.uuid4()),
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
        )

    def update_entry_status(
        self,
        entry_id: str,
        *,
        status: PayrollEntryStatus,
        expected: PayrollEntryStatus,
    ) -> bool:
        with self._lock:
            current = self._entries.get(entry_id)
            if not current or current.status != expected:
                return False
            self._entries[entry_id] = replace(current, status=status)
            return True
