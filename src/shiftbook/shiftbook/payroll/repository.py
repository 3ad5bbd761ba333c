from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Optional, Protocol, Sequence

from ..core.enums import PayrollEntryStatus, PayrollPeriodStatus
from .model import PayrollEntry, PayrollPeriod


class PayrollRepository(Protocol):
    # -------- Periods --------
    def list_periods(self, business_id: str) -> Sequence[PayrollPeriod]:
        """Periods ordered by start date, newest first."""

        raise NotImplementedError

    def get_period(self, period_id: str) -> Optional[PayrollPeriod]:
        raise NotImplementedError

    def create_period(
        self,
        *,
        business_id: str,
        start_date: date,
        end_date: date,
        status: PayrollPeriodStatus,
    ) -> PayrollPeriod:
        raise NotImplementedError

    def update_period_status(self, period_id: str, *, status: PayrollPeriodStatus) -> bool:
        raise NotImplementedError

    # -------- Entries --------
    def list_entries(
        self,
        business_id: str,
        *,
        period_id: Optional[str] = None,
        employee_id: Optional[str] = None,
    ) -> Sequence[PayrollEntry]:
        raise NotImplementedError

    def get_entry(self, entry_id: str) -> Optional[PayrollEntry]:
        raise NotImplementedError

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
        raise NotImplementedError

    def update_entry_status(
        self,
        entry_id: str,
        *,
        status: PayrollEntryStatus,
        expected: PayrollEntryStatus,
    ) -> bool:
        """Set status only if it still equals ``expected``."""

        raise NotImplementedError
