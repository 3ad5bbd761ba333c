from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from ..core.enums import PayrollEntryStatus, PayrollPeriodStatus


@dataclass(frozen=True)
class PayrollPeriod:
    """Fixed-length pay window. Periods of a business never overlap."""

    id: str
    business_id: str
    start_date: date
    end_date: date
    status: PayrollPeriodStatus

    def contains(self, day: date) -> bool:
        return self.start_date <= day <= self.end_date


@dataclass(frozen=True)
class PayrollEntry:
    id: str
    business_id: str
    employee_id: str
    payroll_period_id: str
    regular_hours: Decimal
    overtime_hours: Decimal
    hourly_rate: Decimal
    overtime_rate: Decimal
    gross_pay: Decimal
    deductions: Decimal
    net_pay: Decimal
    status: PayrollEntryStatus = PayrollEntryStatus.DRAFT


@dataclass(frozen=True)
class PlannedPeriod:
    """A period computed by the planner, before it gets an id."""

    start_date: date
    end_date: date
    status: PayrollPeriodStatus
