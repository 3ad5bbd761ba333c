from __future__ import annotations

from collections import defaultdict
from datetime import date
from decimal import Decimal
from typing import Iterable

from ...common.datetime_utils import week_start_for
from ...core.constants import WEEKLY_OVERTIME_THRESHOLD_HOURS
from ...core.exceptions import ValidationError
from ...employees.model import Employee
from ...timeclock.model import WorkSession
from .aggregates import effective_overtime_rate, round_currency
from .base import PayComputation, PayrollCalculator


def gross_pay(
    regular_hours: Decimal,
    overtime_hours: Decimal,
    hourly_rate: Decimal,
    overtime_rate: Decimal,
) -> Decimal:
    return round_currency(
        Decimal(regular_hours) * Decimal(hourly_rate) + Decimal(overtime_hours) * Decimal(overtime_rate)
    )


def net_pay(gross: Decimal, deductions: Decimal) -> Decimal:
    return round_currency(Decimal(gross) - Decimal(deductions))


class StandardPayrollCalculator(PayrollCalculator):
    """Standard rule: hours past the weekly threshold (Sunday-based weeks) are overtime."""

    def __init__(self, *, weekly_threshold: Decimal = WEEKLY_OVERTIME_THRESHOLD_HOURS):
        self._threshold = Decimal(weekly_threshold)

    def split_hours(self, sessions: Iterable[WorkSession]) -> tuple[Decimal, Decimal]:
        per_week: dict[date, Decimal] = defaultdict(lambda: Decimal("0"))
        for s in sessions:
            if s.clock_out_time is None:
                continue
            per_week[week_start_for(s.clock_in_time.date())] += Decimal(str(s.total_hours))

        regular = Decimal("0")
        overtime = Decimal("0")
        for hours in per_week.values():
            regular += min(hours, self._threshold)
            overtime += max(Decimal("0"), hours - self._threshold)
        return round_currency(regular), round_currency(overtime)

    def compute(
        self,
        employee: Employee,
        sessions: Iterable[WorkSession],
        *,
        deduction_rate: Decimal = Decimal("0"),
    ) -> PayComputation:
        deduction_rate = Decimal(deduction_rate)
        if deduction_rate < 0 or deduction_rate > 1:
            raise ValidationError("Deduction rate must be between 0 and 1")

        regular, overtime = self.split_hours(sessions)
        hourly = round_currency(Decimal(employee.hourly_rate))
        ot_rate = effective_overtime_rate(employee, employee.overtime_rate)

        gross = gross_pay(regular, overtime, hourly, ot_rate)
        deductions = round_currency(gross * deduction_rate)
        return PayComputation(
            regular_hours=regular,
            overtime_hours=overtime,
            hourly_rate=hourly,
            overtime_rate=ot_rate,
            gross_pay=gross,
            deductions=deductions,
            net_pay=net_pay(gross, deductions),
        )
