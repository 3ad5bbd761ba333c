"""Hours and payroll aggregation over already-loaded records.

Every function here is pure: no repository access, no clock reads.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable, Optional

from ...common.datetime_utils import parse_hhmm
from ...core.constants import (
    CENTS,
    DEFAULT_PERIODS_FUTURE,
    DEFAULT_PERIODS_PAST,
    OVERTIME_MULTIPLIER,
    PAY_PERIOD_DAYS,
    SHIFT_REFERENCE_DATE,
)
from ...core.enums import PayrollPeriodStatus
from ...core.exceptions import InvalidTimeRange, ValidationError
from ...employees.model import Employee
from ...schedules.model import Schedule
from ...timeclock.model import WorkSession
from ..model import PayrollEntry, PlannedPeriod


@dataclass(frozen=True)
class WeeklyHours:
    scheduled_hours: float
    worked_hours: float
    remaining: float


@dataclass(frozen=True)
class PayrollSummary:
    total_hours: Decimal
    total_gross: Decimal
    total_net: Decimal
    entry_count: int


def round_currency(value: Decimal) -> Decimal:
    return Decimal(value).quantize(CENTS, rounding=ROUND_HALF_UP)


def shift_duration_hours(start_time: str, end_time: str) -> float:
    start = datetime.combine(SHIFT_REFERENCE_DATE, parse_hhmm(start_time))
    end = datetime.combine(SHIFT_REFERENCE_DATE, parse_hhmm(end_time))
    if end <= start:
        raise InvalidTimeRange(f"Shift end {end_time} must be after start {start_time}")
    return (end - start).total_seconds() / 3600


def weekly_hours(
    schedules: Iterable[Schedule],
    sessions: Iterable[WorkSession],
    week_start: date,
) -> WeeklyHours:
    """Scheduled vs. worked hours since ``week_start``.

    A single malformed schedule fails the whole aggregation.
    """
    since = datetime.combine(week_start, time.min)

    scheduled = 0.0
    for s in schedules:
        if s.date >= week_start:
            scheduled += shift_duration_hours(s.start_time, s.end_time)

    worked = 0.0
    for ws in sessions:
        if ws.clock_in_time >= since and ws.clock_out_time is not None:
            worked += float(ws.total_hours)

    return WeeklyHours(
        scheduled_hours=scheduled,
        worked_hours=worked,
        remaining=max(0.0, scheduled - worked),
    )


def payroll_summary(entries: Iterable[PayrollEntry]) -> PayrollSummary:
    """Display totals; stored gross/net values are trusted as-is."""
    total_hours = Decimal("0")
    total_gross = Decimal("0")
    total_net = Decimal("0")
    count = 0
    for e in entries:
        total_hours += Decimal(e.regular_hours) + Decimal(e.overtime_hours)
        total_gross += Decimal(e.gross_pay)
        total_net += Decimal(e.net_pay)
        count += 1
    return PayrollSummary(
        total_hours=total_hours,
        total_gross=total_gross,
        total_net=total_net,
        entry_count=count,
    )


def effective_overtime_rate(employee: Employee, supplied_rate: Optional[Decimal] = None) -> Decimal:
    if supplied_rate is not None:
        return round_currency(Decimal(supplied_rate))
    return round_currency(Decimal(employee.hourly_rate) * OVERTIME_MULTIPLIER)


def plan_periods(
    *,
    anchor: date,
    today: date,
    past: int = DEFAULT_PERIODS_PAST,
    future: int = DEFAULT_PERIODS_FUTURE,
    length_days: int = PAY_PERIOD_DAYS,
) -> list[PlannedPeriod]:
    """Contiguous pay periods aligned on ``anchor`` around ``today``.

    Exactly one returned period is CURRENT: the one containing ``today``.
    """
    if length_days <= 0:
        raise ValidationError("Pay period length must be positive")
    if past < 0 or future < 0:
        raise ValidationError("Period counts must be zero or greater")

    offset = (today - anchor).days // length_days
    current_start = anchor + timedelta(days=offset * length_days)

    planned: list[PlannedPeriod] = []
    for i in range(-past, future + 1):
        start = current_start + timedelta(days=i * length_days)
        end = start + timedelta(days=length_days - 1)
        planned.append(PlannedPeriod(start_date=start, end_date=end, status=period_status_on(start, end, today)))
    return planned


def period_status_on(start_date: date, end_date: date, today: date) -> PayrollPeriodStatus:
    if end_date < today:
        return PayrollPeriodStatus.COMPLETED
    if start_date > today:
        return PayrollPeriodStatus.UPCOMING
    return PayrollPeriodStatus.CURRENT
