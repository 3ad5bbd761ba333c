from __future__ import annotations

from datetime import date, datetime, timedelta
from decimal import Decimal

import pytest

from src.shiftbook.shiftbook.core.enums import Role
from src.shiftbook.shiftbook.core.exceptions import ValidationError
from src.shiftbook.shiftbook.employees.model import Employee
from src.shiftbook.shiftbook.payroll.calculator.standard_calculator import (
    StandardPayrollCalculator,
    gross_pay,
    net_pay,
)
from src.shiftbook.shiftbook.timeclock.model import WorkSession


def _employee(rate: str = "15.00", overtime: str | None = None) -> Employee:
    return Employee(
        id="emp-1",
        business_id="biz",
        user_id=None,
        first_name="John",
        last_name="Doe",
        email="",
        role=Role.EMPLOYEE,
        hourly_rate=Decimal(rate),
        overtime_rate=Decimal(overtime) if overtime else None,
        start_date=date(2024, 1, 1),
    )


def _sessions(first_day: date, days: int, hours: float, *, open_last: bool = False) -> list[WorkSession]:
    out = []
    for i in range(days):
        clock_in = datetime.combine(first_day + timedelta(days=i), datetime.min.time()).replace(hour=8)
        is_open = open_last and i == days - 1
        out.append(
            WorkSession(
                id=f"ws-{first_day.isoformat()}-{i}",
                business_id="biz",
                employee_id="emp-1",
                clock_in_time=clock_in,
                clock_out_time=None if is_open else clock_in + timedelta(hours=hours),
                total_hours=0.0 if is_open else hours,
            )
        )
    return out


def test_gross_pay_regular_plus_overtime():
    assert gross_pay(Decimal("80"), Decimal("5"), Decimal("15"), Decimal("22.50")) == Decimal("1312.50")


def test_net_pay_subtracts_deductions():
    assert net_pay(Decimal("1312.50"), Decimal("237.50")) == Decimal("1075.00")


def test_hours_past_forty_in_one_week_are_overtime():
    # Mon..Fri of the week starting Sunday 2024-03-17
    sessions = _sessions(date(2024, 3, 18), 5, 9.0)

    regular, overtime = StandardPayrollCalculator().split_hours(sessions)

    assert regular == Decimal("40.00")
    assert overtime == Decimal("5.00")


def test_overtime_threshold_applies_per_week():
    # 30h in each of two weeks: no overtime even though the total is 60h
    sessions = _sessions(date(2024, 3, 4), 3, 10.0) + _sessions(date(2024, 3, 11), 3, 10.0)

    regular, overtime = StandardPayrollCalculator().split_hours(sessions)

    assert regular == Decimal("60.00")
    assert overtime == Decimal("0.00")


def test_saturday_and_sunday_fall_in_different_weeks():
    # Sat 2024-03-16 closes one week, Sun 2024-03-17 opens the next
    sessions = _sessions(date(2024, 3, 16), 2, 25.0)

    regular, overtime = StandardPayrollCalculator().split_hours(sessions)

    assert regular == Decimal("50.00")
    assert overtime == Decimal("0.00")


def test_open_sessions_are_not_paid():
    sessions = _sessions(date(2024, 3, 18), 5, 9.0, open_last=True)

    regular, overtime = StandardPayrollCalculator().split_hours(sessions)

    assert regular == Decimal("36.00")
    assert overtime == Decimal("0.00")


def test_compute_two_weeks_matches_expected_gross():
    # 42.5h per week -> 80 regular + 5 overtime at 15 / 22.50
    sessions = _sessions(date(2024, 3, 3), 5, 8.5) + _sessions(date(2024, 3, 10), 5, 8.5)

    pay = StandardPayrollCalculator().compute(_employee(), sessions, deduction_rate=Decimal("0.10"))

    assert pay.regular_hours == Decimal("80.00")
    assert pay.overtime_hours == Decimal("5.00")
    assert pay.hourly_rate == Decimal("15.00")
    assert pay.overtime_rate == Decimal("22.50")
    assert pay.gross_pay == Decimal("1312.50")
    assert pay.deductions == Decimal("131.25")
    assert pay.net_pay == Decimal("1181.25")
    assert pay.gross_pay == pay.regular_hours * pay.hourly_rate + pay.overtime_hours * pay.overtime_rate
    assert pay.net_pay == pay.gross_pay - pay.deductions


def test_compute_uses_stored_overtime_rate():
    sessions = _sessions(date(2024, 3, 18), 5, 9.0)

    pay = StandardPayrollCalculator().compute(_employee("15.00", "30.00"), sessions)

    assert pay.overtime_rate == Decimal("30.00")
    assert pay.gross_pay == Decimal("750.00")
    assert pay.deductions == Decimal("0.00")


def test_custom_weekly_threshold():
    sessions = _sessions(date(2024, 3, 18), 4, 10.0)

    regular, overtime = StandardPayrollCalculator(weekly_threshold=Decimal("35")).split_hours(sessions)

    assert regular == Decimal("35.00")
    assert overtime == Decimal("5.00")


@pytest.mark.parametrize("rate", ["-0.1", "1.5"])
def test_deduction_rate_outside_unit_interval_is_rejected(rate):
    with pytest.raises(ValidationError):
        StandardPayrollCalculator().compute(_employee(), [], deduction_rate=Decimal(rate))
