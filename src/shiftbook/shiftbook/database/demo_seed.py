"""Demo data for a fresh business.

Writes only through the repository interfaces, so the same seed fills the
in-memory backend at startup and a MySQL database via scripts/seed_db.py.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from decimal import Decimal

from ..core.enums import (
    PayrollEntryStatus,
    PayrollPeriodStatus,
    Role,
    ScheduleStatus,
    TimeOffStatus,
    TimeOffType,
)
from ..employees.repository import EmployeeRepository
from ..payroll.calculator.aggregates import effective_overtime_rate, plan_periods
from ..payroll.calculator.standard_calculator import gross_pay, net_pay
from ..payroll.repository import PayrollRepository
from ..schedules.repository import ScheduleRepository
from ..timeclock.repository import WorkSessionRepository
from ..timeclock.service import compute_total_hours
from ..timeoff.repository import TimeOffRepository

logger = logging.getLogger(__name__)

DEMO_BUSINESS_ID = "demo-business"


@dataclass(frozen=True)
class DemoIds:
    business_id: str
    employee_id: str
    manager_id: str


def seed_demo_data(
    *,
    employees: EmployeeRepository,
    schedules: ScheduleRepository,
    sessions: WorkSessionRepository,
    time_off: TimeOffRepository,
    payroll: PayrollRepository,
    today: date,
    anchor: date,
    business_id: str = DEMO_BUSINESS_ID,
) -> DemoIds:
    john = employees.create(
        business_id=business_id,
        user_id="user-1",
        first_name="John",
        last_name="Doe",
        email="john@example.com",
        role=Role.EMPLOYEE,
        hourly_rate=Decimal("15.00"),
        overtime_rate=None,
        start_date=date(2024, 1, 15),
    )
    jane = employees.create(
        business_id=business_id,
        user_id="user-2",
        first_name="Jane",
        last_name="Smith",
        email="jane@example.com",
        role=Role.MANAGER,
        hourly_rate=Decimal("22.00"),
        overtime_rate=None,
        start_date=date(2023, 11, 1),
    )

    # A week of alternating morning/evening shifts; the two past ones were worked.
    for i in range(7):
        day = today + timedelta(days=i - 2)
        morning = i % 2 == 0
        start, end = ("09:00", "17:00") if morning else ("14:00", "22:00")
        schedule = schedules.create(
            business_id=business_id,
            employee_id=john.id,
            work_date=day,
            start_time=start,
            end_time=end,
            break_duration=30,
            created_by=jane.id,
        )
        if i >= 2:
            continue

        clock_in = datetime.combine(day, time.fromisoformat(start))
        clock_out = datetime.combine(day, time.fromisoformat(end))
        session = sessions.create_open(
            business_id=business_id,
            employee_id=john.id,
            clock_in_time=clock_in,
            schedule_id=schedule.id,
            break_duration=30,
        )
        sessions.close(
            session.id,
            clock_out_time=clock_out,
            total_hours=compute_total_hours(clock_in, clock_out, 30),
        )
        schedules.update_status(schedule.id, status=ScheduleStatus.COMPLETED, expected=ScheduleStatus.SCHEDULED)

    now = datetime.combine(today, time(9, 0))
    time_off.create(
        business_id=business_id,
        employee_id=john.id,
        type=TimeOffType.VACATION,
        start_date=today + timedelta(days=21),
        end_date=today + timedelta(days=23),
        reason="Family vacation",
        created_at=now,
    )
    sick = time_off.create(
        business_id=business_id,
        employee_id=john.id,
        type=TimeOffType.SICK,
        start_date=today - timedelta(days=7),
        end_date=today - timedelta(days=7),
        reason="Doctor appointment",
        created_at=now - timedelta(days=9),
    )
    time_off.decide(
        sick.id,
        status=TimeOffStatus.APPROVED,
        decided_by=jane.id,
        decided_at=now - timedelta(days=8),
    )

    periods = [
        payroll.create_period(
            business_id=business_id,
            start_date=p.start_date,
            end_date=p.end_date,
            status=p.status,
        )
        for p in plan_periods(anchor=anchor, today=today)
    ]
    last_completed = max(
        (p for p in periods if p.status == PayrollPeriodStatus.COMPLETED),
        key=lambda p: p.start_date,
        default=None,
    )
    if last_completed is not None:
        regular, overtime = Decimal("67.50"), Decimal("2.50")
        hourly = Decimal("15.00")
        ot_rate = effective_overtime_rate(john)
        gross = gross_pay(regular, overtime, hourly, ot_rate)
        deductions = Decimal("237.50")
        entry = payroll.create_entry(
            business_id=business_id,
            employee_id=john.id,
            payroll_period_id=last_completed.id,
            regular_hours=regular,
            overtime_hours=overtime,
            hourly_rate=hourly,
            overtime_rate=ot_rate,
            gross_pay=gross,
            deductions=deductions,
            net_pay=net_pay(gross, deductions),
        )
        payroll.update_entry_status(entry.id, status=PayrollEntryStatus.APPROVED, expected=PayrollEntryStatus.DRAFT)

    logger.info("Demo data seeded", extra={"business_id": business_id})
    return DemoIds(business_id=business_id, employee_id=john.id, manager_id=jane.id)
