from __future__ import annotations

from datetime import date, datetime, timedelta
from decimal import Decimal

import pytest

from src.shiftbook.shiftbook.core.enums import (
    NotificationType,
    PayrollEntryStatus,
    PayrollPeriodStatus,
    Role,
)
from src.shiftbook.shiftbook.core.exceptions import (
    AuthorizationError,
    InvalidTransition,
    StateConflict,
    TransportError,
    ValidationError,
)
from src.shiftbook.shiftbook.employees.memory_employee_repository import InMemoryEmployeeRepository
from src.shiftbook.shiftbook.notifications.dispatcher import RecordingNotifier
from src.shiftbook.shiftbook.payroll.memory_payroll_repository import InMemoryPayrollRepository
from src.shiftbook.shiftbook.payroll.service import PayrollService
from src.shiftbook.shiftbook.timeclock.memory_session_repository import InMemoryWorkSessionRepository
from src.shiftbook.shiftbook.timeclock.model import WorkSession

ANCHOR = date(2024, 1, 7)


@pytest.fixture()
def env():
    employees = InMemoryEmployeeRepository()
    sessions = InMemoryWorkSessionRepository()
    payroll = InMemoryPayrollRepository()
    notifier = RecordingNotifier()
    service = PayrollService(payroll, employees, sessions, notifier=notifier)

    john = employees.create(
        business_id="biz",
        user_id="user-1",
        first_name="John",
        last_name="Doe",
        email="john@example.com",
        role=Role.EMPLOYEE,
        hourly_rate=Decimal("15.00"),
        overtime_rate=None,
        start_date=date(2024, 1, 15),
    )
    return service, payroll, sessions, notifier, john


def _work(sessions: InMemoryWorkSessionRepository, employee_id: str, first_day: date, days: int, hours: float):
    for i in range(days):
        clock_in = datetime.combine(first_day + timedelta(days=i), datetime.min.time()).replace(hour=8)
        sessions.add(
            WorkSession(
                id=f"{employee_id}-{first_day.isoformat()}-{i}",
                business_id="biz",
                employee_id=employee_id,
                clock_in_time=clock_in,
                clock_out_time=clock_in + timedelta(hours=hours),
                total_hours=hours,
            )
        )


def test_sync_periods_creates_planned_window(env):
    service, _, _, _, _ = env

    periods = service.sync_periods("biz", anchor=ANCHOR, today=date(2024, 3, 20))

    assert len(periods) == 4
    # newest first
    assert periods[0].start_date == date(2024, 3, 31)
    assert [p.status for p in periods].count(PayrollPeriodStatus.CURRENT) == 1
    assert service.current_period("biz", today=date(2024, 3, 20)).start_date == date(2024, 3, 17)


def test_sync_periods_is_idempotent_and_advances_statuses(env):
    service, _, _, _, _ = env
    service.sync_periods("biz", anchor=ANCHOR, today=date(2024, 3, 20))

    again = service.sync_periods("biz", anchor=ANCHOR, today=date(2024, 3, 20))
    assert len(again) == 4

    later = service.sync_periods("biz", anchor=ANCHOR, today=date(2024, 4, 2))
    by_start = {p.start_date: p.status for p in later}

    assert len(later) == 5
    assert by_start[date(2024, 3, 17)] == PayrollPeriodStatus.COMPLETED
    assert by_start[date(2024, 3, 31)] == PayrollPeriodStatus.CURRENT
    assert by_start[date(2024, 4, 14)] == PayrollPeriodStatus.UPCOMING
    assert [p.status for p in later].count(PayrollPeriodStatus.CURRENT) == 1


def test_close_period_builds_draft_entries(env):
    service, payroll, sessions, notifier, john = env
    period = payroll.create_period(
        business_id="biz",
        start_date=date(2024, 3, 3),
        end_date=date(2024, 3, 16),
        status=PayrollPeriodStatus.CURRENT,
    )
    _work(sessions, john.id, date(2024, 3, 3), 5, 8.5)
    _work(sessions, john.id, date(2024, 3, 10), 5, 8.5)
    # outside the period
    _work(sessions, john.id, date(2024, 3, 17), 1, 8.0)

    entries = service.close_period(
        current_role=Role.MANAGER,
        period_id=period.id,
        deduction_rate="0.1",
        today=date(2024, 3, 20),
    )

    assert len(entries) == 1
    entry = entries[0]
    assert entry.employee_id == john.id
    assert entry.status == PayrollEntryStatus.DRAFT
    assert entry.regular_hours == Decimal("80.00")
    assert entry.overtime_hours == Decimal("5.00")
    assert entry.gross_pay == Decimal("1312.50")
    assert entry.deductions == Decimal("131.25")
    assert entry.net_pay == Decimal("1181.25")
    assert payroll.get_period(period.id).status == PayrollPeriodStatus.COMPLETED

    assert [e.type for e in notifier.events] == [NotificationType.PAYROLL_READY]
    assert notifier.events[0].data["employee_id"] == john.id


def test_close_period_twice_is_a_conflict(env):
    service, payroll, sessions, _, john = env
    period = payroll.create_period(
        business_id="biz",
        start_date=date(2024, 3, 3),
        end_date=date(2024, 3, 16),
        status=PayrollPeriodStatus.COMPLETED,
    )
    _work(sessions, john.id, date(2024, 3, 4), 1, 8.0)
    service.close_period(current_role=Role.OWNER, period_id=period.id, today=date(2024, 3, 20))

    with pytest.raises(StateConflict):
        service.close_period(current_role=Role.OWNER, period_id=period.id, today=date(2024, 3, 20))


def test_close_period_before_it_ends_is_rejected(env):
    service, payroll, _, _, _ = env
    period = payroll.create_period(
        business_id="biz",
        start_date=date(2024, 3, 17),
        end_date=date(2024, 3, 30),
        status=PayrollPeriodStatus.CURRENT,
    )

    with pytest.raises(InvalidTransition):
        service.close_period(current_role=Role.MANAGER, period_id=period.id, today=date(2024, 3, 20))


def test_close_period_skips_open_sessions_and_idle_employees(env):
    service, payroll, sessions, _, john = env
    period = payroll.create_period(
        business_id="biz",
        start_date=date(2024, 3, 3),
        end_date=date(2024, 3, 16),
        status=PayrollPeriodStatus.COMPLETED,
    )
    sessions.add(
        WorkSession(
            id="open-1",
            business_id="biz",
            employee_id=john.id,
            clock_in_time=datetime(2024, 3, 5, 9, 0),
        )
    )

    entries = service.close_period(current_role=Role.MANAGER, period_id=period.id, today=date(2024, 3, 20))

    assert entries == []


def test_close_period_validates_role_and_rate(env):
    service, payroll, _, _, _ = env
    period = payroll.create_period(
        business_id="biz",
        start_date=date(2024, 3, 3),
        end_date=date(2024, 3, 16),
        status=PayrollPeriodStatus.COMPLETED,
    )

    with pytest.raises(AuthorizationError):
        service.close_period(current_role=Role.EMPLOYEE, period_id=period.id, today=date(2024, 3, 20))
    with pytest.raises(ValidationError):
        service.close_period(
            current_role=Role.MANAGER,
            period_id=period.id,
            deduction_rate="lots",
            today=date(2024, 3, 20),
        )
    with pytest.raises(ValidationError):
        service.close_period(current_role=Role.MANAGER, period_id="missing", today=date(2024, 3, 20))


def test_advance_entry_moves_forward_only(env):
    service, payroll, _, _, john = env
    entry = payroll.create_entry(
        business_id="biz",
        employee_id=john.id,
        payroll_period_id="p1",
        regular_hours=Decimal("80"),
        overtime_hours=Decimal("5"),
        hourly_rate=Decimal("15"),
        overtime_rate=Decimal("22.50"),
        gross_pay=Decimal("1312.50"),
        deductions=Decimal("0"),
        net_pay=Decimal("1312.50"),
    )

    assert service.advance_entry(current_role=Role.MANAGER, entry_id=entry.id).status == PayrollEntryStatus.APPROVED
    assert service.advance_entry(current_role=Role.MANAGER, entry_id=entry.id).status == PayrollEntryStatus.PAID

    with pytest.raises(InvalidTransition):
        service.advance_entry(current_role=Role.MANAGER, entry_id=entry.id)
    with pytest.raises(AuthorizationError):
        service.advance_entry(current_role=Role.EMPLOYEE, entry_id=entry.id)


def test_list_entries_and_summary_filter_by_period_and_employee(env):
    service, payroll, _, _, john = env
    for period_id, gross in (("p1", "100.00"), ("p2", "250.00")):
        payroll.create_entry(
            business_id="biz",
            employee_id=john.id,
            payroll_period_id=period_id,
            regular_hours=Decimal("10"),
            overtime_hours=Decimal("0"),
            hourly_rate=Decimal("15"),
            overtime_rate=Decimal("22.50"),
            gross_pay=Decimal(gross),
            deductions=Decimal("0"),
            net_pay=Decimal(gross),
        )

    assert len(service.list_entries("biz")) == 2
    assert len(service.list_entries("biz", period_id="p2")) == 1
    assert service.list_entries("biz", employee_id="someone-else") == []

    summary = service.summary("biz", period_id="p2")
    assert summary.total_gross == Decimal("250.00")
    assert summary.entry_count == 1


class FlakyPayrollRepo(InMemoryPayrollRepository):
    """Fails the first entry write for one employee, like a dropped connection."""

    def __init__(self, fail_for: str):
        super().__init__()
        self.fail_for = fail_for

    def create_entry(self, **kwargs):
        if kwargs["employee_id"] == self.fail_for:
            self.fail_for = ""
            raise TransportError("Database operation failed")
        return super().create_entry(**kwargs)


def test_interrupted_close_is_finished_by_retrying():
    employees = InMemoryEmployeeRepository()
    sessions = InMemoryWorkSessionRepository()
    people = [
        employees.create(
            business_id="biz",
            user_id=None,
            first_name=first,
            last_name=last,
            email=f"{first.lower()}@example.com",
            role=Role.EMPLOYEE,
            hourly_rate=Decimal("20.00"),
            overtime_rate=None,
            start_date=date(2024, 1, 15),
        )
        for first, last in (("John", "Doe"), ("Jane", "Smith"))
    ]
    payroll = FlakyPayrollRepo(fail_for=people[1].id)
    service = PayrollService(payroll, employees, sessions)
    period = payroll.create_period(
        business_id="biz",
        start_date=date(2024, 3, 3),
        end_date=date(2024, 3, 16),
        status=PayrollPeriodStatus.COMPLETED,
    )
    for person in people:
        _work(sessions, person.id, date(2024, 3, 4), 2, 8.0)

    with pytest.raises(TransportError):
        service.close_period(current_role=Role.MANAGER, period_id=period.id, today=date(2024, 3, 20))
    assert [e.employee_id for e in payroll.list_entries("biz", period_id=period.id)] == [people[0].id]

    retried = service.close_period(current_role=Role.MANAGER, period_id=period.id, today=date(2024, 3, 20))

    assert [e.employee_id for e in retried] == [people[1].id]
    assert retried[0].gross_pay == Decimal("320.00")
    assert len(payroll.list_entries("biz", period_id=period.id)) == 2

    with pytest.raises(InvalidTransition):
        service.close_period(current_role=Role.MANAGER, period_id=period.id, today=date(2024, 3, 20))
