from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest

from src.shiftbook.shiftbook.core.enums import NotificationType, Role, ScheduleStatus
from src.shiftbook.shiftbook.core.exceptions import (
    AuthorizationError,
    InvalidTimeRange,
    InvalidTransition,
    ValidationError,
)
from src.shiftbook.shiftbook.employees.memory_employee_repository import InMemoryEmployeeRepository
from src.shiftbook.shiftbook.notifications.dispatcher import RecordingNotifier
from src.shiftbook.shiftbook.schedules.memory_schedule_repository import InMemoryScheduleRepository
from src.shiftbook.shiftbook.schedules.service import ScheduleService


class FailingNotifier:
    def notify(self, event):
        raise RuntimeError("push gateway down")


def _build(notifier=None):
    employees = InMemoryEmployeeRepository()
    schedules = InMemoryScheduleRepository()
    notifier = notifier or RecordingNotifier()
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
    return ScheduleService(schedules, employees, notifier=notifier), employees, notifier, john


def _create(service, employee_id, **overrides):
    kwargs = dict(
        current_role=Role.MANAGER,
        created_by="mgr-1",
        business_id="biz",
        employee_id=employee_id,
        work_date=date(2024, 3, 20),
        start_time="9:00",
        end_time="17:00",
    )
    kwargs.update(overrides)
    return service.create_schedule(**kwargs)


def test_create_normalizes_times_and_notifies():
    service, _, notifier, john = _build()

    shift = _create(service, john.id, notes="  front desk ")

    assert shift.start_time == "09:00"
    assert shift.end_time == "17:00"
    assert shift.break_duration == 30
    assert shift.status == ScheduleStatus.SCHEDULED
    assert shift.notes == "front desk"
    assert notifier.events[0].type == NotificationType.SCHEDULE_UPDATE
    assert notifier.events[0].data == {"employee_id": john.id, "schedule_date": "2024-03-20"}


@pytest.mark.parametrize(
    "start, end",
    [("17:00", "09:00"), ("09:00", "09:00"), ("22:00", "02:00")],
)
def test_create_rejects_non_positive_shift(start, end):
    service, _, _, john = _build()

    with pytest.raises(InvalidTimeRange):
        _create(service, john.id, start_time=start, end_time=end)


def test_create_validation():
    service, employees, _, john = _build()

    with pytest.raises(ValidationError):
        _create(service, john.id, start_time="nine")
    with pytest.raises(ValidationError):
        _create(service, john.id, break_duration=-5)
    with pytest.raises(ValidationError):
        _create(service, "nobody")
    with pytest.raises(AuthorizationError):
        _create(service, john.id, current_role=Role.EMPLOYEE)

    employees.set_active(john.id, is_active=False)
    with pytest.raises(ValidationError):
        _create(service, john.id)


def test_notification_failure_does_not_fail_create():
    service, _, _, john = _build(FailingNotifier())

    shift = _create(service, john.id)

    assert shift.id


def test_list_schedules_range_and_order():
    service, _, _, john = _build()
    late = _create(service, john.id, work_date=date(2024, 3, 22))
    early = _create(service, john.id, work_date=date(2024, 3, 18))
    _create(service, john.id, work_date=date(2024, 3, 30))

    listed = service.list_schedules("biz", start=date(2024, 3, 17), end=date(2024, 3, 23))

    assert [s.id for s in listed] == [early.id, late.id]
    with pytest.raises(ValidationError):
        service.list_schedules("biz", start=date(2024, 3, 23), end=date(2024, 3, 17))


def test_set_status_moves_scheduled_once():
    service, _, _, john = _build()
    shift = _create(service, john.id)

    out = service.set_status(current_role=Role.MANAGER, schedule_id=shift.id, status="missed")
    assert out.status == ScheduleStatus.MISSED

    with pytest.raises(InvalidTransition):
        service.set_status(current_role=Role.MANAGER, schedule_id=shift.id, status="cancelled")


def test_set_status_rejects_scheduled_target_and_employees():
    service, _, _, john = _build()
    shift = _create(service, john.id)

    with pytest.raises(ValidationError):
        service.set_status(current_role=Role.MANAGER, schedule_id=shift.id, status=ScheduleStatus.SCHEDULED)
    with pytest.raises(AuthorizationError):
        service.set_status(current_role=Role.EMPLOYEE, schedule_id=shift.id, status=ScheduleStatus.CANCELLED)
    with pytest.raises(ValidationError):
        service.set_status(current_role=Role.MANAGER, schedule_id="missing", status=ScheduleStatus.CANCELLED)


def test_set_status_scoped_to_business():
    service, _, _, john = _build()
    shift = _create(service, john.id)

    with pytest.raises(ValidationError):
        service.set_status(
            current_role=Role.MANAGER,
            schedule_id=shift.id,
            status=ScheduleStatus.CANCELLED,
            business_id="other-biz",
        )

    assert service.get_schedule(shift.id).status == ScheduleStatus.SCHEDULED
    out = service.set_status(
        current_role=Role.MANAGER,
        schedule_id=shift.id,
        status=ScheduleStatus.CANCELLED,
        business_id="biz",
    )
    assert out.status == ScheduleStatus.CANCELLED
