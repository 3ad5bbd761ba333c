from __future__ import annotations

import logging
from datetime import date
from typing import Optional, Sequence

from ..common.datetime_utils import format_hhmm, parse_hhmm
from ..common.validators import require_manager
from ..core.constants import DEFAULT_BREAK_MINUTES
from ..core.enums import NotificationType, Role, ScheduleStatus
from ..core.exceptions import InvalidTransition, ValidationError
from ..employees.repository import EmployeeRepository
from ..notifications.dispatcher import NotificationEvent, Notifier, dispatch
from ..payroll.calculator.aggregates import shift_duration_hours
from .model import Schedule
from .repository import ScheduleRepository

logger = logging.getLogger(__name__)

_TERMINAL_TARGETS = {ScheduleStatus.COMPLETED, ScheduleStatus.MISSED, ScheduleStatus.CANCELLED}


class ScheduleService:
    def __init__(
        self,
        schedules: ScheduleRepository,
        employees: EmployeeRepository,
        *,
        notifier: Optional[Notifier] = None,
    ):
        self._schedules = schedules
        self._employees = employees
        self._notifier = notifier

    def list_schedules(
        self,
        business_id: str,
        *,
        start: Optional[date] = None,
        end: Optional[date] = None,
        employee_id: Optional[str] = None,
    ) -> Sequence[Schedule]:
        if start and end and end < start:
            raise ValidationError("End date must be on or after start date")
        return self._schedules.list_range(business_id, start=start, end=end, employee_id=employee_id)

    def create_schedule(
        self,
        *,
        current_role: Role,
        created_by: Optional[str],
        business_id: str,
        employee_id: str,
        work_date: date,
        start_time: str,
        end_time: str,
        break_duration: int = DEFAULT_BREAK_MINUTES,
        notes: Optional[str] = None,
    ) -> Schedule:
        require_manager(current_role)

        start = format_hhmm(parse_hhmm(start_time))
        end = format_hhmm(parse_hhmm(end_time))
        shift_duration_hours(start, end)

        if int(break_duration) < 0:
            raise ValidationError("Break duration must be zero or greater")

        employee = self._employees.get_by_id(employee_id)
        if not employee or employee.business_id != business_id:
            raise ValidationError("Employee not found")
        if not employee.is_active:
            raise ValidationError("Employee is not active")

        schedule = self._schedules.create(
            business_id=business_id,
            employee_id=employee_id,
            work_date=work_date,
            start_time=start,
            end_time=end,
            break_duration=int(break_duration),
            created_by=created_by,
            notes=(notes or "").strip() or None,
        )

        dispatch(
            self._notifier,
            NotificationEvent(
                type=NotificationType.SCHEDULE_UPDATE,
                title="Schedule Updated",
                body=f"Your schedule for {work_date.isoformat()} has been updated",
                business_id=business_id,
                data={"employee_id": employee_id, "schedule_date": work_date.isoformat()},
            ),
        )
        return schedule

    def get_schedule(self, schedule_id: str) -> Schedule:
        schedule = self._schedules.get_by_id(schedule_id)
        if not schedule:
            raise ValidationError("Schedule not found")
        return schedule

    def set_status(
        self,
        *,
        current_role: Role,
        schedule_id: str,
        status: ScheduleStatus,
        business_id: Optional[str] = None,
    ) -> Schedule:
        """Move a scheduled shift to completed, missed or cancelled."""
        require_manager(current_role)

        try:
            status = ScheduleStatus(status)
        except ValueError:
            raise ValidationError(f"Unknown schedule status: {status!r}")
        if status not in _TERMINAL_TARGETS:
            raise ValidationError("A shift can only become completed, missed or cancelled")

        schedule = self.get_schedule(schedule_id)
        if business_id is not None and schedule.business_id != business_id:
            raise ValidationError("Schedule not found")
        if schedule.status != ScheduleStatus.SCHEDULED:
            raise InvalidTransition(f"Schedule is already {schedule.status.value}")

        if not self._schedules.update_status(schedule_id, status=status, expected=ScheduleStatus.SCHEDULED):
            raise InvalidTransition("Schedule was changed by someone else")

        logger.info("Schedule status changed", extra={"schedule_id": schedule_id, "status": status.value})
        return self._schedules.get_by_id(schedule_id) or schedule
