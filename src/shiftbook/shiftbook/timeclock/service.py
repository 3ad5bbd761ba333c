from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Optional, Sequence

from ..common.datetime_utils import day_bounds, now_local, week_start_for
from ..core.enums import NotificationType, ScheduleStatus
from ..core.exceptions import AlreadyClockedIn, NotClockedIn, ValidationError
from ..employees.repository import EmployeeRepository
from ..notifications.dispatcher import NotificationEvent, Notifier, dispatch
from ..payroll.calculator.aggregates import WeeklyHours, weekly_hours
from ..schedules.model import Schedule
from ..schedules.repository import ScheduleRepository
from .model import WorkSession
from .repository import WorkSessionRepository

logger = logging.getLogger(__name__)


def compute_total_hours(clock_in: datetime, clock_out: datetime, break_minutes: int) -> float:
    """(out - in) in hours minus the break, never below zero."""
    worked = (clock_out - clock_in).total_seconds() / 3600 - int(break_minutes or 0) / 60
    return round(max(0.0, worked), 2)


@dataclass(frozen=True)
class WeekOverview:
    week_start: date
    schedules: Sequence[Schedule]
    sessions: Sequence[WorkSession]
    hours: WeeklyHours
    active_session: Optional[WorkSession]


class TimeClockService:
    """Use case: clock in/out with at most one open session per employee."""

    def __init__(
        self,
        sessions: WorkSessionRepository,
        employees: EmployeeRepository,
        schedules: ScheduleRepository,
        *,
        notifier: Optional[Notifier] = None,
    ):
        self._sessions = sessions
        self._employees = employees
        self._schedules = schedules
        self._notifier = notifier

    def clock_in(
        self,
        business_id: str,
        employee_id: str,
        *,
        schedule_id: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> WorkSession:
        now = now or now_local()

        employee = self._employees.get_by_id(employee_id)
        if not employee or employee.business_id != business_id:
            raise ValidationError("Employee not found")
        if not employee.is_active:
            raise ValidationError("Employee is not active")

        break_minutes = 0
        if schedule_id:
            schedule = self._schedules.get_by_id(schedule_id)
            if not schedule or schedule.employee_id != employee_id:
                raise ValidationError("Schedule not found for this employee")
            # The planned break of the linked shift is deducted on clock-out.
            break_minutes = schedule.break_duration

        # Re-read storage; any open session (even from an earlier day) blocks a new one.
        if self._sessions.get_open_for_employee(employee_id):
            raise AlreadyClockedIn("You are already clocked in")

        session = self._sessions.create_open(
            business_id=business_id,
            employee_id=employee_id,
            clock_in_time=now,
            schedule_id=schedule_id,
            break_duration=break_minutes,
        )
        logger.info("Clocked in", extra={"employee_id": employee_id, "session_id": session.id})

        dispatch(
            self._notifier,
            NotificationEvent(
                type=NotificationType.CLOCK_REMINDER,
                title="Clocked In",
                body=f"{employee.full_name} clocked in at {now.strftime('%H:%M')}",
                business_id=business_id,
                data={"employee_id": employee_id, "session_id": session.id},
            ),
        )
        return session

    def clock_out(
        self,
        employee_id: str,
        *,
        business_id: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> WorkSession:
        if business_id is not None:
            employee = self._employees.get_by_id(employee_id)
            if not employee or employee.business_id != business_id:
                raise ValidationError("Employee not found")

        session = self._sessions.get_open_for_employee(employee_id)
        if not session:
            raise NotClockedIn("You are not clocked in")
        return self._close(session, now=now)

    def get_session(self, session_id: str) -> WorkSession:
        session = self._sessions.get_by_id(session_id)
        if not session:
            raise ValidationError("Work session not found")
        return session

    def clock_out_session(self, session_id: str, *, now: Optional[datetime] = None) -> WorkSession:
        session = self._sessions.get_by_id(session_id)
        if not session or not session.is_open:
            raise NotClockedIn("No open work session to clock out of")
        return self._close(session, now=now)

    def _close(self, session: WorkSession, *, now: Optional[datetime]) -> WorkSession:
        clock_out_time = now or now_local()
        if clock_out_time < session.clock_in_time:
            raise ValidationError("Clock-out time cannot be before clock-in time")

        total = compute_total_hours(session.clock_in_time, clock_out_time, session.break_duration)
        if not self._sessions.close(session.id, clock_out_time=clock_out_time, total_hours=total):
            raise NotClockedIn("Work session was already closed")

        if session.schedule_id:
            self._complete_schedule(session.schedule_id)

        logger.info(
            "Clocked out",
            extra={"employee_id": session.employee_id, "session_id": session.id, "total_hours": total},
        )
        dispatch(
            self._notifier,
            NotificationEvent(
                type=NotificationType.CLOCK_REMINDER,
                title="Clocked Out",
                body=f"Session closed with {total:.1f} hrs",
                business_id=session.business_id,
                data={"employee_id": session.employee_id, "session_id": session.id, "total_hours": total},
            ),
        )
        return self._sessions.get_by_id(session.id) or session

    def _complete_schedule(self, schedule_id: str) -> None:
        # Best effort: a schedule already moved on by a manager stays as it is.
        done = self._schedules.update_status(
            schedule_id,
            status=ScheduleStatus.COMPLETED,
            expected=ScheduleStatus.SCHEDULED,
        )
        if not done:
            logger.info("Linked schedule not marked completed", extra={"schedule_id": schedule_id})

    def current_session(self, employee_id: str, *, today: Optional[date] = None) -> Optional[WorkSession]:
        """The open session shown as active.

        Only a session clocked in on ``today`` qualifies; one left open past
        midnight stays open in storage but is not surfaced here.
        """
        today = today or now_local().date()
        session = self._sessions.get_open_for_employee(employee_id)
        if session and session.clock_in_time.date() == today:
            return session
        return None

    @staticmethod
    def elapsed(session: WorkSession, *, now: Optional[datetime] = None) -> timedelta:
        end = session.clock_out_time or now or now_local()
        return max(timedelta(0), end - session.clock_in_time)

    def list_sessions(
        self,
        business_id: str,
        *,
        employee_id: Optional[str] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> Sequence[WorkSession]:
        start_dt = datetime.combine(start, time.min) if start else None
        end_dt = day_bounds(end)[1] - timedelta(microseconds=1) if end else None
        return self._sessions.list_range(business_id, employee_id=employee_id, start=start_dt, end=end_dt)

    def my_week(self, business_id: str, employee_id: str, *, today: Optional[date] = None) -> WeekOverview:
        today = today or now_local().date()
        week_start = week_start_for(today)

        schedules = self._schedules.list_range(business_id, start=week_start, employee_id=employee_id)
        sessions = self.list_sessions(business_id, employee_id=employee_id, start=week_start)
        return WeekOverview(
            week_start=week_start,
            schedules=schedules,
            sessions=sessions,
            hours=weekly_hours(schedules, sessions, week_start),
            active_session=self.current_session(employee_id, today=today),
        )
