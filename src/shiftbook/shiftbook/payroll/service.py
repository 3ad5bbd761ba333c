from __future__ import annotations

import logging
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from typing import Optional, Sequence

from ..common.datetime_utils import now_local
from ..common.validators import require_manager
from ..core.constants import DEFAULT_PERIODS_FUTURE, DEFAULT_PERIODS_PAST, PAY_PERIOD_DAYS
from ..core.enums import NotificationType, PayrollEntryStatus, PayrollPeriodStatus, Role
from ..core.exceptions import InvalidTransition, ValidationError
from ..employees.repository import EmployeeRepository
from ..notifications.dispatcher import NotificationEvent, Notifier, dispatch
from ..timeclock.repository import WorkSessionRepository
from .calculator.aggregates import PayrollSummary, payroll_summary, period_status_on, plan_periods
from .calculator.base import PayrollCalculator
from .calculator.standard_calculator import StandardPayrollCalculator
from .model import PayrollEntry, PayrollPeriod
from .repository import PayrollRepository

logger = logging.getLogger(__name__)

_NEXT_ENTRY_STATUS = {
    PayrollEntryStatus.DRAFT: PayrollEntryStatus.APPROVED,
    PayrollEntryStatus.APPROVED: PayrollEntryStatus.PAID,
}


class PayrollService:
    """Use case: pay periods, their entries and the roll-up shown to managers."""

    def __init__(
        self,
        payroll: PayrollRepository,
        employees: EmployeeRepository,
        sessions: WorkSessionRepository,
        *,
        calculator: Optional[PayrollCalculator] = None,
        notifier: Optional[Notifier] = None,
        period_days: int = PAY_PERIOD_DAYS,
    ):
        self._payroll = payroll
        self._employees = employees
        self._sessions = sessions
        self._calculator = calculator or StandardPayrollCalculator()
        self._notifier = notifier
        self._period_days = int(period_days)

    # -------- Periods --------
    def list_periods(self, business_id: str) -> Sequence[PayrollPeriod]:
        return self._payroll.list_periods(business_id)

    def get_period(self, period_id: str) -> PayrollPeriod:
        period = self._payroll.get_period(period_id)
        if not period:
            raise ValidationError("Payroll period not found")
        return period

    def current_period(self, business_id: str, *, today: Optional[date] = None) -> Optional[PayrollPeriod]:
        today = today or now_local().date()
        for p in self._payroll.list_periods(business_id):
            if p.contains(today):
                return p
        return None

    def sync_periods(
        self,
        business_id: str,
        *,
        anchor: date,
        today: Optional[date] = None,
        past: int = DEFAULT_PERIODS_PAST,
        future: int = DEFAULT_PERIODS_FUTURE,
    ) -> Sequence[PayrollPeriod]:
        """Create planned periods that are missing and bring stored statuses up to date."""
        today = today or now_local().date()
        existing = list(self._payroll.list_periods(business_id))

        created = 0
        for planned in plan_periods(
            anchor=anchor,
            today=today,
            past=past,
            future=future,
            length_days=self._period_days,
        ):
            # Periods never overlap; a stored period covering any planned day wins.
            if any(p.start_date <= planned.end_date and planned.start_date <= p.end_date for p in existing):
                continue
            existing.append(
                self._payroll.create_period(
                    business_id=business_id,
                    start_date=planned.start_date,
                    end_date=planned.end_date,
                    status=planned.status,
                )
            )
            created += 1

        advanced = 0
        for p in existing:
            status = period_status_on(p.start_date, p.end_date, today)
            if p.status != status:
                self._payroll.update_period_status(p.id, status=status)
                advanced += 1

        if created or advanced:
            logger.info(
                "Payroll periods synced",
                extra={"business_id": business_id, "periods_created": created, "periods_advanced": advanced},
            )
        return self._payroll.list_periods(business_id)

    def close_period(
        self,
        *,
        current_role: Role,
        period_id: str,
        deduction_rate: object = Decimal("0"),
        today: Optional[date] = None,
    ) -> Sequence[PayrollEntry]:
        """Build draft entries from completed work sessions inside the period.

        Employees that already have an entry for the period are skipped, so a
        close interrupted by a backend failure can be retried. Closing a period
        where nothing is left to add is an InvalidTransition.
        """
        require_manager(current_role)
        today = today or now_local().date()

        try:
            rate = Decimal(str(deduction_rate if deduction_rate not in (None, "") else "0"))
        except ArithmeticError:
            raise ValidationError("Deduction rate must be a number")
        if not rate.is_finite() or rate < 0 or rate > 1:
            raise ValidationError("Deduction rate must be between 0 and 1")

        period = self.get_period(period_id)
        if period.end_date >= today:
            raise InvalidTransition("A payroll period can only be closed after its last day")
        already_paid = {e.employee_id for e in self._payroll.list_entries(period.business_id, period_id=period.id)}

        start = datetime.combine(period.start_date, time.min)
        end = datetime.combine(period.end_date + timedelta(days=1), time.min) - timedelta(microseconds=1)

        entries: list[PayrollEntry] = []
        for employee in self._employees.list_for_business(period.business_id, include_inactive=True):
            if employee.id in already_paid:
                continue
            sessions = [
                s
                for s in self._sessions.list_range(period.business_id, employee_id=employee.id, start=start, end=end)
                if not s.is_open
            ]
            if not sessions:
                continue

            pay = self._calculator.compute(employee, sessions, deduction_rate=rate)
            entry = self._payroll.create_entry(
                business_id=period.business_id,
                employee_id=employee.id,
                payroll_period_id=period.id,
                regular_hours=pay.regular_hours,
                overtime_hours=pay.overtime_hours,
                hourly_rate=pay.hourly_rate,
                overtime_rate=pay.overtime_rate,
                gross_pay=pay.gross_pay,
                deductions=pay.deductions,
                net_pay=pay.net_pay,
            )
            entries.append(entry)

            dispatch(
                self._notifier,
                NotificationEvent(
                    type=NotificationType.PAYROLL_READY,
                    title="Payroll Ready",
                    body=(
                        f"Your pay for {period.start_date.isoformat()} to "
                        f"{period.end_date.isoformat()} is ready: ${pay.net_pay}"
                    ),
                    business_id=period.business_id,
                    data={"employee_id": employee.id, "entry_id": entry.id, "period_id": period.id},
                ),
            )

        if already_paid and not entries:
            raise InvalidTransition("Payroll period already has entries")

        if period.status != PayrollPeriodStatus.COMPLETED:
            self._payroll.update_period_status(period.id, status=PayrollPeriodStatus.COMPLETED)

        logger.info("Payroll period closed", extra={"period_id": period.id, "entries": len(entries)})
        return entries

    # -------- Entries --------
    def list_entries(
        self,
        business_id: str,
        *,
        period_id: Optional[str] = None,
        employee_id: Optional[str] = None,
    ) -> Sequence[PayrollEntry]:
        return self._payroll.list_entries(business_id, period_id=period_id, employee_id=employee_id)

    def summary(
        self,
        business_id: str,
        *,
        period_id: Optional[str] = None,
        employee_id: Optional[str] = None,
    ) -> PayrollSummary:
        return payroll_summary(self.list_entries(business_id, period_id=period_id, employee_id=employee_id))

    def get_entry(self, entry_id: str) -> PayrollEntry:
        entry = self._payroll.get_entry(entry_id)
        if not entry:
            raise ValidationError("Payroll entry not found")
        return entry

    def advance_entry(self, *, current_role: Role, entry_id: str) -> PayrollEntry:
        """draft -> approved -> paid, one step per call."""
        require_manager(current_role)

        entry = self.get_entry(entry_id)

        nxt = _NEXT_ENTRY_STATUS.get(entry.status)
        if nxt is None:
            raise InvalidTransition(f"Payroll entry is already {entry.status.value}")

        if not self._payroll.update_entry_status(entry_id, status=nxt, expected=entry.status):
            raise InvalidTransition("Payroll entry was changed by someone else")

        logger.info("Payroll entry advanced", extra={"entry_id": entry_id, "status": nxt.value})
        return self._payroll.get_entry(entry_id) or entry
