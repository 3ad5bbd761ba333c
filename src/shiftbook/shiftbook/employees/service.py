from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date
from typing import Optional, Sequence

from ..common.validators import optional_money, require_manager, require_money, require_non_empty
from ..core.enums import Role
from ..core.exceptions import ValidationError
from ..payroll.calculator.aggregates import effective_overtime_rate, round_currency
from .model import Employee
from .repository import EmployeeRepository

logger = logging.getLogger(__name__)


class EmployeeService:
    """Use case: manage business members and their pay rates."""

    def __init__(self, employees: EmployeeRepository):
        self._employees = employees

    def list_employees(self, business_id: str, *, include_inactive: bool = False) -> Sequence[Employee]:
        return self._employees.list_for_business(business_id, include_inactive=include_inactive)

    def get_employee(self, employee_id: str) -> Employee:
        employee = self._employees.get_by_id(employee_id)
        if not employee:
            raise ValidationError("Employee not found")
        return employee

    def create_employee(
        self,
        *,
        current_role: Role,
        business_id: str,
        first_name: str,
        last_name: str,
        email: str,
        role: Role,
        hourly_rate: object,
        overtime_rate: object = None,
        start_date: Optional[date] = None,
        user_id: Optional[str] = None,
    ) -> Employee:
        require_manager(current_role)

        first_name = require_non_empty(first_name, "First name")
        last_name = (last_name or "").strip()
        email = (email or "").strip()
        hourly = round_currency(require_money(hourly_rate, "Hourly rate"))
        supplied_ot = optional_money(overtime_rate, "Overtime rate")

        if Role(role) == Role.OWNER and Role(current_role) != Role.OWNER:
            raise ValidationError("Only an owner can add another owner")

        draft = Employee(
            id="",
            business_id=business_id,
            user_id=user_id,
            first_name=first_name,
            last_name=last_name,
            email=email,
            role=Role(role),
            hourly_rate=hourly,
            start_date=start_date or date.today(),
        )
        employee = self._employees.create(
            business_id=business_id,
            user_id=user_id,
            first_name=first_name,
            last_name=last_name,
            email=email,
            role=Role(role),
            hourly_rate=hourly,
            overtime_rate=effective_overtime_rate(draft, supplied_ot),
            start_date=draft.start_date,
        )
        logger.info("Employee created", extra={"employee_id": employee.id, "business_id": business_id})
        return employee

    def update_rate(
        self,
        *,
        current_role: Role,
        employee_id: str,
        hourly_rate: object,
        overtime_rate: object = None,
    ) -> Employee:
        """Set a new hourly rate; overtime defaults to 1.5x the new rate."""
        require_manager(current_role)

        hourly = round_currency(require_money(hourly_rate, "Hourly rate"))
        supplied_ot = optional_money(overtime_rate, "Overtime rate")

        employee = self.get_employee(employee_id)
        ot = effective_overtime_rate(
            replace(employee, hourly_rate=hourly),
            supplied_ot,
        )

        # rowcount is 0 on MySQL when values are unchanged, so the re-read decides.
        self._employees.update_rates(employee_id, hourly_rate=hourly, overtime_rate=ot)
        updated = self.get_employee(employee_id)
        logger.info(
            "Employee rate updated",
            extra={"employee_id": employee_id, "hourly_rate": str(hourly), "overtime_rate": str(ot)},
        )
        return updated

    def deactivate(self, *, current_role: Role, employee_id: str) -> None:
        require_manager(current_role)

        employee = self.get_employee(employee_id)
        if employee.role == Role.OWNER:
            raise ValidationError("The business owner cannot be deactivated")
        if not employee.is_active:
            return
        if not self._employees.set_active(employee_id, is_active=False):
            raise ValidationError("Deactivating employee failed")
