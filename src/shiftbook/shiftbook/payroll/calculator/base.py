from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable

from ...employees.model import Employee
from ...timeclock.model import WorkSession


@dataclass(frozen=True)
class PayComputation:
    regular_hours: Decimal
    overtime_hours: Decimal
    hourly_rate: Decimal
    overtime_rate: Decimal
    gross_pay: Decimal
    deductions: Decimal
    net_pay: Decimal


class PayrollCalculator(ABC):
    """Calculator interface (Strategy Pattern for payroll)."""

    @abstractmethod
    def split_hours(self, sessions: Iterable[WorkSession]) -> tuple[Decimal, Decimal]:
        """Return (regular_hours, overtime_hours) for completed sessions."""
        raise NotImplementedError

    @abstractmethod
    def compute(
        self,
        employee: Employee,
        sessions: Iterable[WorkSession],
        *,
        deduction_rate: Decimal = Decimal("0"),
    ) -> PayComputation:
        raise NotImplementedError
