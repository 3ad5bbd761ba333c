from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Optional, Protocol, Sequence

from ..core.enums import Role
from .model import Employee


class EmployeeRepository(Protocol):
    """Repository interface for Employee.

    Note (DIP): the service layer depends on this interface, never on a
    concrete backend.
    """

    def list_for_business(self, business_id: str, *, include_inactive: bool = False) -> Sequence[Employee]:
        raise NotImplementedError

    def get_by_id(self, employee_id: str) -> Optional[Employee]:
        raise NotImplementedError

    def create(
        self,
        *,
        business_id: str,
        user_id: Optional[str],
        first_name: str,
        last_name: str,
        email: str,
        role: Role,
        hourly_rate: Decimal,
        overtime_rate: Optional[Decimal],
        start_date: date,
    ) -> Employee:
        raise NotImplementedError

    def update_rates(self, employee_id: str, *, hourly_rate: Decimal, overtime_rate: Decimal) -> bool:
        raise NotImplementedError

    def set_active(self, employee_id: str, *, is_active: bool) -> bool:
        raise NotImplementedError
