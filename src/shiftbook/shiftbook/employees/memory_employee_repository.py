from __future__ import annotations

import threading
import uuid
from dataclasses import replace
from datetime import date
from decimal import Decimal
from typing import Optional, Sequence

from ..core.enums import Role
from .model import Employee
from .repository import EmployeeRepository


class InMemoryEmployeeRepository(EmployeeRepository):
    def __init__(self):
        self._lock = threading.Lock()
        self._by_id: dict[str, Employee] = {}

    def add(self, employee: Employee) -> Employee:
        with self._lock:
            self._by_id[employee.id] = employee
        return employee

    def list_for_business(self, business_id: str, *, include_inactive: bool = False) -> Sequence[Employee]:
        with self._lock:
            items = [
                e
                for e in self._by_id.values()
                if e.business_id == business_id and (include_inactive or e.is_active)
            ]
        items.sort(key=lambda e: (e.last_name, e.first_name))
        return items

    def get_by_id(self, employee_id: str) -> Optional[Employee]:
        with self._lock:
            return self._by_id.get(employee_id)

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
        employee = Employee(
            id=str(uuid.uuid4()),
            business_id=business_id,
            user_id=user_id,
            first_name=first_name,
            last_name=last_name,
            email=email,
            role=role,
            hourly_rate=hourly_rate,
            overtime_rate=overtime_rate,
            start_date=start_date,
        )
        return self.add(employee)

    def update_rates(self, employee_id: str, *, hourly_rate: Decimal, overtime_rate: Decimal) -> bool:
        with self._lock:
            current = self._by_id.get(employee_id)
            if not current:
                return False
            self._by_id[employee_id] = replace(current, hourly_rate=hourly_rate, overtime_rate=overtime_rate)
            return True

    def set_active(self, employee_id: str, *, is_active: bool) -> bool:
        with self._lock:
            current = self._by_id.get(employee_id)
            if not current:
                return False
            self._by_id[employee_id] = replace(current, is_active=is_active)
            return True
